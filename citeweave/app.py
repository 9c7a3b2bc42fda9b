"""
citeweave - Flask Application
JSON API over a per-session citation processor.

Endpoints:
- POST /api/processor    - Compile a style and start a new processor
- POST /api/citations    - Append citations
- POST /api/uncited      - Add uncited items
- GET  /api/citations    - Rendered citations, in order
- GET  /api/bibliography - Rendered bibliography and formatting params
- GET  /api/formats      - Registered output formats
- POST /reset            - Drop the session's processor
- GET  /health           - Health check

The style compiler, item getter and locale getter are read from
app.config['STYLE_COMPILER'], ['ITEM_GETTER'] and ['LOCALE_GETTER'].
"""

import logging
import os
import uuid
from datetime import datetime, timezone

from flask import Flask, jsonify, request, session

from . import __version__
from .errors import ItemFetchError, LocaleUnavailable, StyleCompileError, UnknownFormatError
from .formatters import available_formats
from .processor import create_processor

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = os.environ.get('SECRET_KEY', 'citeweave-dev-key-change-in-production')
app.config.setdefault('STYLE_COMPILER', None)
app.config.setdefault('ITEM_GETTER', None)
app.config.setdefault('LOCALE_GETTER', None)

# =============================================================================
# IN-MEMORY SESSION STORAGE
# =============================================================================
# One Processor per session. Processors are single-writer, so a session
# must not issue concurrent appends.

_sessions = {}


def get_processor():
    """Processor of the current session, or None."""
    session_id = session.get('session_id')
    if not session_id:
        return None
    return _sessions.get(session_id)


def set_processor(processor):
    session_id = session.get('session_id')
    if not session_id:
        session_id = str(uuid.uuid4())
        session['session_id'] = session_id
    _sessions[session_id] = processor


def clear_session_data():
    """Clear current session data."""
    session_id = session.pop('session_id', None)
    if session_id:
        _sessions.pop(session_id, None)


def _error(message, status):
    return jsonify({'success': False, 'error': message}), status


def _no_processor():
    return _error('No processor; POST /api/processor first', 409)


def _flag(value):
    return str(value).lower() in ('1', 'true', 'yes')


# =============================================================================
# API ROUTES
# =============================================================================

@app.route('/api/processor', methods=['POST'])
def api_processor():
    """
    Compile a style and start a new processor for this session.

    Request JSON:
        { "style": <raw style>, "locale": "de-DE", "force_locale": false }

    Response JSON:
        { "success": true, "locale": "de-DE", "has_bibliography": true }
    """
    data = request.get_json(silent=True) or {}
    raw_style = data.get('style')
    if not raw_style:
        return _error('No style provided', 400)

    compiler = app.config.get('STYLE_COMPILER')
    item_getter = app.config.get('ITEM_GETTER')
    locale_getter = app.config.get('LOCALE_GETTER')
    if compiler is None or item_getter is None or locale_getter is None:
        return _error('Style compiler, item getter and locale getter must be configured', 500)

    try:
        processor = create_processor(
            raw_style,
            item_getter,
            locale_getter,
            compiler,
            locale=data.get('locale'),
            force_locale=bool(data.get('force_locale', False)),
        )
    except (StyleCompileError, LocaleUnavailable) as e:
        return _error(str(e), 422)

    set_processor(processor)
    return jsonify({
        'success': True,
        'locale': processor.style.locale,
        'has_bibliography': processor.style.has_bibliography,
    })


@app.route('/api/citations', methods=['POST'])
def api_append_citations():
    """
    Append citations.

    Request JSON:
        { "citations": [[{"id": "doe2001", "locator": "12"}], ...] }

    Response JSON:
        { "success": true, "citations": 3, "items": 2 }
    """
    processor = get_processor()
    if processor is None:
        return _no_processor()

    data = request.get_json(silent=True) or {}
    citations = data.get('citations')
    if not isinstance(citations, list) or not all(isinstance(c, list) for c in citations):
        return _error('citations must be a list of lists of cites', 400)

    try:
        processor.append_citations(citations)
    except ValueError as e:
        return _error(str(e), 400)
    except ItemFetchError as e:
        logger.warning("[API] Item fetch failed: %s", e)
        return _error(str(e), 502)

    return jsonify({
        'success': True,
        'citations': len(processor.citations),
        'items': len(processor.cache),
    })


@app.route('/api/uncited', methods=['POST'])
def api_add_uncited():
    """
    Add items to the bibliography without citing them.

    Request JSON:
        { "ids": ["doe2001", "roe1999"] }
    """
    processor = get_processor()
    if processor is None:
        return _no_processor()

    data = request.get_json(silent=True) or {}
    ids = data.get('ids')
    if not isinstance(ids, list):
        return _error('ids must be a list', 400)

    try:
        processor.add_uncited([str(i) for i in ids])
    except ItemFetchError as e:
        return _error(str(e), 502)

    return jsonify({'success': True, 'items': len(processor.cache)})


@app.route('/api/citations', methods=['GET'])
def api_render_citations():
    """
    Render all citations.

    Query: ?format=plain&no_links=false

    Response JSON:
        { "success": true, "citations": ["(Doe 2001, 12)", ...] }
    """
    processor = get_processor()
    if processor is None:
        return _no_processor()

    try:
        rendered = processor.render_citations(
            request.args.get('format', 'plain'),
            no_links=_flag(request.args.get('no_links', 'false')),
        )
    except UnknownFormatError as e:
        return _error(str(e), 400)

    return jsonify({'success': True, 'citations': rendered})


@app.route('/api/bibliography', methods=['GET'])
def api_render_bibliography():
    """
    Render the bibliography.

    Query: ?format=plain&no_link_targets=false

    Response JSON:
        { "success": true, "bibliography": "...", "params": {...} }
    """
    processor = get_processor()
    if processor is None:
        return _no_processor()

    try:
        bibliography, params = processor.render_bibliography(
            request.args.get('format', 'plain'),
            no_link_targets=_flag(request.args.get('no_link_targets', 'false')),
        )
    except UnknownFormatError as e:
        return _error(str(e), 400)

    return jsonify({
        'success': True,
        'bibliography': bibliography,
        'params': params.to_dict(),
    })


@app.route('/api/formats', methods=['GET'])
def api_formats():
    """Return available output formats."""
    return jsonify({'formats': available_formats()})


@app.route('/reset', methods=['POST'])
def reset():
    """Drop the session's processor."""
    clear_session_data()
    return jsonify({'success': True})


@app.route('/health', methods=['GET'])
def health():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'version': __version__,
        'timestamp': datetime.now(timezone.utc).isoformat()
    })


# =============================================================================
# MAIN
# =============================================================================

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO)
    port = int(os.environ.get('PORT', 5000))
    debug = os.environ.get('DEBUG', 'false').lower() == 'true'
    app.run(host='0.0.0.0', port=port, debug=debug)
