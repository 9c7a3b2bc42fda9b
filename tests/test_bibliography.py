"""Tests for the bibliography pipeline and formatting-parameter derivation."""

from unittest.mock import Mock, patch

import pytest

from citeweave.bibliography import derive_params, parse_number, render_bibliography
from citeweave.config import NO_BIB_LAYOUT
from citeweave.engines import DictItemGetter
from citeweave.models import FormattingParams, SecondFieldAlign
from citeweave.processor import create_processor
from citeweave.rich_text import Node


class TestParseNumber:
    """Tests for parse_number."""

    @pytest.mark.parametrize(
        "raw, expected",
        [("2", 2), ("1.5", 1.5), (" 3 ", 3), ("2em", 2), ("abc", 0), ("", 0), (4, 4)],
    )
    def test_parse(self, raw, expected) -> None:
        assert parse_number(raw) == expected


class TestDeriveParams:
    """Tests for derive_params."""

    def test_coercions(self) -> None:
        params = derive_params({
            'hanging-indent': 'true',
            'line-spacing': '2',
            'entry-spacing': '0',
            'second-field-align': 'flush',
        })

        assert params == {
            'hanging-indent': True,
            'line-spacing': 2,
            'entry-spacing': 0,
            'second-field-align': SecondFieldAlign.FLUSH,
        }

    def test_false_and_margin(self) -> None:
        params = derive_params({'hanging-indent': 'false', 'second-field-align': 'margin'})

        assert params['hanging-indent'] is False
        assert params['second-field-align'] == SecondFieldAlign.MARGIN

    def test_absent_options_omitted(self) -> None:
        assert derive_params({}) == {'second-field-align': SecondFieldAlign.NONE}

    def test_unknown_keys_dropped(self) -> None:
        params = derive_params({'subsequent-author-substitute': '---', 'et-al-min': '3'})

        assert params == {'second-field-align': SecondFieldAlign.NONE}

    def test_unparseable_number(self) -> None:
        assert derive_params({'line-spacing': 'double'})['line-spacing'] == 0

    def test_unrecognized_alignment(self) -> None:
        assert derive_params({'second-field-align': 'left'})['second-field-align'] == SecondFieldAlign.NONE


class TestFormattingParams:
    """Tests for FormattingParams."""

    def test_from_options(self) -> None:
        params = FormattingParams.from_options({'line-spacing': 2, 'second-field-align': SecondFieldAlign.FLUSH}, 25)

        assert params.max_offset == 25
        assert params.line_spacing == 2
        assert params.entry_spacing is None
        assert params.second_field_align == SecondFieldAlign.FLUSH

    def test_to_dict_omits_absent(self) -> None:
        params = FormattingParams(max_offset=3, hanging_indent=True)

        assert params.to_dict() == {'max-offset': 3, 'second-field-align': 'none', 'hanging-indent': True}


class TestRenderBibliography:
    """Tests for render_bibliography."""

    def test_plain_bibliography(self, processor) -> None:
        processor.append_citations([[{'id': 'doe2001'}, {'id': 'roe1999'}]])

        bibliography, params = render_bibliography(processor, 'plain')

        assert bibliography == '[1] Doe, Jane. 2001. First book\n[2] Roe, Richard. 1999. Third book'
        assert params == FormattingParams(max_offset=0, line_spacing=1, entry_spacing=1)

    def test_subsequent_author_substitution(self, item_getter, locale_getter, compiler) -> None:
        style = {'bib_options': {'subsequent-author-substitute': '———'}}
        proc = create_processor(style, item_getter, locale_getter, compiler)
        proc.append_citations([[{'id': 'doe2001'}, {'id': 'doe2003'}, {'id': 'roe1999'}]])

        bibliography, _ = proc.render_bibliography()

        assert bibliography.split('\n') == [
            '[1] Doe, Jane. 2001. First book',
            '[2] ———. 2003. Second book',
            '[3] Roe, Richard. 1999. Third book',
        ]

    def test_max_offset_with_second_field_align(self, item_getter, locale_getter, compiler) -> None:
        style = {'bib_options': {'second-field-align': 'flush', 'subsequent-author-substitute': ''}}
        proc = create_processor(style, item_getter, locale_getter, compiler)
        proc.append_citations([[{'id': 'doe2001'}]])
        proc.add_uncited(['doe2003', 'roe1999'])

        _, params = proc.render_bibliography()

        assert params.max_offset == 3
        assert params.second_field_align == SecondFieldAlign.FLUSH

    def test_max_offset_counts_widest_number(self, locale_getter, compiler) -> None:
        getter = DictItemGetter([{'id': str(i), 'author': 'Same'} for i in range(1, 11)])
        style = {'bib_options': {'second-field-align': 'margin', 'subsequent-author-substitute': ''}}
        proc = create_processor(style, getter, locale_getter, compiler)
        proc.add_uncited([str(i) for i in range(1, 11)])

        bibliography, params = proc.render_bibliography()

        assert params.max_offset == len('[10]')
        assert bibliography.split('\n')[1].startswith('[2] . ')

    def test_max_offset_measured_before_substitution(self, locale_getter, compiler) -> None:
        def flat_layout(ctx):
            return Node({}, [Node({'rendered-names': True}, [ctx.vars['author']]), '. ', ctx.vars['title']])

        getter = DictItemGetter([
            {'id': 'a', 'author': 'Very Long Author Name', 'title': 'A'},
            {'id': 'b', 'author': 'Very Long Author Name', 'title': 'Much longer title'},
        ])
        style = {
            'bib_layout': flat_layout,
            'bib_options': {'second-field-align': 'flush', 'subsequent-author-substitute': '-'},
        }
        proc = create_processor(style, getter, locale_getter, compiler)
        proc.add_uncited(['a', 'b'])

        bibliography, params = proc.render_bibliography()

        assert bibliography.split('\n')[1] == '-. Much longer title'
        assert params.max_offset == len('Very Long Author Name. Much longer title')

    def test_no_alignment_zero_offset(self, processor) -> None:
        processor.append_citations([[{'id': 'doe2001'}]])

        _, params = processor.render_bibliography()

        assert params.max_offset == 0
        assert params.second_field_align == SecondFieldAlign.NONE

    def test_params_from_style_options(self, item_getter, locale_getter, compiler) -> None:
        style = {'bib_options': {'hanging-indent': 'true', 'line-spacing': '2', 'entry-spacing': '2'}}
        proc = create_processor(style, item_getter, locale_getter, compiler)
        proc.append_citations([[{'id': 'doe2001'}, {'id': 'roe1999'}]])

        bibliography, params = proc.render_bibliography()

        assert params.hanging_indent is True
        assert params.line_spacing == 2
        assert '\n\n' in bibliography

    def test_uncited_items_included(self, processor) -> None:
        processor.add_uncited(['roe1999'])

        bibliography, _ = processor.render_bibliography()

        assert bibliography == '[1] Roe, Richard. 1999. Third book'

    def test_custom_sorter(self, raw_style, item_getter, locale_getter, compiler) -> None:
        def by_author(proc):
            return sorted(proc.cache, key=lambda itd: (itd.vars['author'], -itd.vars['issued']))

        proc = create_processor(raw_style, item_getter, locale_getter, compiler, sorter=by_author)
        proc.append_citations([[{'id': 'roe1999'}, {'id': 'doe2001'}, {'id': 'doe2003'}]])

        bibliography, _ = proc.render_bibliography()

        assert [line.split(' ')[0] for line in bibliography.split('\n')] == ['[3]', '[2]', '[1]']

    def test_finalizes_dirty_processor(self, raw_style, item_getter, locale_getter, compiler) -> None:
        finalizer = Mock()
        proc = create_processor(raw_style, item_getter, locale_getter, compiler, finalizer=finalizer)
        proc.append_citations([[{'id': 'doe2001'}]])

        proc.render_bibliography()

        finalizer.assert_called_once_with(proc)


class TestMissingBibliographyLayout:
    """A style without a bibliography layout yields the sentinel."""

    def test_sentinel_without_collaborators(self, item_getter, locale_getter, compiler) -> None:
        finalizer = Mock()
        sorter = Mock()
        proc = create_processor(
            {'bibliography': False}, item_getter, locale_getter, compiler,
            finalizer=finalizer, sorter=sorter,
        )
        proc.append_citations([[{'id': 'doe2001'}]])

        with patch('citeweave.bibliography.get_formatter') as get_formatter, \
                patch('citeweave.bibliography.render_item') as render_item:
            bibliography, params = proc.render_bibliography('plain')

        assert bibliography == NO_BIB_LAYOUT
        assert params == FormattingParams()
        finalizer.assert_not_called()
        sorter.assert_not_called()
        get_formatter.assert_not_called()
        render_item.assert_not_called()
