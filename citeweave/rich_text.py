"""
citeweave/rich_text.py

Rich-text trees: the format-agnostic intermediate rendering of citations
and bibliography entries.

A rich text is either a leaf string or a Node holding an ordered attribute
mapping and a list of children. Trees are never modified in place; every
rewrite below returns a new tree and shares untouched subtrees.

Attributes used by the processor:
    rendered-names   marks the group of names rendered for an item
    rendered-var     name of the variable a node renders ('issued', ...)
    display          CSL display mode ('left-margin' marks the first field)
    cited-item-no    item number, citation mode
    bib-item-no      item number, bibliography mode
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union


@dataclass
class Node:
    """Internal rich-text node: attributes plus ordered children."""
    attrs: Dict[str, Any] = field(default_factory=dict)
    content: List["RichText"] = field(default_factory=list)


RichText = Union[str, Node]
Predicate = Callable[[Node], bool]

NAMES_ATTR = 'rendered-names'
RENDERED_VAR_ATTR = 'rendered-var'
DISPLAY_ATTR = 'display'


def to_plain(rt: Optional[RichText]) -> str:
    """Concatenate the text content of a tree, ignoring attributes."""
    if rt is None:
        return ""
    if isinstance(rt, str):
        return rt
    return "".join(to_plain(child) for child in rt.content)


def find_first(rt: RichText, pred: Predicate) -> Optional[Node]:
    """First node (pre-order, root included) satisfying `pred`."""
    if not isinstance(rt, Node):
        return None
    if pred(rt):
        return rt
    for child in rt.content:
        found = find_first(child, pred)
        if found is not None:
            return found
    return None


def replace_first(rt: RichText, pred: Predicate, replacement: RichText) -> Tuple[RichText, bool]:
    """
    Replace the first node satisfying `pred` with `replacement`.

    Returns:
        (new tree, whether a replacement happened)
    """
    if not isinstance(rt, Node):
        return rt, False
    if pred(rt):
        return replacement, True
    new_content = []
    replaced = False
    for child in rt.content:
        if not replaced:
            child, replaced = replace_first(child, pred, replacement)
        new_content.append(child)
    if not replaced:
        return rt, False
    return Node(dict(rt.attrs), new_content), True


def with_attr(rt: RichText, key: str, value: Any) -> Node:
    """Set an attribute on the outermost node, wrapping a bare leaf first."""
    if isinstance(rt, Node):
        attrs = dict(rt.attrs)
        attrs[key] = value
        return Node(attrs, list(rt.content))
    return Node({key: value}, [rt])


def has_attr(key: str, value: Any = None) -> Predicate:
    """Predicate: node carries `key` (with `value`, when given)."""
    def pred(node: Node) -> bool:
        if key not in node.attrs:
            return False
        return value is None or node.attrs[key] == value
    return pred


def is_names_node(node: Node) -> bool:
    return bool(node.attrs.get(NAMES_ATTR))


def first_field(rt: RichText) -> Optional[Node]:
    """The node rendered in the left margin, if the entry has one."""
    return find_first(rt, has_attr(DISPLAY_ATTR, 'left-margin'))


def join(rts: Sequence[RichText], delimiter: str = "", attrs: Optional[Dict[str, Any]] = None) -> Node:
    """Combine trees into one node, separated by `delimiter` leaves."""
    content: List[RichText] = []
    for i, rt in enumerate(rts):
        if i and delimiter:
            content.append(delimiter)
        content.append(rt)
    return Node(dict(attrs or {}), content)


def add_year_suffix(rt: RichText, suffix: str) -> RichText:
    """
    Insert a disambiguating year suffix after the first rendered date.

    The suffix goes into the first node rendering the 'issued' variable as a
    node of its own (rendered-var=year-suffix). Trees without a rendered
    date, and empty suffixes, are returned unchanged.
    """
    if not suffix:
        return rt
    date_pred = has_attr(RENDERED_VAR_ATTR, 'issued')
    date_node = find_first(rt, date_pred)
    if date_node is None:
        return rt
    suffixed = Node(
        dict(date_node.attrs),
        list(date_node.content) + [Node({RENDERED_VAR_ATTR: 'year-suffix'}, [suffix])],
    )
    new_rt, _ = replace_first(rt, date_pred, suffixed)
    return new_rt


def max_offset(entries: Sequence[RichText]) -> int:
    """
    Widest plain-text first field among `entries`.

    Entries without a left-margin field count with their whole text.
    """
    widths = []
    for entry in entries:
        ff = first_field(entry)
        widths.append(len(to_plain(ff if ff is not None else entry)))
    return max(widths, default=0)


def subsequent_author_substitute(entries: Sequence[RichText], replacement: str) -> List[RichText]:
    """
    Replace repeated name groups in consecutive bibliography entries.

    An entry whose first name group equals (structurally) the name group of
    the immediately preceding entry gets that group replaced by
    `replacement`. An entry without a name group breaks the run. The first
    entry is never substituted.
    """
    result: List[RichText] = []
    previous: Optional[Node] = None
    for entry in entries:
        names = find_first(entry, is_names_node)
        if names is not None and previous is not None and names == previous:
            entry, _ = replace_first(entry, is_names_node, replacement)
        else:
            previous = names
        result.append(entry)
    return result
