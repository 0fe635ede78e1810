"""
Document handle over a parsed BeautifulSoup tree.

The engine only talks to the page through this module: tag/selector queries,
attribute and class lookups, text content, parent/child navigation and a
pre-order walk. Nothing here mutates the tree.
"""

from typing import Iterator

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from .exceptions import InvalidInputError

# soupsieve reports most bad selectors as SelectorSyntaxError, but a few
# unsupported constructs surface as the builtin errors
SELECTOR_ERRORS = (SelectorSyntaxError, ValueError, NotImplementedError)


class Document:
    """A loaded, already-parsed page."""

    def __init__(self, soup: BeautifulSoup, url: str = ""):
        self.soup = soup
        self.url = url

    def select(self, selector: str) -> list[Tag]:
        """Elements matching a CSS selector, in document order.

        Raises InvalidInputError for malformed selector syntax.
        """
        try:
            return list(self.soup.select(selector))
        except SELECTOR_ERRORS as e:
            raise InvalidInputError.invalid_selector(selector, e) from e

    def find_all(self, tag: str) -> list[Tag]:
        return list(self.soup.find_all(tag))

    def walk(self, root: Tag) -> Iterator[Tag]:
        """Pre-order walk of every descendant element of root (root excluded)."""
        for node in root.descendants:
            if isinstance(node, Tag):
                yield node

    def exclusion_set(self, selectors: list[str]) -> set[int]:
        """Build set of element IDs matched by any of the selectors.

        Invalid selectors are skipped so one bad entry does not abort mining.
        Only the matched roots are collected; descendants are caught by
        has_excluded_ancestor().
        """
        excluded = set()
        for selector in selectors:
            try:
                matches = self.soup.select(selector)
            except SELECTOR_ERRORS:
                continue
            for elem in matches:
                excluded.add(id(elem))
        return excluded


# --- Element helpers ---

def tag_name(elem: Tag) -> str:
    return elem.name.lower()


def class_list(elem: Tag) -> list[str]:
    value = elem.get('class')
    if not value:
        return []
    return value.split() if isinstance(value, str) else list(value)


def get_attribute(elem: Tag, name: str) -> str:
    value = elem.get(name)
    if value is None:
        return ''
    return ' '.join(value) if isinstance(value, list) else value


def has_attribute(elem: Tag, name: str) -> bool:
    return elem.has_attr(name)


def text_content(elem: Tag) -> str:
    """Concatenated text of all descendants, like the DOM's textContent."""
    return elem.get_text()


def child_elements(elem: Tag) -> list[Tag]:
    return [child for child in elem.children if isinstance(child, Tag)]


def parent_element(elem: Tag):
    parent = elem.parent
    if parent is None or isinstance(parent, BeautifulSoup):
        return None
    return parent


def depth(elem: Tag) -> int:
    """Number of element ancestors (<html> is depth 0)."""
    return sum(1 for parent in elem.parents if not isinstance(parent, BeautifulSoup))


def outer_html(elem: Tag) -> str:
    return str(elem)


def has_excluded_ancestor(elem: Tag, excluded: set[int]) -> bool:
    """Check the element itself and every ancestor against the exclusion set."""
    if id(elem) in excluded:
        return True
    return any(id(parent) in excluded for parent in elem.parents)
