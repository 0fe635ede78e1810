"""
Utility class detection.

Filters out Tailwind, Bootstrap and other utility-first CSS framework classes
so that selectors are built only from classes that carry domain meaning
(e.g. `product-card`, not `px-4`). Every stage that builds a selector calls
into this one module.
"""

import re
from typing import Union

from soupsieve import escape as css_escape


UTILITY_CLASSES = frozenset([
    # Layout
    'flex', 'grid', 'block', 'inline', 'inline-block', 'inline-flex', 'inline-grid',
    'hidden', 'visible', 'invisible', 'contents', 'flow-root',
    # Positioning
    'relative', 'absolute', 'fixed', 'sticky', 'static',
    # Flexbox
    'items-center', 'items-start', 'items-end', 'items-stretch', 'items-baseline',
    'justify-center', 'justify-start', 'justify-end', 'justify-between', 'justify-around',
    'flex-row', 'flex-col', 'flex-wrap', 'flex-nowrap', 'flex-1', 'grow', 'shrink',
    # Spacing
    'p-0', 'p-1', 'p-2', 'p-3', 'p-4', 'p-5', 'p-6', 'p-8', 'p-10', 'p-12',
    'm-0', 'm-1', 'm-2', 'm-3', 'm-4', 'm-5', 'm-6', 'm-8', 'm-10', 'm-12',
    'px-0', 'px-1', 'px-2', 'px-3', 'px-4', 'px-5', 'px-6', 'px-8',
    'py-0', 'py-1', 'py-2', 'py-3', 'py-4', 'py-5', 'py-6', 'py-8',
    'mx-auto', 'my-auto', 'mt-0', 'mt-1', 'mt-2', 'mt-4', 'mb-0', 'mb-1', 'mb-2', 'mb-4',
    'gap-0', 'gap-1', 'gap-2', 'gap-3', 'gap-4', 'gap-5', 'gap-6', 'gap-8',
    # Sizing
    'w-full', 'w-auto', 'w-screen', 'h-full', 'h-auto', 'h-screen',
    'min-w-0', 'min-h-0', 'max-w-full', 'max-h-full',
    # Text
    'text-left', 'text-center', 'text-right', 'text-justify',
    'text-xs', 'text-sm', 'text-base', 'text-lg', 'text-xl', 'text-2xl', 'text-3xl',
    'font-normal', 'font-medium', 'font-semibold', 'font-bold',
    'truncate', 'overflow-hidden', 'overflow-auto', 'overflow-scroll',
    # Colors (generic)
    'bg-white', 'bg-black', 'bg-transparent', 'text-white', 'text-black',
    # Borders
    'border', 'border-0', 'border-2', 'rounded', 'rounded-md', 'rounded-lg', 'rounded-full',
    # Effects
    'shadow', 'shadow-sm', 'shadow-md', 'shadow-lg', 'opacity-0', 'opacity-50', 'opacity-100',
    # Transitions
    'transition', 'transition-all', 'duration-150', 'duration-200', 'duration-300',
    # Bootstrap
    'container', 'row', 'col', 'd-flex', 'd-block', 'd-none', 'd-inline',
    'align-items-center', 'justify-content-center',
    # Common generic
    'clearfix', 'wrapper', 'inner', 'outer', 'content', 'main',
])

# Structural heuristics, checked in order after the set lookup.
# Characters that would break a selector if used unescaped
UNSAFE_CHARS_PATTERN = re.compile(r'[:\[\]*@#>~+]')
STATE_PREFIX_PATTERN = re.compile(r'^(sm|md|lg|xl|2xl|hover|focus|active|disabled|dark|light):')
SPACING_PATTERN = re.compile(r'^-?(m|p)(t|r|b|l|x|y)?-\[?.+\]?$')
SIZING_PATTERN = re.compile(r'^(w|h|min-w|min-h|max-w|max-h)-\[?.+\]?$')
COLOR_SCALE_PATTERN = re.compile(
    r'^(text|bg|border|ring)-(gray|slate|zinc|neutral|red|blue|green|yellow|purple'
    r'|pink|orange|indigo|teal|cyan)-\d+'
)
GRID_PATTERN = re.compile(r'^grid-(cols|rows)-\d+$')
SPAN_PATTERN = re.compile(r'^(col|row)-span-\d+$')
TEXT_SIZE_PATTERN = re.compile(r'^text-(xs|sm|base|lg|xl|2xl|3xl|4xl|5xl)$')
FONT_WEIGHT_PATTERN = re.compile(
    r'^font-(thin|extralight|light|normal|medium|semibold|bold|extrabold|black)$'
)

UTILITY_PATTERNS = (
    UNSAFE_CHARS_PATTERN,
    STATE_PREFIX_PATTERN,
    SPACING_PATTERN,
    SIZING_PATTERN,
    COLOR_SCALE_PATTERN,
    GRID_PATTERN,
    SPAN_PATTERN,
    TEXT_SIZE_PATTERN,
    FONT_WEIGHT_PATTERN,
)


def is_utility_class(class_name: str) -> bool:
    """Check if a CSS class is a utility/framework class (set lookup, then regexes)."""
    if class_name in UTILITY_CLASSES:
        return True
    return any(pattern.search(class_name) for pattern in UTILITY_PATTERNS)


def is_semantic(class_name: str) -> bool:
    """A class is semantic when it is not utility noise."""
    return not is_utility_class(class_name)


def semantic_classes_from_string(class_attr: Union[str, list, None]) -> list[str]:
    """Split a raw class attribute (string or bs4 token list) and keep semantic tokens."""
    if not class_attr:
        return []
    if isinstance(class_attr, str):
        tokens = class_attr.split()
    else:
        tokens = [token for value in class_attr for token in str(value).split()]
    return [token for token in tokens if is_semantic(token)]


def get_semantic_classes(element) -> list[str]:
    """Semantic classes of a bs4 element, in attribute order."""
    return semantic_classes_from_string(element.get('class'))


def semantic_class_selector(element) -> str:
    """`.first-semantic-class` for building per-element selector fragments, or ''."""
    semantic = get_semantic_classes(element)
    return f".{css_escape(semantic[0])}" if semantic else ""
