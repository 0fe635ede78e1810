"""
Field Extractor: infers named, typed fields from sample containers.

Each sampled container is walked in pre-order. Links, images and leaf text
elements become fields keyed by their content type plus their structural path
from the container, so the same slot in different items merges into one
RawField instead of producing one field per item.

Pipeline position: after the scorer has picked the container pattern.
Input:  Document + winning CandidatePattern + AnalyzerOptions
Output: RawField list in discovery order (confidence is applied later)
"""

import re
from collections import OrderedDict

from bs4 import Tag

from .document import Document, child_elements, get_attribute, has_attribute, tag_name, text_content
from .schemas import AnalyzerOptions, CandidatePattern, FieldType, RawField
from .utility_classes import semantic_class_selector

# Elements whose text is never content
SKIP_TAGS = ('script', 'style', 'noscript', 'template')

LINK_TAGS = ('a',)
IMAGE_TAGS = ('img',)

MAX_FIELD_NAME_LENGTH = 30

# Type cascade, checked in order: price, number, date, text.
# Price: $99.99, £50, €100, ¥1000, or the symbol after the amount
PRICE_PATTERNS = [
    re.compile(r'^[$£€¥]\s*[\d,]+\.?\d*$'),
    re.compile(r'^\d+\.?\d*\s*[$£€¥]$'),
]
NUMBER_PATTERN = re.compile(r'^\d+\.?\d*$')
DATE_PATTERNS = [
    re.compile(r'\d{1,4}[-/]\d{1,2}[-/]\d{1,4}'),
    re.compile(r'\b(jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec)', re.IGNORECASE),
]


def classify_text(text: str) -> FieldType:
    """Classify a trimmed text value by the fixed regex cascade."""
    if not text:
        return FieldType.TEXT
    if any(p.search(text) for p in PRICE_PATTERNS):
        return FieldType.PRICE
    if NUMBER_PATTERN.search(text):
        return FieldType.NUMBER
    if any(p.search(text) for p in DATE_PATTERNS):
        return FieldType.DATE
    return FieldType.TEXT


def sanitize_name(text: str) -> str:
    """Lowercase, truncate, collapse non-alphanumeric runs to '_', trim '_'."""
    name = text.lower()[:MAX_FIELD_NAME_LENGTH]
    name = re.sub(r'[^a-z0-9]+', '_', name)
    return name.strip('_')


def element_path(elem: Tag, root: Tag) -> list[str]:
    """tag + first semantic class for each element from below root down to elem."""
    path = []
    current = elem
    while current is not None and current is not root:
        path.append(f"{tag_name(current)}{semantic_class_selector(current)}")
        current = current.parent
    path.reverse()
    return path


class FieldExtractor:
    """Walks sample members of a pattern and collects raw fields."""

    def extract_fields(self, document: Document, pattern: CandidatePattern,
                       options: AnalyzerOptions) -> list[RawField]:
        """
        Collect raw fields across up to options.sample_count containers.

        Args:
            document: Loaded document
            pattern: Winning (or manual) container pattern
            options: include_empty and sample_count are honored here

        Returns:
            RawField list, one per structural key, in first-seen order
        """
        containers = document.select(pattern.selector)[:options.sample_count]
        field_map: "OrderedDict[str, RawField]" = OrderedDict()

        for container in containers:
            for elem in document.walk(container):
                tag = tag_name(elem)
                if tag in SKIP_TAGS:
                    continue

                if tag in LINK_TAGS and has_attribute(elem, 'href'):
                    text = text_content(elem).strip()
                    if text or options.include_empty:
                        name = sanitize_name(text) or 'link'
                        self._add(field_map, 'link', elem, container, name,
                                  FieldType.HREF, get_attribute(elem, 'href'))

                if tag in IMAGE_TAGS and has_attribute(elem, 'src'):
                    name = sanitize_name(get_attribute(elem, 'alt')) or 'image'
                    self._add(field_map, 'img', elem, container, name,
                              FieldType.URL, get_attribute(elem, 'src'))

                # Leaf text
                if not child_elements(elem):
                    text = text_content(elem).strip()
                    if text or options.include_empty:
                        field_type = classify_text(text)
                        name = sanitize_name(text) or tag
                        self._add(field_map, field_type.value, elem, container, name,
                                  field_type, text)

        return list(field_map.values())

    def _add(self, field_map: OrderedDict, kind: str, elem: Tag, container: Tag,
             name: str, field_type: FieldType, sample: str) -> None:
        path = element_path(elem, container)
        key = f"{kind}_{'>'.join(path)}"
        if key not in field_map:
            # First occurrence fixes name, type and selector for the slot
            field_map[key] = RawField(
                key=key,
                name=name,
                type=field_type,
                selector=' > '.join(path)
            )
        field_map[key].samples.append(sample)
