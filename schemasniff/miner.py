"""
Pattern Miner: discovers groups of structurally repeated elements.

For each candidate container tag, elements are filtered (exclusions, size
admission) and then greedily clustered by shared semantic classes.

Clustering is single-pass and order-dependent: each element, in document
order, joins the open group whose running class signature it overlaps most.
The result is stable for a given document, not a globally optimal grouping,
and the scoring constants are tuned against exactly this behavior.
"""

from typing import Optional

from bs4 import Tag

from .document import (
    Document, child_elements, depth, has_excluded_ancestor, outer_html, text_content,
)
from .schemas import AnalyzerOptions, CandidatePattern, PatternSample
from .utility_classes import css_escape, get_semantic_classes

# Tags searched for repeated containers, in this order
CONTAINER_TAGS = ('article', 'div', 'li', 'tr', 'section', 'a')

# Added to the exclusions when ignore_nav is set
NAV_LANDMARK_SELECTORS = [
    'nav', 'header', 'footer', 'aside',
    '[role="navigation"]', '[role="banner"]', '[role="contentinfo"]',
    '[role="menu"]', '[role="menubar"]',
]

# Preview bounds for samples; they only cap memory for scoring
SAMPLE_PREVIEW_COUNT = 10
MAX_HTML_PREVIEW = 200
MAX_TEXT_PREVIEW = 100


class ClassGroup:
    """An open cluster: its members and their running shared-class signature."""

    def __init__(self, classes: list[str], element: Tag):
        self.classes = list(classes)
        self.elements = [element]

    def overlap(self, classes: list[str]) -> list[str]:
        """Intersection with the signature, in the element's class order."""
        signature = set(self.classes)
        return [cls for cls in classes if cls in signature]

    def add(self, element: Tag, shared: list[str]) -> None:
        # The signature only ever shrinks
        self.classes = shared
        self.elements.append(element)


def cluster_elements(elements: list[Tag]) -> list[ClassGroup]:
    """Greedy single-linkage clustering by semantic class intersection."""
    groups: list[ClassGroup] = []

    for elem in elements:
        semantic = get_semantic_classes(elem)
        if not semantic:
            continue

        best_group: Optional[ClassGroup] = None
        best_shared: list[str] = []
        for group in groups:
            shared = group.overlap(semantic)
            # Strictly larger: the earliest group wins ties
            if len(shared) >= 1 and len(shared) > len(best_shared):
                best_group = group
                best_shared = shared

        if best_group is not None:
            best_group.add(elem, best_shared)
        else:
            groups.append(ClassGroup(semantic, elem))

    return groups


def build_samples(elements: list[Tag]) -> list[PatternSample]:
    """Cached previews of the first members of a pattern."""
    samples = []
    for elem in elements[:SAMPLE_PREVIEW_COUNT]:
        text = text_content(elem)
        samples.append(PatternSample(
            html=outer_html(elem)[:MAX_HTML_PREVIEW],
            text=text[:MAX_TEXT_PREVIEW],
            child_count=len(child_elements(elem)),
            text_length=len(text.strip())
        ))
    return samples


def build_pattern(selector: str, tag: str, classes: list[str],
                  elements: list[Tag]) -> CandidatePattern:
    """Assemble a CandidatePattern; depth comes from the first member."""
    return CandidatePattern(
        selector=selector,
        tag=tag,
        classes=list(classes),
        elements=list(elements),
        samples=build_samples(elements),
        depth=depth(elements[0]) if elements else 0
    )


class PatternMiner:
    """Scans a document for tag-based candidate groups of repeated elements."""

    def __init__(self, tags: tuple = CONTAINER_TAGS):
        self.tags = tags

    def mine(self, document: Document, options: AnalyzerOptions) -> list[CandidatePattern]:
        """
        Find candidate patterns.

        Args:
            document: Loaded document
            options: Analyzer options (min_items, exclusions, admission filters)

        Returns:
            Candidate patterns in discovery order (tag order, then group order)
        """
        exclusions = list(options.exclude_selectors)
        if options.ignore_nav:
            exclusions.extend(NAV_LANDMARK_SELECTORS)
        excluded = document.exclusion_set(exclusions) if exclusions else set()

        patterns = []
        for tag in self.tags:
            elements = document.find_all(tag)
            if len(elements) < options.min_items:
                continue

            admitted = [
                elem for elem in elements
                if self._admit(elem, excluded, options)
            ]

            for group in cluster_elements(admitted):
                if len(group.elements) >= options.min_items and group.classes:
                    selector = tag + "".join(f".{css_escape(cls)}" for cls in group.classes)
                    patterns.append(build_pattern(selector, tag, group.classes, group.elements))

        return patterns

    def _admit(self, elem: Tag, excluded: set[int], options: AnalyzerOptions) -> bool:
        """Exclusion and size filters applied before clustering."""
        if excluded and has_excluded_ancestor(elem, excluded):
            return False
        if options.min_children and len(child_elements(elem)) < options.min_children:
            return False
        if options.min_text_length and len(text_content(elem).strip()) < options.min_text_length:
            return False
        return True
