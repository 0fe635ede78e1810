"""
Schema inference engine.

Ties the stages together for one already-loaded document:
  PatternMiner → PatternScorer → FieldExtractor → confidence + dedup → Schema

A manual container selector bypasses mining and scoring entirely.

The engine is a pure function of (document, options): it performs no I/O and
does no logging. Diagnostics (ranked patterns, score breakdowns) are returned
in the AnalysisResult for the caller to print.
"""

from datetime import datetime, timezone
from typing import Optional

from .confidence import deduplicate_fields, filter_field_types, filter_fields, schema_confidence
from .document import Document
from .exceptions import NoPatternsFoundError
from .fields import FieldExtractor
from .miner import PatternMiner, build_pattern
from .schemas import AnalysisResult, AnalyzerOptions, CandidatePattern, Schema, ScoredPattern
from .scorer import PatternScorer, selector_tag
from .utility_classes import get_semantic_classes


class Analyzer:
    """Infers a container selector and typed fields from a document."""

    def __init__(
        self,
        miner: Optional[PatternMiner] = None,
        scorer: Optional[PatternScorer] = None,
        extractor: Optional[FieldExtractor] = None
    ):
        self.miner = miner or PatternMiner()
        self.scorer = scorer or PatternScorer()
        self.extractor = extractor or FieldExtractor()

    def rank_patterns(self, document: Document, options: AnalyzerOptions) -> list[ScoredPattern]:
        """Mine and score candidates without extracting fields."""
        patterns = self.miner.mine(document, options)
        return self.scorer.score(patterns, options)

    def analyze(
        self,
        document: Document,
        options: Optional[AnalyzerOptions] = None,
        generated: Optional[str] = None
    ) -> AnalysisResult:
        """
        Analyze a document and return the inferred schema.

        Args:
            document: Loaded document (its url is copied into the schema)
            options: Analyzer options (defaults if omitted)
            generated: ISO timestamp for the schema; now (UTC) if omitted

        Returns:
            AnalysisResult with the schema, the chosen pattern and the ranking

        Raises:
            NoPatternsFoundError: nothing qualified, or the manual selector matched nothing
            InvalidInputError: the manual container selector is malformed
        """
        options = options or AnalyzerOptions()
        ranked: list[ScoredPattern] = []

        if options.container_selector:
            pattern = self._manual_pattern(document, options.container_selector)
        else:
            patterns = self.miner.mine(document, options)
            if not patterns:
                raise NoPatternsFoundError.below_min_items(document.url, options.min_items)

            ranked = self.scorer.score(patterns, options)
            if not ranked:
                raise NoPatternsFoundError.too_deep(document.url, options.max_depth, len(patterns))

            best = self.scorer.select_best(ranked)
            if best is None:
                raise NoPatternsFoundError.low_diversity(document.url, len(ranked))
            pattern = best.pattern

        raw_fields = self.extractor.extract_fields(document, pattern, options)
        fields = filter_fields(raw_fields, options.confidence_threshold)
        fields = filter_field_types(fields, options.field_types)
        fields = deduplicate_fields(fields)

        schema = Schema(
            url=document.url,
            generated=generated or datetime.now(timezone.utc).isoformat(),
            container_selector=pattern.selector,
            fields=fields,
            item_count=pattern.count,
            confidence=schema_confidence(pattern.count, options.min_items, fields)
        )
        return AnalysisResult(inferred_schema=schema, pattern=pattern, ranked=ranked)

    def _manual_pattern(self, document: Document, selector: str) -> CandidatePattern:
        """Build a single pattern straight from a user-supplied selector."""
        elements = document.select(selector)
        if not elements:
            raise NoPatternsFoundError.no_container_match(document.url, selector)
        return build_pattern(
            selector=selector,
            tag=selector_tag(selector),
            classes=get_semantic_classes(elements[0]),
            elements=elements
        )


def analyze(document: Document, options: Optional[AnalyzerOptions] = None) -> AnalysisResult:
    """Convenience function to analyze a loaded document."""
    return Analyzer().analyze(document, options)
