"""
Main orchestrator for schemasniff.

Coordinates the pipeline: DocumentProvider → Analyzer → (caller) export.
The engine returns structured results; this layer decides what to log, using
the logger it was handed.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from .analyzer import Analyzer
from .logger import get_module_logger, setup_logger
from .provider import DocumentProvider
from .schemas import AnalysisResult, AnalyzerOptions


class SchemaSniffer:
    """
    Main orchestrator for schema inference.

    1. DocumentProvider: loads a URL, file or HTML string
    2. Analyzer: mines, scores and infers fields
    """

    def __init__(
        self,
        provider: Optional[DocumentProvider] = None,
        analyzer: Optional[Analyzer] = None,
        logger: Optional[logging.Logger] = None,
        log_level: Optional[int] = None
    ):
        if log_level is not None:
            setup_logger(level=log_level)

        self.provider = provider or DocumentProvider()
        self.analyzer = analyzer or Analyzer()
        self.logger = logger or get_module_logger("main")

    def sniff(self, target: Union[str, Path], options: Optional[AnalyzerOptions] = None) -> AnalysisResult:
        """Load a URL or file and infer its schema."""
        self.logger.info(f"Analyzing: {target}")
        document = self.provider.load(target)
        return self._run(document, options)

    def sniff_html(self, html: str, url: str = "", options: Optional[AnalyzerOptions] = None) -> AnalysisResult:
        """Infer a schema from an HTML string."""
        document = self.provider.from_html(html, url=url)
        return self._run(document, options)

    def _run(self, document, options: Optional[AnalyzerOptions]) -> AnalysisResult:
        options = options or AnalyzerOptions()
        result = self.analyzer.analyze(document, options)
        schema = result.inferred_schema

        self.logger.info(
            f"Container {schema.container_selector}: {schema.item_count} items, "
            f"{len(schema.fields)} fields, confidence {schema.confidence}"
        )
        return result


def sniff(target: Union[str, Path], options: Optional[AnalyzerOptions] = None) -> AnalysisResult:
    """Convenience function to analyze a URL or file."""
    return SchemaSniffer().sniff(target, options)


def sniff_html(html: str, url: str = "", options: Optional[AnalyzerOptions] = None) -> AnalysisResult:
    """Convenience function to analyze an HTML string."""
    return SchemaSniffer().sniff_html(html, url=url, options=options)
