"""
schemasniff

Infers a scraping schema (a repeating container selector plus typed field
selectors) from a page with repeated content.
- DocumentProvider: loads a URL, file or HTML string into a Document
- Analyzer: pattern mining, scoring and field inference
- exporter / review: YAML/JSON output and console review

Public API surface:
  Pipeline classes — DocumentProvider, Analyzer, SchemaSniffer
  Data models      — AnalyzerOptions, Schema, SchemaField, FieldType, AnalysisResult
  Error types      — SchemaSniffError, InvalidInputError, NoPatternsFoundError,
                     DocumentUnavailableError
  Export           — to_export_dict, dump_schema, export_schema
"""

# --- Pipeline classes ---
from .provider import DocumentProvider, load_document, load_html
from .analyzer import Analyzer, analyze
from .main import SchemaSniffer, sniff, sniff_html

# --- Data models ---
from .schemas import AnalyzerOptions, AnalysisResult, FieldType, Schema, SchemaField

# --- Exceptions ---
from .exceptions import (
    SchemaSniffError,
    InvalidInputError,
    NoPatternsFoundError,
    DocumentUnavailableError,
)

# --- Export and review ---
from .exporter import to_export_dict, dump_schema, export_schema
from .review import review_schema

__version__ = "0.1.0"
__all__ = [
    "DocumentProvider",
    "load_document",
    "load_html",
    "Analyzer",
    "analyze",
    "SchemaSniffer",
    "sniff",
    "sniff_html",
    "AnalyzerOptions",
    "AnalysisResult",
    "FieldType",
    "Schema",
    "SchemaField",
    "SchemaSniffError",
    "InvalidInputError",
    "NoPatternsFoundError",
    "DocumentUnavailableError",
    "to_export_dict",
    "dump_schema",
    "export_schema",
    "review_schema",
]
