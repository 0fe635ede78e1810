"""
Pydantic schemas defining the contracts between modules.

AnalyzerOptions: configuration consumed by every engine stage
CandidatePattern / ScoredPattern: Miner → Scorer → Extractor
RawField → SchemaField: Extractor → confidence filter + dedup
Schema / AnalysisResult: final engine product, handed to exporter and review

Data flow through the engine:
  Document → PatternMiner → [CandidatePattern] → PatternScorer → ScoredPattern
  ScoredPattern.pattern → FieldExtractor → [RawField] → confidence → Schema
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class FieldType(str, Enum):
    """Content type inferred for a field."""
    TEXT = "text"
    HREF = "href"
    URL = "url"
    NUMBER = "number"
    DATE = "date"
    PRICE = "price"


# --- Configuration ---

class AnalyzerOptions(BaseModel):
    """Options recognized by the engine. Diagnostics flags never affect selection."""
    min_items: int = Field(default=3, ge=1)
    max_depth: int = Field(default=10, ge=0)
    container_selector: Optional[str] = None          # Bypasses mining and scoring
    exclude_selectors: list[str] = Field(default_factory=list)
    ignore_nav: bool = False                           # Adds nav landmarks to exclusions
    min_children: int = Field(default=0, ge=0)
    min_text_length: int = Field(default=0, ge=0)
    prefer_table: bool = False
    field_types: list[FieldType] = Field(default_factory=list)   # Empty = all types
    include_empty: bool = False
    confidence_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    sample_count: int = Field(default=5, ge=1)         # Containers sampled for fields
    debug: bool = False
    list_patterns: bool = False

    @property
    def diagnostics(self) -> bool:
        return self.debug or self.list_patterns


# --- Pattern models ---

class PatternSample(BaseModel):
    """Cached preview of one pattern member, truncated to bound memory."""
    html: str
    text: str
    child_count: int
    text_length: int


class CandidatePattern(BaseModel):
    """
    A tag + shared-class-chain group of repeated elements.

    `elements` holds the live bs4 Tags in document order; it is excluded from
    dumps so results stay serializable.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    selector: str
    tag: str
    classes: list[str] = Field(default_factory=list)
    elements: list[Any] = Field(default_factory=list, exclude=True, repr=False)
    samples: list[PatternSample] = Field(default_factory=list)
    depth: int = 0

    @property
    def count(self) -> int:
        return len(self.elements)


class ScoreBreakdown(BaseModel):
    """Every scoring term, kept for display only."""
    count_score: float = 0.0
    depth_score: float = 0.0
    diversity: float = 0.0
    diversity_bonus: float = 0.0
    child_score: float = 0.0
    table_bonus: float = 0.0
    anchor_penalty: float = 0.0
    gated: bool = False


class ScoredPattern(BaseModel):
    pattern: CandidatePattern
    score: float
    diversity: float
    gated: bool = Field(default=False, description="Fell below the diversity gate")
    breakdown: Optional[ScoreBreakdown] = None


# --- Field models ---

class RawField(BaseModel):
    """
    One structural slot discovered across sampled containers.

    All samples share the same key (type + relative path), so they are the
    same slot in different repeated items.
    """
    key: str
    name: str
    type: FieldType
    selector: str
    samples: list[str] = Field(default_factory=list)


class SchemaField(BaseModel):
    """A field that passed the confidence threshold."""
    name: str
    selector: str
    type: FieldType
    confidence: float = Field(ge=0.0, le=1.0)
    sample: Optional[str] = None


# --- Engine output ---

class Schema(BaseModel):
    """Immutable once assembled; the review step derives modified copies."""
    model_config = ConfigDict(frozen=True)

    url: str = ""
    generated: str
    container_selector: str
    fields: list[SchemaField] = Field(default_factory=list)
    item_count: int
    confidence: float = Field(ge=0.0, le=1.0)


class AnalysisResult(BaseModel):
    """Schema plus the structured diagnostics the caller may choose to print."""
    inferred_schema: Schema
    pattern: CandidatePattern
    ranked: list[ScoredPattern] = Field(default_factory=list)   # Empty on the manual path
