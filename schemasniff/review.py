"""
Console review of an inferred schema, plus the ranked-pattern listing.

The review step is the only place a Schema is changed after assembly: renamed
fields produce a new Schema via model_copy, the original is left untouched.
"""

import sys
from typing import Callable, Optional, TextIO

from .confidence import deduplicate_fields
from .fields import sanitize_name
from .schemas import Schema, ScoredPattern

SAMPLE_PREVIEW_LENGTH = 50


def _preview(sample: str) -> str:
    if len(sample) > SAMPLE_PREVIEW_LENGTH:
        return sample[:SAMPLE_PREVIEW_LENGTH] + "..."
    return sample


def render_review(schema: Schema) -> str:
    """Human-readable summary of a schema."""
    lines = [
        "",
        "=== Schema Review ===",
        f"Container: {schema.container_selector}",
        f"Items found: {schema.item_count}",
        f"Confidence: {schema.confidence}",
        "",
        "=== Fields ===",
    ]
    for idx, field in enumerate(schema.fields, start=1):
        lines.append(f"{idx}. {field.name} ({field.type.value})")
        lines.append(f"   Selector: {field.selector}")
        lines.append(f"   Confidence: {field.confidence}")
        if field.sample:
            lines.append(f"   Sample: {_preview(field.sample)}")
        lines.append("")
    return "\n".join(lines)


def review_schema(
    schema: Schema,
    rename: bool = False,
    input_fn: Callable[[str], str] = input,
    out: Optional[TextIO] = None
) -> Schema:
    """
    Print the schema for review and optionally prompt for new field names.

    A blank answer keeps the current name. New names are sanitized and the
    field list is deduplicated again so names stay unique.
    """
    out = out or sys.stderr
    print(render_review(schema), file=out)

    if not rename or not schema.fields:
        return schema

    renamed = []
    for field in schema.fields:
        answer = input_fn(f"Name for '{field.name}' [{field.name}]: ").strip()
        new_name = sanitize_name(answer) if answer else ""
        if new_name and new_name != field.name:
            renamed.append(field.model_copy(update={"name": new_name}))
        else:
            renamed.append(field)

    return schema.model_copy(update={"fields": deduplicate_fields(renamed)})


def format_pattern_table(ranked: list[ScoredPattern], debug: bool = False) -> str:
    """Ranked candidate patterns, one per line; breakdowns in debug mode."""
    if not ranked:
        return "No candidate patterns."

    lines = [f"{'#':>3}  {'score':>8}  {'items':>5}  {'depth':>5}  {'div':>4}  selector"]
    for rank, scored in enumerate(ranked, start=1):
        pattern = scored.pattern
        flag = "  [gated]" if scored.gated else ""
        lines.append(
            f"{rank:>3}  {scored.score:>8.2f}  {pattern.count:>5}  {pattern.depth:>5}  "
            f"{scored.diversity:>4.2f}  {pattern.selector}{flag}"
        )
        if debug and scored.breakdown:
            b = scored.breakdown
            lines.append(
                f"{'':>5}count={b.count_score:.2f} depth={b.depth_score:.2f} "
                f"diversity={b.diversity_bonus:.2f} children={b.child_score:.2f} "
                f"table={b.table_bonus:.2f} anchor={b.anchor_penalty:.2f}"
            )
    return "\n".join(lines)
