"""
Per-field confidence, type filtering, name deduplication and the aggregate
schema confidence.
"""

import math
from collections import OrderedDict

from .schemas import FieldType, RawField, SchemaField

# Schema confidence weights
COUNT_FACTOR_WEIGHT = 0.3
FIELD_CONFIDENCE_WEIGHT = 0.4
FIELD_COUNT_WEIGHT = 0.3
IDEAL_FIELD_COUNT = 5


def round_half_up(value: float, digits: int = 2) -> float:
    """Round like Math.round(x * 100) / 100 (halves go up, not to even)."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def uniqueness(samples: list[str]) -> float:
    """Distinct sample values over total samples, unrounded."""
    if not samples:
        return 0.0
    return len(set(samples)) / len(samples)


def field_confidence(samples: list[str]) -> float:
    return round_half_up(uniqueness(samples))


def filter_fields(raw_fields: list[RawField], threshold: float) -> list[SchemaField]:
    """
    Keep fields whose uniqueness meets the threshold; sample is the first value.

    The threshold is compared before rounding, so 2 of 3 distinct (0.666...)
    does not pass 0.67.
    """
    fields = []
    for raw in raw_fields:
        if uniqueness(raw.samples) >= threshold:
            confidence = field_confidence(raw.samples)
            fields.append(SchemaField(
                name=raw.name,
                selector=raw.selector,
                type=raw.type,
                confidence=confidence,
                sample=raw.samples[0] if raw.samples else None
            ))
    return fields


def filter_field_types(fields: list[SchemaField], allowed: list[FieldType]) -> list[SchemaField]:
    """Allow-list on field types; an empty list allows everything."""
    if not allowed:
        return fields
    allowed_set = set(allowed)
    return [f for f in fields if f.type in allowed_set]


def deduplicate_fields(fields: list[SchemaField]) -> list[SchemaField]:
    """
    Rename the Nth repeat of a name to name_N, in stable order.

    A generated name that is already taken (a field literally named
    `title_1` next to two `title`s) bumps N until it is free.
    """
    seen: "OrderedDict[str, int]" = OrderedDict()
    used = set()
    result = []
    for field in fields:
        count = seen.get(field.name, 0)
        seen[field.name] = count + 1

        name = field.name
        if count > 0 or name in used:
            suffix = max(count, 1)
            name = f"{field.name}_{suffix}"
            while name in used:
                suffix += 1
                name = f"{field.name}_{suffix}"

        used.add(name)
        result.append(field if name == field.name else field.model_copy(update={"name": name}))
    return result


def schema_confidence(item_count: int, min_items: int, fields: list[SchemaField]) -> float:
    """
    Weighted blend of item count, average field confidence and field count.

    Item count: 1x minimum = 0.5, 2x+ minimum = 1.0 (30%)
    Field confidence average (40%)
    Field count: 5+ fields is ideal (30%)
    """
    if not fields:
        return 0.0

    count_ratio = min(item_count / max(min_items, 1) / 2, 1)
    avg_confidence = sum(f.confidence for f in fields) / len(fields)
    field_ratio = min(len(fields) / IDEAL_FIELD_COUNT, 1)

    score = (
        count_ratio * COUNT_FACTOR_WEIGHT
        + avg_confidence * FIELD_CONFIDENCE_WEIGHT
        + field_ratio * FIELD_COUNT_WEIGHT
    )
    return round_half_up(score)
