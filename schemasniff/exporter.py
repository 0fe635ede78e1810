"""
Schema export.

Turns a Schema into its published shape:

    schema:
      url, generated, confidence, item_count
    container: <selector>
    fields:
      - name, selector, type, confidence, sample (omitted when empty)

and serializes it as YAML (default) or JSON.
"""

import json
from pathlib import Path
from typing import Optional, Union

import yaml

from .logger import get_module_logger
from .schemas import Schema

logger = get_module_logger("exporter")

FORMATS = ("yaml", "json")


def to_export_dict(schema: Schema) -> dict:
    """Literal output shape handed to serializers."""
    fields = []
    for field in schema.fields:
        entry = {
            "name": field.name,
            "selector": field.selector,
            "type": field.type.value,
            "confidence": field.confidence,
        }
        if field.sample:
            entry["sample"] = field.sample
        fields.append(entry)

    return {
        "schema": {
            "url": schema.url,
            "generated": schema.generated,
            "confidence": schema.confidence,
            "item_count": schema.item_count,
        },
        "container": schema.container_selector,
        "fields": fields,
    }


def dump_schema(schema: Schema, fmt: str = "yaml") -> str:
    """Serialize a schema to YAML or JSON text."""
    data = to_export_dict(schema)
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    raise ValueError(f"Unknown export format '{fmt}', expected one of {', '.join(FORMATS)}")


def export_schema(
    schema: Schema,
    output_path: Optional[Union[str, Path]] = None,
    fmt: Optional[str] = None
) -> str:
    """
    Serialize a schema and optionally write it to a file.

    The format defaults to the output file's extension (.json → JSON,
    anything else → YAML).

    Returns:
        The serialized text
    """
    if fmt is None:
        fmt = "json" if output_path and str(output_path).lower().endswith(".json") else "yaml"

    text = dump_schema(schema, fmt)
    if output_path:
        Path(output_path).write_text(text, encoding="utf-8")
        logger.info(f"Schema written to: {output_path}")
    return text
