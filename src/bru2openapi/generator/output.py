"""Serializes an OpenAPI document to YAML or JSON and writes it out."""

import json
import logging
from pathlib import Path

import yaml

from bru2openapi.generator.document import OpenAPIDocument

logger = logging.getLogger(__name__)

OUTPUT_FORMATS = ("yaml", "json")


def detect_output_format(file_path: Path) -> str:
    """Pick the output format from the file extension: 'json' or 'yaml'."""
    return "json" if file_path.suffix.lower() == ".json" else "yaml"


def render_document(document: OpenAPIDocument, fmt: str = "yaml") -> str:
    """Render the document as text in the given format."""
    data = document.to_dict()
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    raise ValueError(f"Unsupported output format: {fmt}")


def write_document(document: OpenAPIDocument, file_path: Path, fmt: str = "auto") -> str:
    """Write the document to ``file_path``. Returns the format used."""
    if fmt == "auto":
        fmt = detect_output_format(file_path)

    text = render_document(document, fmt)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    file_path.write_text(text, encoding="utf-8")
    logger.debug("Wrote %d bytes of %s to %s", len(text), fmt, file_path)
    return fmt
