"""Loading route feeds and documents, and writing the built document.

A route feed is YAML or JSON: either ``{"routes": [...]}`` or a bare list of
routes. Each route carries its method, path, operation id, tags and the
annotation ``lines`` (a list or one block string).
"""

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from api_doc_scan.errors import FeedError
from api_doc_scan.parser.base import Document, Route


def _load(file_path: Path):
    text = file_path.read_text(encoding="utf-8")
    try:
        # YAML is a superset of JSON, so this reads both
        return yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise FeedError(f"{file_path}: not valid YAML or JSON: {e}") from e


def load_routes(file_path: Path) -> list[Route]:
    """Parse a route feed file into a list of Route."""
    data = _load(file_path)
    if isinstance(data, dict):
        data = data.get("routes")
    if not isinstance(data, list):
        raise FeedError(f"{file_path}: expected a list of routes")
    try:
        return [Route.model_validate(item) for item in data]
    except ValidationError as e:
        raise FeedError(f"{file_path}: invalid route: {e}") from e


def load_document(file_path: Path) -> Document:
    """Parse an existing OpenAPI document to build on."""
    data = _load(file_path)
    if not isinstance(data, dict):
        raise FeedError(f"{file_path}: expected an OpenAPI document object")
    try:
        return Document.from_openapi(data)
    except ValueError as e:  # includes ValidationError and bad status codes
        raise FeedError(f"{file_path}: invalid document: {e}") from e


def dump_document(document: Document, fmt: str = "yaml") -> str:
    data = document.to_openapi()
    if fmt == "json":
        return json.dumps(data, indent=2, ensure_ascii=False) + "\n"
    return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
