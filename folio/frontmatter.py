"""YAML front matter codec for Folio.

Content files start with a delimited block of YAML followed by a free-form
body. Pure-data documents (``.yml``/``.yaml``/``.json``) are a YAML block with
no delimiters and no body. JSON documents are parsed as YAML and written
back as JSON.

Key functions:
- split_front_matter: Split raw text into (data, body), tolerating no block.
- read_front_matter: Parse the block of a body-bearing file, failing loudly.
- load_data: Parse a pure-data document.
- read_data: Parse a pure-data document, failing on non-mappings.
- dump_data: Serialize a mapping back to YAML.
- dump_json: Serialize a mapping as JSON for ``.json`` documents.
- deep_stringify_keys: Recursively convert mapping keys to strings.

YAML folding applies on parse: a plain or ``>`` scalar spanning several lines
collapses its newlines to spaces, while a ``|`` literal scalar keeps them.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from .errors import FrontMatterNotFoundError

FRONT_MATTER_RE = re.compile(
    r"\A(---\s*\n.*?\n?)^((---|\.\.\.)\s*$\n?)", re.DOTALL | re.MULTILINE
)
DELIMITER = "---"


def _as_mapping(loaded: Any) -> dict[str, Any] | None:
    if loaded is None:
        return {}
    if isinstance(loaded, dict):
        return loaded
    return None


def split_front_matter(text: str) -> tuple[dict[str, Any], str]:
    """Split raw content into front matter data and body.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (front matter dict, remaining body). One blank line after
        the closing delimiter is dropped from the body. Text without a valid
        block yields an empty dict and the unchanged text.
    """
    match = FRONT_MATTER_RE.match(text)
    if not match:
        return {}, text
    try:
        data = _as_mapping(yaml.safe_load(match.group(1)))
    except yaml.YAMLError:
        return {}, text
    if data is None:
        return {}, text
    body = text[match.end() :]
    # Drop the blank line separating the block from the body
    if body.startswith("\n"):
        body = body[1:]
    return data, body


def read_front_matter(text: str, path: Path | str) -> dict[str, Any]:
    """Parse the front matter block of a body-bearing file.

    Args:
        text: Raw file content.
        path: Path of the file, used in the error message.

    Returns:
        The parsed front matter mapping.

    Raises:
        FrontMatterNotFoundError: If there is no parsable delimited block.
    """
    match = FRONT_MATTER_RE.match(text)
    if not match:
        raise FrontMatterNotFoundError(path)
    try:
        data = _as_mapping(yaml.safe_load(match.group(1)))
    except yaml.YAMLError as exc:
        raise FrontMatterNotFoundError(path) from exc
    if data is None:
        raise FrontMatterNotFoundError(path)
    return data


def load_data(text: str) -> dict[str, Any]:
    """Parse a pure-data document. Non-mapping documents yield an empty dict."""
    return _as_mapping(yaml.safe_load(text)) or {}


def read_data(text: str, path: Path | str) -> dict[str, Any]:
    """Parse a pure-data document that is about to be rewritten.

    Args:
        text: Raw file content.
        path: Path of the file, used in the error message.

    Returns:
        The parsed mapping. An empty document yields an empty dict.

    Raises:
        FrontMatterNotFoundError: If the document is not a mapping.
    """
    try:
        data = _as_mapping(yaml.safe_load(text))
    except yaml.YAMLError as exc:
        raise FrontMatterNotFoundError(path) from exc
    if data is None:
        raise FrontMatterNotFoundError(path)
    return data


def dump_data(data: Mapping[str, Any]) -> str:
    """Serialize a mapping as a YAML document starting with ``---``.

    Key order is preserved so rewritten files diff cleanly against the
    original.
    """
    if not data:
        return f"{DELIMITER}\n"
    return yaml.safe_dump(
        dict(data),
        explicit_start=True,
        sort_keys=False,
        allow_unicode=True,
        default_flow_style=False,
    )


def dump_json(data: Mapping[str, Any]) -> str:
    """Serialize a mapping as an indented JSON document.

    Values JSON cannot represent, such as dates, are written as strings.
    """
    return json.dumps(dict(data), indent=2, ensure_ascii=False, default=str) + "\n"


def deep_stringify_keys(value: Any) -> Any:
    """Return ``value`` with every mapping key converted to ``str``, recursively."""
    if isinstance(value, Mapping):
        return {str(key): deep_stringify_keys(item) for key, item in value.items()}
    if isinstance(value, list):
        return [deep_stringify_keys(item) for item in value]
    return value
