"""Utility functions for Folio.

This module contains small helpers shared by the store, the content model and
the configuration loader: slug generation, document identifiers, date
coercion and dictionary merging.

Key functions:
    slugify: Convert a title or filename to a URL slug.
    pluralize: Naive English pluralization for collection labels.
    encode_id: Encode a relative path as an opaque URL-safe identifier.
    decode_id: Decode an identifier produced by encode_id.
    extract_date_from_name: Extract date from filename prefix.
    coerce_datetime: Normalize front matter date values to datetime.
    deep_merge: Recursively merge two mappings.
    is_content_file: Check if a path is a body-bearing content file.
    is_data_file: Check if a path is a pure structured-data file.
    is_internal_path: Check if a path has underscore-prefixed components.
"""

from __future__ import annotations

import base64
import binascii
import re
from collections.abc import Mapping
from datetime import date, datetime
from pathlib import Path
from typing import Any

CONTENT_SUFFIXES = (".md", ".markdown", ".html")
DATA_SUFFIXES = (".yml", ".yaml", ".json")
DATE_PREFIX_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})-")


def slugify(name: str) -> str:
    """Convert a title or name to a slug.

    Args:
        name: Title or name value.

    Returns:
        URL-friendly slug. Empty when nothing slug-worthy remains.

    Examples:
        >>> slugify("Hello World!")
        'hello-world'

        >>> slugify("2020-2021 Review")
        '2020-2021-review'
    """
    cleaned = re.sub(r"[^a-zA-Z0-9]+", "-", name)
    return cleaned.strip("-").lower()


def pluralize(word: str) -> str:
    """Return a naive English plural of ``word``.

    Good enough for collection labels such as ``post`` or ``category``.
    """
    if not word or word.endswith("s"):
        return word
    if re.search(r"[^aeiou]y$", word):
        return word[:-1] + "ies"
    if word.endswith(("x", "z", "ch", "sh")):
        return word + "es"
    return word + "s"


def encode_id(relative_path: str) -> str:
    """Encode a relative path as base64url without padding."""
    encoded = base64.urlsafe_b64encode(relative_path.encode("utf-8"))
    return encoded.decode("ascii").rstrip("=")


def decode_id(identifier: str) -> str | None:
    """Decode an identifier produced by :func:`encode_id`.

    Returns:
        The relative path, or None when the identifier is not valid base64url.
    """
    padded = identifier + "=" * (-len(identifier) % 4)
    try:
        return base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError):
        return None


def extract_date_from_name(name: str) -> datetime | None:
    """Extract a date from a filename with YYYY-MM-DD prefix.

    Args:
        name: Filename stem (without extension).

    Returns:
        datetime object if a valid date prefix is found, None otherwise.

    Examples:
        >>> extract_date_from_name("2024-01-15-hello-world")
        datetime(2024, 1, 15, 0, 0)

        >>> extract_date_from_name("hello-world")
        None
    """
    match = DATE_PREFIX_RE.match(name + "-")
    if not match:
        return None
    try:
        return datetime(int(match.group(1)), int(match.group(2)), int(match.group(3)))
    except ValueError:
        return None


def coerce_datetime(value: Any) -> datetime | None:
    """Normalize a front matter date value to a naive datetime.

    YAML yields ``date`` or ``datetime`` objects for well-formed values and
    plain strings for everything else.
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo else value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if isinstance(value, str):
        try:
            return coerce_datetime(datetime.fromisoformat(value.strip()))
        except ValueError:
            return extract_date_from_name(value.strip())
    return None


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``.

    Nested mappings are merged key by key; any other value in ``override``
    replaces the value in ``base``.
    """
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def is_internal_path(path: Path) -> bool:
    """Check if a path is internal (contains components starting with _).

    Args:
        path: Path to check.

    Returns:
        True if any path component starts with underscore.
    """
    return any(part.startswith("_") for part in path.parts)


def is_content_file(path: Path) -> bool:
    """Check if a path is a body-bearing content file (Markdown or HTML)."""
    return path.suffix.lower() in CONTENT_SUFFIXES


def is_data_file(path: Path) -> bool:
    """Check if a path is a pure structured-data document (no body section)."""
    return path.suffix.lower() in DATA_SUFFIXES
