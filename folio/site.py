"""Document store for Folio.

This module provides the file-backed objects the content model wraps: a Site
rooted at a source directory, the Collections configured for it, and the
Documents (pages, collection entries and pure-data files) read from disk.

Key classes:
- Document: One content file, its front matter data and its body.
- Collection: A named group of documents living under ``_<label>/``.
- Site: The source root, its collections and its standalone pages.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

from .configuration import Configuration, load_configuration
from .frontmatter import load_data, split_front_matter
from .utils import (
    coerce_datetime,
    extract_date_from_name,
    is_content_file,
    is_data_file,
    is_internal_path,
)

logger = logging.getLogger(__name__)


class Document:
    """A single content file.

    Attributes:
        site: Site the document belongs to.
        collection: Owning collection, or None for standalone pages.
        path: Absolute path of the file, or None while unsaved.
        relative_path: Posix path relative to the site source, "" while unsaved.
        data: Front matter mapping, mutated in place by content models.
        content: Body text following the front matter.
    """

    def __init__(
        self,
        site: Site,
        collection: Collection | None = None,
        path: Path | str | None = None,
        data: dict[str, Any] | None = None,
        content: str = "",
    ):
        self.site = site
        self.collection = collection
        self.data: dict[str, Any] = data if data is not None else {}
        self.content = content
        self.path: Path | None = None
        self.relative_path = ""
        if path is not None:
            self.process_absolute_path(path)

    @classmethod
    def read(cls, path: Path, site: Site, collection: Collection | None = None) -> Document:
        """Read a document from disk.

        Args:
            path: Path to the file.
            site: Owning site.
            collection: Owning collection, if any.

        Returns:
            Document with its data and body populated.
        """
        text = path.read_text(encoding="utf-8")
        if is_data_file(path):
            data, content = load_data(text), ""
        else:
            data, content = split_front_matter(text)
        return cls(site, collection=collection, path=path, data=data, content=content)

    @property
    def yaml_file(self) -> bool:
        """Whether the document is pure structured data with no body section."""
        return self.path is not None and is_data_file(self.path)

    @property
    def json_file(self) -> bool:
        """Whether the document is a pure-data JSON file."""
        return self.path is not None and self.path.suffix == ".json"

    @property
    def date(self) -> datetime:
        """Date from front matter, else the filename prefix, else the site time."""
        value = coerce_datetime(self.data.get("date"))
        if value is None and self.path is not None:
            value = extract_date_from_name(self.path.stem)
        return value or self.site.time

    def process_absolute_path(self, path: Path | str | None) -> None:
        """Assign a new path to the document, or clear it when ``path`` is None."""
        if path is None:
            self.path = None
            self.relative_path = ""
            return
        self.path = self.site.in_source_dir(path)
        try:
            self.relative_path = self.path.relative_to(self.site.source).as_posix()
        except ValueError:
            self.relative_path = self.path.as_posix()

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"Document({self.relative_path or '(unsaved)'})"


class Collection:
    """A named group of documents sharing a directory.

    Attributes:
        site: Owning site.
        label: Collection name, e.g. ``posts``.
        metadata: Configuration options for the collection.
    """

    def __init__(self, site: Site, label: str, metadata: Mapping[str, Any] | None = None):
        self.site = site
        self.label = label
        self.metadata = dict(metadata or {})
        self._docs: list[Document] | None = None

    @property
    def directory(self) -> Path:
        """Directory holding the collection's files."""
        collections_dir = str(self.site.config.get("collections_dir") or "")
        return self.site.source / collections_dir / f"_{self.label}"

    @property
    def docs(self) -> list[Document]:
        """Documents in the collection, read on first access."""
        if self._docs is None:
            self._docs = self.read()
        return self._docs

    def read(self) -> list[Document]:
        """Read every content and data file under the collection directory.

        Returns:
            Documents in path order.
        """
        if not self.directory.is_dir():
            return []
        docs: list[Document] = []
        for path in sorted(self.directory.rglob("*")):
            if not path.is_file() or path.name.startswith("."):
                continue
            if is_content_file(path) or is_data_file(path):
                docs.append(Document.read(path, self.site, collection=self))
        logger.debug("Read %d documents for collection %s", len(docs), self.label)
        return docs

    def reset(self) -> None:
        self._docs = None

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"Collection({self.label})"


class Site:
    """A site rooted at a source directory.

    Attributes:
        config: Effective configuration.
        root_dir: Project root directory.
        source: Source directory holding pages and collections.
        time: Reference time for the site, used as a default date.
        collections: Mapping of label to Collection.
    """

    def __init__(self, config: Configuration):
        self.config = config
        self.root_dir = Path(config.get("root_dir") or ".").absolute()
        self.source = self.root_dir / str(config.get("source") or ".")
        self.time = coerce_datetime(config.get("time")) or datetime.now()
        self.collections: dict[str, Collection] = {
            str(label): Collection(self, str(label), metadata)
            for label, metadata in (config.get("collections") or {}).items()
        }
        self._pages: list[Document] | None = None

    @classmethod
    def from_root(
        cls, root_dir: Path | str, overrides: Mapping[str, Any] | None = None
    ) -> Site:
        """Load the configuration for ``root_dir`` and build a Site from it."""
        return cls(load_configuration(root_dir, overrides))

    @property
    def pages(self) -> list[Document]:
        """Standalone pages under the source root, read on first access."""
        if self._pages is None:
            self._pages = self._read_pages()
        return self._pages

    def in_source_dir(self, path: Path | str) -> Path:
        """Resolve ``path`` against the source directory unless already absolute."""
        path = Path(path)
        if path.is_absolute():
            return path
        return self.source / path

    def reset(self) -> None:
        """Drop cached pages and collection documents so they are re-read."""
        self._pages = None
        for collection in self.collections.values():
            collection.reset()

    def _read_pages(self) -> list[Document]:
        if not self.source.is_dir():
            return []
        pages: list[Document] = []
        for path in sorted(self.source.rglob("*")):
            if not path.is_file():
                continue
            rel = path.relative_to(self.source)
            # Skip collections, layouts and drafts (anything under _dirs)
            if is_internal_path(rel.parent) or rel.name.startswith((".", "_")):
                continue
            if self._is_excluded(rel) or not is_content_file(path):
                continue
            pages.append(Document.read(path, self))
        return pages

    def _is_excluded(self, rel: Path) -> bool:
        excludes = self.config.get("exclude") or []
        posix = rel.as_posix()
        for entry in excludes:
            entry = str(entry).rstrip("/")
            if not entry:
                continue
            if entry in rel.parts or posix == entry or posix.startswith(f"{entry}/"):
                return True
        return False

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"Site({self.source})"
