"""Content models for Folio.

A ContentModel wraps one Document and exposes its front matter as attributes.
Assigned attributes are tracked so that ``save`` rewrites only what changed,
leaving hand-edited keys in the file untouched.

Key names:
- ContentModel: Attribute access, identity, persistence and finders.
- to_content_model: Wrap a document in the model variant for its collection.
- default_content_strategy: Process-wide label to variant registry.

Example:
    >>> post = ContentModel.new_via_label("posts", site)
    >>> post.title = "Hello World!"
    >>> post.save()
    True
    >>> ContentModel.find(post.id, "posts", site).title
    'Hello World!'
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path
from typing import Any

from .changeset import AttributeChangeset
from .errors import CollectionNotFoundError, ModelBindingError
from .frontmatter import (
    deep_stringify_keys,
    dump_data,
    dump_json,
    read_data,
    read_front_matter,
)
from .hooks import Hook, HookRegistry, default_hook_registry
from .site import Collection, Document, Site
from .strategy import PAGES_LABEL, ContentStrategy
from .utils import decode_id, encode_id, pluralize, slugify

logger = logging.getLogger(__name__)

DEFAULT_ORDER_BY = "posted_datetime"
USE_CONFIGURED = "use_configured"
# Sort key for names that resolve to non-property class members; never comparable
UNSORTABLE = object()


class ContentModel:
    """Model wrapping a single document.

    Front matter keys read as attributes (``model.title``) and assigning an
    undeclared attribute (``model.title = "x"``) writes into the document's
    data and marks the key as changed. ``get``/``set`` are the explicit forms.
    Reading a key the document does not have logs a warning and returns None.
    """

    content_strategy: ContentStrategy
    hook_registry: HookRegistry = default_hook_registry

    def __init__(self, document: Document | None = None):
        self._document: Document | None = None
        self._changeset = AttributeChangeset()
        if document is not None:
            self.wrap_document(document)

    # Construction and lookup

    @classmethod
    def new_with_document(cls, document: Document) -> ContentModel:
        """Wrap ``document`` in the variant registered for its collection."""
        variant = cls.content_strategy.resolve_for_document(document)
        return variant(document)

    @classmethod
    def new_in_collection(cls, collection: Collection) -> ContentModel:
        """Build an unsaved model for a new document in ``collection``."""
        variant = cls.content_strategy.resolve_for_label(collection.label)
        return variant(Document(collection.site, collection=collection))

    @classmethod
    def new_in_pages(cls, site: Site) -> ContentModel:
        """Build an unsaved model for a new standalone page."""
        variant = cls.content_strategy.resolve_for_label(PAGES_LABEL)
        return variant(Document(site))

    @classmethod
    def new_via_label(cls, label: str, site: Site) -> ContentModel:
        """Build an unsaved model for the pages or collection named by ``label``.

        Raises:
            CollectionNotFoundError: If the label matches nothing.
        """
        name = cls.resolve_label(label, site)
        if name == PAGES_LABEL:
            return cls.new_in_pages(site)
        return cls.new_in_collection(site.collections[name])

    @staticmethod
    def resolve_label(label: str, site: Site) -> str:
        """Resolve ``label`` to ``pages`` or the name of an existing collection.

        ``page`` and ``pages`` mean standalone pages; otherwise the label must
        name a collection, either exactly or in plural form.

        Raises:
            CollectionNotFoundError: If the label matches nothing.
        """
        label = str(label)
        if label in ("page", PAGES_LABEL):
            return PAGES_LABEL
        if label in site.collections:
            return label
        plural = pluralize(label)
        if plural in site.collections:
            return plural
        raise CollectionNotFoundError(label)

    @classmethod
    def documents_for_label(cls, label: str, site: Site) -> list[Document]:
        name = cls.resolve_label(label, site)
        if name == PAGES_LABEL:
            return site.pages
        return site.collections[name].docs

    @classmethod
    def find_in_group(cls, id: str, group: Iterable[Document]) -> ContentModel | None:
        """Find a document in ``group`` by id and wrap it.

        An id containing a dot is taken as a literal relative path; anything
        else is decoded from base64url first.

        Returns:
            Model for the first matching document, or None.
        """
        relative_path = id if "." in id else decode_id(id)
        if relative_path is None:
            logger.debug("Ignoring malformed id %r", id)
            return None
        for document in group:
            if document.relative_path == relative_path:
                return cls.new_with_document(document)
        return None

    @classmethod
    def find_in_collection(cls, id: str, collection: Collection) -> ContentModel | None:
        return cls.find_in_group(id, collection.docs)

    @classmethod
    def find_in_pages(cls, id: str, pages: Iterable[Document]) -> ContentModel | None:
        return cls.find_in_group(id, pages)

    @classmethod
    def find(cls, id: str, label: str, site: Site) -> ContentModel | None:
        """Find a model by id among the pages or collection named by ``label``."""
        return cls.find_in_group(id, cls.documents_for_label(label, site))

    @classmethod
    def find_all(
        cls,
        label: str,
        site: Site,
        order_by: str | None = None,
        order_direction: str | None = None,
    ) -> list[ContentModel]:
        """Return models for every persisted document under ``label``.

        Args:
            label: Pages or collection label.
            site: Site to search.
            order_by: Attribute or property to sort by, or ``use_configured``
                to keep source order. Defaults to the site's
                ``content_model.order_by`` setting.
            order_direction: ``asc`` for ascending; anything else sorts
                descending. Defaults to ``content_model.order_direction``.

        Returns:
            Sorted list of models. Values that cannot be compared fall back to
            sorting by ``posted_datetime``.
        """
        settings = site.config.get("content_model") or {}
        order_by = order_by or settings.get("order_by") or DEFAULT_ORDER_BY
        order_direction = order_direction or settings.get("order_direction") or "desc"

        models = [cls.new_with_document(doc) for doc in cls.documents_for_label(label, site)]
        models = [model for model in models if model.persisted]
        if order_by == USE_CONFIGURED:
            return models

        try:
            models.sort(key=lambda model: model.sort_value(order_by))
        except TypeError:
            logger.warning(
                "Unable to sort %s by %r; sorting by %s instead",
                label,
                order_by,
                DEFAULT_ORDER_BY,
            )
            models.sort(key=lambda model: model.posted_datetime)

        if order_direction != "asc":
            models.reverse()
        return models

    @classmethod
    def register_hook(cls, name: str, callback: Hook) -> Hook:
        """Register a save/destroy hook for this class and its subclasses."""
        return cls.hook_registry.register(cls, name, callback)

    # Document binding

    def wrap_document(self, document: Document) -> ContentModel:
        """Bind the model to ``document``. A model is bound at most once.

        Raises:
            ModelBindingError: If already bound to a different document.
        """
        if self._document is not None and self._document is not document:
            raise ModelBindingError(
                f"{type(self).__name__} is already bound to {self._describe_document()}"
            )
        self._document = document
        return self

    @property
    def wrapped_document(self) -> Document:
        """The bound document.

        Raises:
            ModelBindingError: If the model is unbound.
        """
        if self._document is None:
            raise ModelBindingError(f"{type(self).__name__} is not bound to a document")
        return self._document

    @property
    def is_bound(self) -> bool:
        return self._document is not None

    @property
    def attributes(self) -> dict[str, Any]:
        """The document's live front matter mapping (empty when unbound)."""
        if self._document is None:
            return {}
        return self._document.data

    # Identity and state

    @property
    def id(self) -> str | None:
        """Opaque identifier for a persisted model, None otherwise."""
        if not self.persisted:
            return None
        return encode_id(self.wrapped_document.relative_path)

    @property
    def persisted(self) -> bool:
        """True when the document has a path and the file exists on disk."""
        document = self._document
        if document is None or document.path is None:
            return False
        return self.absolute_path_in_source_dir.is_file()

    @property
    def absolute_path_in_source_dir(self) -> Path:
        document = self.wrapped_document
        if document.path is None:
            raise ModelBindingError(f"{self._describe_document()} has no path yet")
        return document.site.in_source_dir(document.path)

    @property
    def content(self) -> str:
        return self.wrapped_document.content

    @content.setter
    def content(self, new_content: str) -> None:
        self.wrapped_document.content = new_content

    @property
    def posted_datetime(self) -> datetime:
        """Publication date of the document."""
        return self.wrapped_document.date

    # Attribute access

    def get(self, name: str) -> Any:
        """Return the front matter value for ``name``.

        A missing key is not an error: it logs a warning naming the document
        and returns None.
        """
        attributes = self.attributes
        if name in attributes:
            return attributes[name]
        logger.warning(
            "%s for %s has no attribute %r",
            type(self).__name__,
            self._describe_document(),
            name,
        )
        return None

    def set(self, name: str, value: Any) -> Any:
        """Assign ``value`` to ``name`` and mark it as changed."""
        document = self.wrapped_document
        self.attribute_will_change(name)
        document.data[name] = value
        return value

    def responds_to(self, name: str) -> bool:
        """Whether ``name`` is a declared member or a front matter key."""
        return hasattr(type(self), name) or name in self.attributes

    def fetch(self, name: str, default: Any = None) -> Any:
        """Return ``name`` if the model responds to it, else ``default``."""
        if hasattr(type(self), name):
            return getattr(self, name)
        attributes = self.attributes
        return attributes[name] if name in attributes else default

    def sort_value(self, name: str) -> Any:
        """Value used when ordering models by ``name``.

        Declared properties (such as ``posted_datetime``) win over front
        matter keys. Methods are never called; naming one yields an
        unsortable key. Missing values sort as None.
        """
        member = getattr(type(self), name, None)
        if isinstance(member, property):
            return getattr(self, name)
        if member is not None:
            return UNSORTABLE
        return self.attributes.get(name)

    @property
    def attribute_changes(self) -> frozenset[str]:
        return self._changeset.changes()

    def attribute_will_change(self, name: str) -> None:
        self._changeset.will_change(name)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return self.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or hasattr(type(self), name):
            super().__setattr__(name, value)
        else:
            self.set(name, value)

    # Persistence

    def generate_new_slug(self) -> str:
        """Build a filename for a document that has none yet.

        Posts are prefixed with their date. The slug comes from ``title``,
        then ``name``, then ``untitled-<timestamp>``.
        """
        document = self.wrapped_document
        prefix = ""
        if document.collection is not None and document.collection.label == "posts":
            prefix = document.date.strftime("%Y-%m-%d-")

        # TODO: allow the new file extension to be configured per collection
        attributes = self.attributes
        for key in ("title", "name"):
            if key in attributes:
                slug = slugify(str(attributes[key]))
                if slug:
                    return f"{prefix}{slug}.md"
        return f"{prefix}untitled-{int(time.time())}.md"

    def save(self) -> bool:
        """Write the model's front matter and body to disk.

        Unsaved documents get a generated path inside their collection
        directory (or the source root for pages) first.

        Returns:
            True, or False when a before_save hook vetoed the save.
        """
        if not self.is_bound:
            raise ModelBindingError(f"{type(self).__name__} is not bound to a document")
        return self.hook_registry.run(self, "save", self._perform_save)

    def _perform_save(self) -> bool:
        document = self.wrapped_document
        if document.path is None:
            document.process_absolute_path(self._content_dir() / self.generate_new_slug())

        target = self.absolute_path_in_source_dir
        target.parent.mkdir(parents=True, exist_ok=True)
        new_file_contents = self.file_output_to_write()
        with open(target, "w", encoding="utf-8") as f:
            f.write(new_file_contents)

        self._changeset.clear()
        logger.debug("Saved %s", document.relative_path)
        return True

    def destroy(self) -> bool:
        """Delete the document's file and clear its path.

        Returns:
            True when the file was removed; False when the model was not
            persisted or a before_destroy hook vetoed it.
        """
        if not self.persisted:
            return False
        return self.hook_registry.run(self, "destroy", self._perform_destroy)

    def _perform_destroy(self) -> bool:
        target = self.absolute_path_in_source_dir
        target.unlink()
        self.wrapped_document.process_absolute_path(None)
        logger.debug("Deleted %s", target)
        return True

    def file_output_to_write(self) -> str:
        """Render the full file contents that ``save`` would write."""
        document = self.wrapped_document
        if document.json_file:
            return dump_json(self.processed_front_matter())
        front_matter = dump_data(self.processed_front_matter())
        if document.yaml_file:
            return front_matter
        return f"{front_matter}---\n\n{self.content or ''}"

    def processed_front_matter(self) -> dict[str, Any]:
        """Compute the front matter mapping to persist.

        New records persist their attributes as-is. Persisted records re-read
        the file, overwrite only the keys changed since the last save, and
        drop keys no longer present in the live attributes.

        Raises:
            FrontMatterNotFoundError: If a body-bearing file has no front matter,
                or a pure-data file is not a mapping.
        """
        if not self.persisted:
            return deep_stringify_keys(self.attributes)

        path = self.absolute_path_in_source_dir
        file_contents = path.read_text(encoding="utf-8")
        if self.wrapped_document.yaml_file:
            yaml_data = read_data(file_contents, path)
        else:
            yaml_data = read_front_matter(file_contents, path)

        attributes = self.attributes
        for attr in self.attribute_changes:
            yaml_data[str(attr)] = attributes.get(attr)
        for key in list(yaml_data):
            if key not in attributes:
                del yaml_data[key]
        return yaml_data

    def _content_dir(self) -> Path:
        document = self.wrapped_document
        if document.collection is not None:
            return document.collection.directory
        return document.site.source

    def _describe_document(self) -> str:
        if self._document is None:
            return "(unbound)"
        return self._document.relative_path or "(unsaved document)"

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self._describe_document()}>"


def to_content_model(document: Document) -> ContentModel:
    """Wrap ``document`` in the model variant registered for its collection."""
    return ContentModel.new_with_document(document)


default_content_strategy = ContentStrategy(default=ContentModel)
ContentModel.content_strategy = default_content_strategy
