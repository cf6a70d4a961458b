"""Collection label to content model dispatch.

A ContentStrategy maps collection labels to the model variant that should
wrap documents of that collection. Variants register themselves when their
module is imported; lookups for unregistered labels fall back to a default.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .model import ContentModel
    from .site import Document

PAGES_LABEL = "pages"


class ContentStrategy:
    """Registry of model variants keyed by collection label.

    Labels are compared literally, case included. The last registration for
    a label wins.

    Attributes:
        default: Variant returned when no registration matches.
    """

    def __init__(self, default: type[ContentModel]):
        self.default = default
        self._variants: dict[str, type[ContentModel]] = {}
        self._lock = threading.Lock()

    def register(self, variant: type[ContentModel], for_label: str) -> None:
        """Associate ``for_label`` with ``variant``, replacing any previous entry."""
        with self._lock:
            self._variants[str(for_label)] = variant

    def resolve_for_label(self, label: str) -> type[ContentModel]:
        """Return the variant registered for ``label``, or the default."""
        return self._variants.get(str(label), self.default)

    def resolve_for_document(self, document: Document) -> type[ContentModel]:
        """Return the variant for the document's collection.

        Documents outside any collection resolve through the ``pages`` label.
        """
        if document.collection is not None:
            return self.resolve_for_label(document.collection.label)
        return self.resolve_for_label(PAGES_LABEL)

    def labels(self) -> list[str]:
        return list(self._variants)
