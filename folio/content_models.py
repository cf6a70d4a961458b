"""Built-in content model variants.

Importing this module registers the variants with the default strategy, so
pages and posts are wrapped in their own model types.
"""

from __future__ import annotations

from .model import ContentModel, default_content_strategy


class Page(ContentModel):
    """Model for standalone pages."""


class Post(ContentModel):
    """Model for entries of the ``posts`` collection."""


default_content_strategy.register(Page, for_label="pages")
default_content_strategy.register(Post, for_label="posts")
