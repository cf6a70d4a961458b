"""Folio content models.

This package wraps the documents of a static site (posts, pages and pure-data
files with YAML front matter) in model objects with attribute access, change
tracking and save/destroy persistence.

Typical use goes through ContentModel's finders:

    site = Site.from_root(".")
    post = ContentModel.find_all("posts", site)[0]
    post.title = "Renamed"
    post.save()

Architecture:
- configuration: Cascading defaults, config files and overrides.
- site: Documents, collections and the site that owns them.
- frontmatter: YAML front matter codec.
- model: ContentModel, finders and persistence.
- strategy / content_models: Collection label to model variant dispatch.
- hooks: before/after hooks around save and destroy.
"""

from . import content_models
from .content_models import Page, Post
from .model import ContentModel, default_content_strategy, to_content_model
from .site import Collection, Document, Site

__all__ = [
    "Collection",
    "ContentModel",
    "Document",
    "Page",
    "Post",
    "Site",
    "__version__",
    "content_models",
    "default_content_strategy",
    "to_content_model",
]
__version__ = "0.1.0"
