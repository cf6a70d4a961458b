"""Site configuration loading for Folio.

Configuration is a cascade: built-in defaults, then the site's config file(s),
then caller overrides. Each layer is deep-merged over the previous one.

Key names:
- DEFAULTS: Built-in configuration values.
- Configuration: dict subclass with the normalization steps.
- load_configuration: Build the effective configuration for a project root.
"""

from __future__ import annotations

import copy
import logging
import tomllib
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml

from .errors import InvalidConfigurationError
from .frontmatter import deep_stringify_keys
from .utils import deep_merge

logger = logging.getLogger(__name__)

CONFIG_CANDIDATES = (
    "folio.config.yml",
    "folio.config.yaml",
    "folio.config.toml",
    "_config.yml",
)

PERMALINK_STYLES = {
    "date": "/:categories/:year/:month/:day/:title:output_ext",
    "pretty": "/:categories/:year/:month/:day/:title/",
    "ordinal": "/:categories/:year/:y_day/:title:output_ext",
    "none": "/:categories/:title:output_ext",
}

DEFAULT_EXCLUDES = ("node_modules", ".folio-cache", "vendor/")

DEFAULTS: dict[str, Any] = {
    "root_dir": ".",
    "source": "src",
    "destination": "output",
    "collections_dir": "",
    "collections": {},
    "permalink": "date",
    "include": [],
    "exclude": [],
    "environment": "development",
    "content_model": {
        "order_by": "posted_datetime",
        "order_direction": "desc",
    },
}


class Configuration(dict):
    """Site configuration with Folio's normalization rules applied."""

    @classmethod
    def from_(cls, user_config: Mapping[str, Any] | None = None) -> Configuration:
        """Merge ``user_config`` over the defaults and normalize the result.

        Args:
            user_config: Values to merge over DEFAULTS.

        Returns:
            A normalized Configuration.
        """
        merged = deep_merge(copy.deepcopy(DEFAULTS), deep_stringify_keys(user_config or {}))
        config = cls(merged)
        config.merge_environment_specific_options()
        config.add_default_collections()
        config.add_default_excludes()
        return config

    def config_files(self, override: Mapping[str, Any]) -> list[Path]:
        """Return the config files to read, in merge order.

        An explicit ``config`` override (a string or a list) wins. Otherwise
        the first existing candidate under ``root_dir`` is used, falling back
        to ``folio.config.yml`` even when it does not exist.
        """
        requested = override.get("config")
        if isinstance(requested, str):
            requested = [part.strip() for part in requested.split(",")]
        if requested:
            files = [Path(str(name)) for name in requested if str(name).strip()]
            if files:
                return files

        root = Path(self.get("root_dir") or ".")
        for name in CONFIG_CANDIDATES:
            candidate = root / name
            if candidate.exists():
                return [candidate]
        return [root / CONFIG_CANDIDATES[0]]

    def read_config_file(self, path: Path | str) -> dict[str, Any]:
        """Read a single YAML or TOML config file.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        path = Path(path)
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() == ".toml":
            loaded: Any = tomllib.loads(text)
        else:
            loaded = yaml.safe_load(text)
        if loaded is None:
            return {}
        if not isinstance(loaded, dict):
            logger.warning(
                "Error reading configuration file %s; using defaults (and options)", path
            )
            return {}
        logger.info("Configuration file: %s", path)
        return deep_stringify_keys(loaded)

    def read_config_files(
        self, files: Iterable[Path | str], required: bool = True
    ) -> Configuration:
        """Read ``files`` in order and merge them over this configuration.

        Args:
            files: Config files to read; the last one wins on conflicts.
            required: Whether a missing file is an error. Default candidates
                are not required; user-specified files are.

        Raises:
            InvalidConfigurationError: If a required file is missing.
        """
        merged: dict[str, Any] = dict(self)
        for path in files:
            try:
                loaded = self.read_config_file(path)
            except FileNotFoundError as exc:
                if required:
                    raise InvalidConfigurationError(
                        f"The configuration file '{path}' could not be found."
                    ) from exc
                logger.info("Configuration file: none")
                continue
            merged = deep_merge(merged, loaded)
        return Configuration(merged)

    def add_default_collections(self) -> Configuration:
        """Ensure ``collections`` is a mapping that always contains ``posts``."""
        collections = self.get("collections")
        if collections is None:
            return self
        if isinstance(collections, list):
            normalized = {str(name): {} for name in collections}
        else:
            normalized = {str(name): dict(meta or {}) for name, meta in collections.items()}

        posts = normalized.setdefault("posts", {})
        posts["output"] = True
        style = self.get("permalink")
        if style and "permalink" not in posts:
            posts["permalink"] = PERMALINK_STYLES.get(style, style)
        self["collections"] = normalized
        return self

    def add_default_excludes(self) -> Configuration:
        """Append the always-excluded paths to ``exclude``."""
        excludes = self.get("exclude")
        if not isinstance(excludes, list):
            return self
        self["exclude"] = excludes + [name for name in DEFAULT_EXCLUDES if name not in excludes]
        return self

    def merge_environment_specific_options(self) -> Configuration:
        """Hoist the keys nested under the current environment to the top level."""
        environment = str(self.get("environment") or "development")
        options = self.get(environment)
        if isinstance(options, Mapping):
            del self[environment]
            self.update(deep_merge(self, options))
        return self

    def check_include_exclude(self) -> None:
        """Reject ``include``/``exclude`` given as comma-separated strings.

        Raises:
            InvalidConfigurationError: If either option is a string.
        """
        for option in ("include", "exclude"):
            if isinstance(self.get(option), str):
                raise InvalidConfigurationError(
                    f"'{option}' should be set as an array, but was: {self[option]!r}."
                )


def load_configuration(
    root_dir: Path | str, overrides: Mapping[str, Any] | None = None
) -> Configuration:
    """Build the effective configuration for a project root.

    Args:
        root_dir: Project root directory.
        overrides: Values that take precedence over any config file.

    Returns:
        The merged, normalized Configuration.
    """
    overrides = deep_stringify_keys(overrides or {})
    root = Path(root_dir).absolute()
    base = Configuration({"root_dir": str(root)})
    files = base.config_files(overrides)
    requested = overrides.get("config") or []
    if isinstance(requested, str):
        requested = [requested]
    required = any(str(name).strip() for name in requested)
    resolved = [path if path.is_absolute() else root / path for path in files]
    from_files = base.read_config_files(resolved, required=required)
    config = Configuration.from_(deep_merge(from_files, overrides))
    config["root_dir"] = str(root)
    config.check_include_exclude()
    return config
