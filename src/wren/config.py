"""Application configuration.

AppConfig is a frozen dataclass, immutable after creation and IDE-autocompletable,
no string-key dict lookups. Paths that start with ``/`` are site-absolute:
they are resolved inside ``root`` by the file store, never against the
host filesystem root.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from wren.errors import ConfigurationError

_ENV_PREFIX = "WREN_"


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(root="./site", port=3000, admin_password="s3cr3t")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    debug: bool = False
    log_level: str = "info"

    # Content root and layout (site-absolute paths inside root)
    root: str | Path = "site"
    templates_dir: str = "/templates"
    posts_dir: str = "/posts"
    routes_file: str = "/config/routes.txt"
    redirects_file: str = "/config/redirects.txt"
    static_prefix: str = "/static/"
    posts_prefix: str = "/posts/"

    # Listing
    site_title: str = "My Blog"
    posts_per_page: int = 20

    # Admin panel
    admin_enabled: bool = True
    admin_user: str = "admin"
    admin_password: str = "admin123"
    admin_realm: str = "Admin Panel"
    edit_warning_chars: int = 4000

    # Traffic log
    traffic_log: bool = True
    log_path: str = "/logs/access.log"
    rotated_log_path: str = "/logs/access.old"
    max_log_size: int = 500_000
    log_tail_lines: int = 100

    # Static files
    cache_control: str = "max-age=86400"
    large_file_warning: int = 200_000

    def __post_init__(self) -> None:
        if self.posts_per_page < 1:
            msg = f"posts_per_page must be at least 1, got {self.posts_per_page}"
            raise ConfigurationError(msg)
        if self.max_log_size < 0:
            msg = f"max_log_size must not be negative, got {self.max_log_size}"
            raise ConfigurationError(msg)
        for name in ("static_prefix", "posts_prefix"):
            value = getattr(self, name)
            if not (value.startswith("/") and value.endswith("/")):
                msg = f"{name} must start and end with '/', got {value!r}"
                raise ConfigurationError(msg)

    @classmethod
    def from_env(cls, **overrides: Any) -> AppConfig:
        """Build a config from ``WREN_*`` environment variables.

        Every field can be set as ``WREN_<FIELD>`` (upper case). Explicit
        keyword overrides win over the environment::

            WREN_ROOT=/srv/blog WREN_ADMIN_PASSWORD=hunter2 wren serve
        """
        values: dict[str, Any] = {}
        for f in fields(cls):
            raw = os.environ.get(_ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            values[f.name] = _coerce(f.name, raw, type(getattr(_DEFAULTS, f.name)))
        values.update(overrides)
        return cls(**values)

    def with_overrides(self, **changes: Any) -> AppConfig:
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)


def _coerce(name: str, raw: str, target: type) -> Any:
    """Convert an environment string to the default value's type."""
    if target is bool:
        return raw.strip().lower() in ("1", "true", "yes", "on")
    if target is int:
        try:
            return int(raw)
        except ValueError:
            msg = f"{_ENV_PREFIX}{name.upper()} must be an integer, got {raw!r}"
            raise ConfigurationError(msg) from None
    return raw


_DEFAULTS = AppConfig()
