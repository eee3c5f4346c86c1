"""
Client configuration for simple_http_client.

A ClientConfig is immutable. Changing a client's defaults produces a new
config value, so a request that has already taken its snapshot keeps
the settings it started with.
"""

import copy
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional

from . import __version__

logger = logging.getLogger(__name__)


def merge_headers(*layers: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """
    Merge header mappings, later layers winning.

    Header names are compared case-insensitively; the spelling of the
    last writer is kept.
    """
    merged: Dict[str, str] = {}
    index: Dict[str, str] = {}
    for layer in layers:
        if not layer:
            continue
        for name, value in layer.items():
            key = name.lower()
            previous = index.get(key)
            if previous is not None:
                del merged[previous]
            merged[name] = str(value)
            index[key] = name
    return merged


@dataclass(frozen=True)
class ClientConfig:
    """
    Default settings applied to every request of a client.

    Attributes:
        timeout: Seconds allowed for a whole request, ``None`` for no limit
        headers: Default request headers
        max_body_size: Maximum response body size in bytes, ``None`` for
            no limit
        extras: Unrecognized options, kept as given and otherwise ignored

    Build configs with ``create``: it is the only constructor that layers
    caller headers over DEFAULT_HEADERS. Passing ``headers`` to the class
    directly replaces the defaults entirely.
    """

    DEFAULT_TIMEOUT = 5.0
    DEFAULT_HEADERS = {
        "User-Agent": f"simple-http-client/{__version__}",
        "Content-Type": "application/json",
    }

    timeout: Optional[float] = DEFAULT_TIMEOUT
    headers: Dict[str, str] = field(default_factory=lambda: dict(ClientConfig.DEFAULT_HEADERS))
    max_body_size: Optional[int] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.timeout is not None and self.timeout < 0:
            raise ValueError("timeout must be non-negative")

        if self.max_body_size is not None and self.max_body_size < 0:
            raise ValueError("max_body_size must be non-negative")

        if not isinstance(self.headers, dict):
            raise ValueError("headers must be a dict")

    @classmethod
    def create(
        cls,
        timeout: Optional[float] = DEFAULT_TIMEOUT,
        headers: Optional[Mapping[str, str]] = None,
        max_body_size: Optional[int] = None,
        **extras: Any,
    ) -> "ClientConfig":
        """
        Create a config, layering ``headers`` over the built-in defaults.

        Unknown keyword options are stored in ``extras`` and have no effect
        on requests.
        """
        if extras:
            logger.debug(f"Ignoring unknown client options: {sorted(extras)}")

        return cls(
            timeout=timeout,
            headers=merge_headers(cls.DEFAULT_HEADERS, headers),
            max_body_size=max_body_size,
            extras=copy.deepcopy(extras),
        )

    def with_headers(self, headers: Mapping[str, str]) -> "ClientConfig":
        """Create a new config with ``headers`` merged over the current ones."""
        return replace(
            self,
            headers=merge_headers(self.headers, headers),
            extras=copy.deepcopy(self.extras),
        )

    def with_timeout(self, timeout: Optional[float]) -> "ClientConfig":
        """Create a new config with a different default timeout."""
        return replace(
            self,
            timeout=timeout,
            headers=dict(self.headers),
            extras=copy.deepcopy(self.extras),
        )

    def merge(self, **overrides: Any) -> "ClientConfig":
        """
        Create an independent config with ``overrides`` applied on top.

        ``headers`` are merged last-write-wins, ``timeout`` and
        ``max_body_size`` are replaced when given, and any other keys are
        merged into ``extras``.
        """
        changes: Dict[str, Any] = {
            "headers": merge_headers(self.headers, overrides.pop("headers", None)),
        }
        for name in ("timeout", "max_body_size"):
            if name in overrides:
                changes[name] = overrides.pop(name)

        if overrides:
            logger.debug(f"Ignoring unknown client options: {sorted(overrides)}")
        changes["extras"] = copy.deepcopy({**self.extras, **overrides})

        return replace(self, **changes)

    def header(self, name: str) -> Optional[str]:
        """Get a default header value by name (case-insensitive)."""
        name_lower = name.lower()
        for header_name, value in self.headers.items():
            if header_name.lower() == name_lower:
                return value
        return None
