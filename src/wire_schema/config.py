"""wire-schema Configuration.

This module defines the GeneratorConfig class and preset configurations.
A config is passed to the component registry (and through it to the
derivation engine) and to the document builder.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Union

import yaml

from wire_schema.types import (
    OPENAPI_VERSION,
    SCHEMA_REFERENCE_PREFIX,
    InvalidConfigError,
)


@dataclass(frozen=True)
class GeneratorConfig:
    """Settings for one document build.

    Attributes:
        openapi_version: Version string emitted in the document
        reference_prefix: Path prefix for serialized schema links
        strict_merge: Raise when an internally tagged variant cannot take its
            tag property (default: log a warning and keep the variant as is)
        strict_overwrite: Raise when a different schema is re-registered under
            an existing name (default: last write wins, with a warning)
        link_back_edges: Break inline cycles through a named type with a link
            (when False, any inline cycle raises InlineRecursionError)
        json_indent: Indentation for Document.to_json()

    Example:
        >>> config = GeneratorConfig(strict_merge=True)
        >>> config = DEFAULT_CONFIG.with_overrides(json_indent=4)
        >>> config = GeneratorConfig.from_yaml("wire-schema.yaml")
    """
    openapi_version: str = OPENAPI_VERSION
    reference_prefix: str = SCHEMA_REFERENCE_PREFIX
    strict_merge: bool = False
    strict_overwrite: bool = False
    link_back_edges: bool = True
    json_indent: int = 2

    def __post_init__(self) -> None:
        if not self.openapi_version:
            raise InvalidConfigError("openapi_version must not be empty")
        if not self.reference_prefix:
            raise InvalidConfigError("reference_prefix must not be empty")
        if self.json_indent < 0:
            raise InvalidConfigError(f"json_indent must be >= 0, got {self.json_indent}")

    def with_overrides(self, **overrides: Any) -> GeneratorConfig:
        """Return a copy with some settings replaced."""
        unknown = set(overrides) - {f.name for f in fields(self)}
        if unknown:
            raise InvalidConfigError(f"unknown settings: {', '.join(sorted(unknown))}")
        return replace(self, **overrides)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> GeneratorConfig:
        """Create from dictionary, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidConfigError(f"unknown settings: {', '.join(sorted(unknown))}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> GeneratorConfig:
        """Load configuration from a YAML file.

        The file holds a mapping of setting names, either at the top level or
        under a ``wire_schema`` key.
        """
        path = Path(path)
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise InvalidConfigError(f"{path} must contain a mapping")
        if "wire_schema" in data:
            data = data["wire_schema"] or {}

        return cls.from_dict(data)


# =============================================================================
# Preset Configurations
# =============================================================================

# Behaviour as documented for the engine: swallowed-but-logged merge failures,
# last-write-wins registration.
DEFAULT_CONFIG = GeneratorConfig()

# Every questionable construction is an error.
STRICT_CONFIG = GeneratorConfig(
    strict_merge=True,
    strict_overwrite=True,
    link_back_edges=False,
)
