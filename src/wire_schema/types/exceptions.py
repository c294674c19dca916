"""Wire Schema Types - Exception Classes.

This module defines all exceptions raised while deriving schemas and
assembling documents. All exceptions inherit from WireSchemaError for easy
catching.

Usage:
    try:
        document = builder.build()
    except WireSchemaError as e:
        print(f"Schema generation failed: {e}")
"""

from __future__ import annotations

from typing import Optional, Sequence


class WireSchemaError(Exception):
    """Base exception for all wire-schema errors.

    All exceptions in this package inherit from this class,
    making it easy to catch every generation-related error.
    """
    pass


class ModelMergeError(WireSchemaError):
    """Raised when two models cannot be merged or a property collides."""

    def __init__(self, message: str = "", property_name: str = ""):
        self.property_name = property_name
        msg = "Cannot merge models"
        if property_name:
            msg += f": property '{property_name}' already exists"
        elif message:
            msg += f": {message}"
        super().__init__(msg)


class UnsupportedShapeError(WireSchemaError):
    """Raised when a type shape / tagging combination has no schema rule.

    This is a build-time programmer error: generation for the type aborts.
    """

    def __init__(self, type_name: Optional[str], reason: str):
        self.type_name = type_name
        self.reason = reason
        msg = "Unsupported shape"
        if type_name:
            msg += f" for {type_name}"
        msg += f": {reason}"
        super().__init__(msg)


class UnresolvedReferenceError(WireSchemaError):
    """Raised when a schema link has no matching registry entry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unresolved schema reference: {name}")


class InlineRecursionError(WireSchemaError):
    """Raised when a type would have to inline itself."""

    def __init__(self, path: Sequence[str]):
        self.path = list(path)
        super().__init__(
            "Type graph recurses through inline schemas: " + " -> ".join(self.path)
        )


class DuplicateComponentError(WireSchemaError):
    """Raised when a different model is re-registered under an existing name."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"A different schema is already registered as '{name}'")


class DescriptorError(WireSchemaError):
    """Raised when a type descriptor is declared inconsistently."""

    def __init__(self, message: str, owner: str = ""):
        self.owner = owner
        msg = "Invalid descriptor"
        if owner:
            msg += f" ({owner})"
        msg += f": {message}"
        super().__init__(msg)


class InvalidConfigError(WireSchemaError):
    """Raised when configuration is invalid."""

    def __init__(self, message: str):
        super().__init__(f"Invalid configuration: {message}")
