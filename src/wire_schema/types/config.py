"""Wire Schema Types - Shape Enums and Constants.

This module defines the closed sets shared by the descriptor layer, the
derivation engine and the document assembler:

- ShapeKind: which derivation rule applies to a type
- VariantStyle: the payload shape of a single enum variant
- TagKind: the tagging convention a serializer uses for an enum
- ExplicitModelType: explicit type overrides declared on a field or newtype
"""

from __future__ import annotations

from enum import Enum


# OpenAPI version emitted by default
OPENAPI_VERSION = "3.0.3"

# Path prefix for serialized schema links
SCHEMA_REFERENCE_PREFIX = "#/components/schemas/"


class ShapeKind(Enum):
    """Structural kind of a described type.

    Attributes:
        RECORD: Named fields (serialized as an object)
        TUPLE: Positional fields (serialized as an array)
        NEWTYPE: Single unnamed field, serialized as the field itself
        ENUM: Tagged union of variants
        PRIMITIVE: Fixed schema template (strings, numbers, booleans)
        ARRAY: Homogeneous sequence of one item type
        MAP: String-keyed dictionary of one value type
        WRAPPER: Pass-through wrapper around another type (optionally nullable)
    """
    RECORD = "record"
    TUPLE = "tuple"
    NEWTYPE = "newtype"
    ENUM = "enum"
    PRIMITIVE = "primitive"
    ARRAY = "array"
    MAP = "map"
    WRAPPER = "wrapper"


class VariantStyle(Enum):
    """Payload shape of an enum variant.

    Attributes:
        UNIT: No payload
        NEWTYPE: Exactly one unnamed field
        TUPLE: Two or more unnamed fields
        RECORD: Named fields
    """
    UNIT = "unit"
    NEWTYPE = "newtype"
    TUPLE = "tuple"
    RECORD = "record"


class TagKind(Enum):
    """Enum tagging convention used by the companion serializer.

    Attributes:
        EXTERNAL: ``{"Variant": payload}`` (default)
        INTERNAL: tag property merged into the payload object
        ADJACENT: ``{"tag": "Variant", "content": payload}``
        UNTAGGED: payload only
    """
    EXTERNAL = "external"
    INTERNAL = "internal"
    ADJACENT = "adjacent"
    UNTAGGED = "untagged"


class ExplicitModelType(Enum):
    """Explicit schema type that replaces a member's own derived schema."""
    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY = "array"
