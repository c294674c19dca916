"""Wire Schema Types - Shared type definitions.

This package provides the value types shared by the derivation engine, the
component registry and the document assembler.

Package Structure:
    - config.py: Shape enums (ShapeKind, VariantStyle, TagKind, ...) and constants
    - models.py: Schema model tree (Model, ModelObject, Link, Inline, ...)
    - descriptors.py: Type descriptors consumed by the engine
    - exceptions.py: Exception classes (WireSchemaError and subclasses)

Usage:
    >>> from wire_schema.types import Model, Link, Inline, ContextParams
    >>> from wire_schema.types import TypeDescriptor, ShapeKind
    >>> from wire_schema.types import WireSchemaError, UnresolvedReferenceError
"""

# Shape enums and constants
from .config import (
    OPENAPI_VERSION,
    SCHEMA_REFERENCE_PREFIX,
    ExplicitModelType,
    ShapeKind,
    TagKind,
    VariantStyle,
)

# Model tree
from .models import (
    ContextParams,
    Inline,
    Link,
    Model,
    ModelArray,
    ModelBoolean,
    ModelData,
    ModelInteger,
    ModelNumber,
    ModelObject,
    ModelOneOf,
    ModelReference,
    ModelSimple,
    ModelString,
    ModelType,
    TypeDescription,
)

# Descriptors
from .descriptors import (
    FieldDescriptor,
    TaggingConvention,
    TypeDescriptor,
    VariantDescriptor,
)

# Exceptions
from .exceptions import (
    DescriptorError,
    DuplicateComponentError,
    InlineRecursionError,
    InvalidConfigError,
    ModelMergeError,
    UnresolvedReferenceError,
    UnsupportedShapeError,
    WireSchemaError,
)

__all__ = [
    # Constants
    "OPENAPI_VERSION",
    "SCHEMA_REFERENCE_PREFIX",
    # Enums
    "ExplicitModelType",
    "ShapeKind",
    "TagKind",
    "VariantStyle",
    # Model tree
    "ContextParams",
    "Inline",
    "Link",
    "Model",
    "ModelArray",
    "ModelBoolean",
    "ModelData",
    "ModelInteger",
    "ModelNumber",
    "ModelObject",
    "ModelOneOf",
    "ModelReference",
    "ModelSimple",
    "ModelString",
    "ModelType",
    "TypeDescription",
    # Descriptors
    "FieldDescriptor",
    "TaggingConvention",
    "TypeDescriptor",
    "VariantDescriptor",
    # Exceptions
    "DescriptorError",
    "DuplicateComponentError",
    "InlineRecursionError",
    "InvalidConfigError",
    "ModelMergeError",
    "UnresolvedReferenceError",
    "UnsupportedShapeError",
    "WireSchemaError",
]
