"""OpenAPI schema generation from structural type descriptors.

This package derives OpenAPI 3 schema objects from descriptions of how types
look on the wire (records, tuples, newtypes and tagged enums), deduplicates
named schemas into a components table, and assembles complete documents.

Describing Types:
    >>> from wire_schema import record, enum, builtins as b
    >>> user = (
    ...     record("User")
    ...     .field("id", b.UUID)
    ...     .field("note", b.STRING, optional=True)
    ...     .build()
    ... )
    >>> event = enum("Event").tagged("type", "payload").variant("Created", user).build()

Registering Schemas:
    >>> from wire_schema import ComponentRegistry
    >>> registry = ComponentRegistry()
    >>> registry.mention("User", user)
    Link(name='User')
    >>> registry.verify().ok
    True

Assembling a Document:
    >>> from wire_schema import DocumentBuilder
    >>> api = DocumentBuilder("Users", "1.0.0")
    >>> api.path("users").operation("post").body(user).response(201, "Created", user)
    >>> print(api.build().to_yaml())

Presets:
    >>> from wire_schema import DEFAULT_CONFIG, STRICT_CONFIG
    >>> api = DocumentBuilder("Users", "1.0.0", config=STRICT_CONFIG)
"""

__version__ = "0.1.0"

from wire_schema.types import (
    # Constants
    OPENAPI_VERSION,
    SCHEMA_REFERENCE_PREFIX,
    # Enums
    ExplicitModelType,
    ShapeKind,
    TagKind,
    VariantStyle,
    # Model tree
    ContextParams,
    Inline,
    Link,
    Model,
    ModelArray,
    ModelBoolean,
    ModelInteger,
    ModelNumber,
    ModelObject,
    ModelOneOf,
    ModelReference,
    ModelString,
    ModelType,
    # Descriptors
    FieldDescriptor,
    TaggingConvention,
    TypeDescriptor,
    VariantDescriptor,
    # Exceptions
    DescriptorError,
    DuplicateComponentError,
    InlineRecursionError,
    InvalidConfigError,
    ModelMergeError,
    UnresolvedReferenceError,
    UnsupportedShapeError,
    WireSchemaError,
)

from wire_schema.config import DEFAULT_CONFIG, STRICT_CONFIG, GeneratorConfig

from wire_schema.schema import (
    ComponentRegistry,
    VerificationResult,
    derive_schema,
    explicit_model,
    resolve_params,
)

from wire_schema.core import (
    RenameRule,
    builtins,
    enum,
    field,
    newtype,
    record,
    tuple_struct,
)

from wire_schema.document import (
    ApiKeySecurityScheme,
    Document,
    DocumentBuilder,
    HttpMethod,
    HttpSecurityScheme,
    ParameterIn,
)

__all__ = [
    # Version
    "__version__",
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
    "ModelInteger",
    "ModelNumber",
    "ModelObject",
    "ModelOneOf",
    "ModelReference",
    "ModelString",
    "ModelType",
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
    # Config
    "DEFAULT_CONFIG",
    "STRICT_CONFIG",
    "GeneratorConfig",
    # Derivation
    "ComponentRegistry",
    "VerificationResult",
    "derive_schema",
    "explicit_model",
    "resolve_params",
    # Registration
    "RenameRule",
    "builtins",
    "enum",
    "field",
    "newtype",
    "record",
    "tuple_struct",
    # Documents
    "ApiKeySecurityScheme",
    "Document",
    "DocumentBuilder",
    "HttpMethod",
    "HttpSecurityScheme",
    "ParameterIn",
]
