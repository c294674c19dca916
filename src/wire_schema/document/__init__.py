"""Wire Schema Document - OpenAPI document assembly.

Package Structure:
    - builder.py: DocumentBuilder, PathBuilder, OperationBuilder
    - models.py: Document and its value objects (Info, Path, Operation, ...)

Usage:
    >>> from wire_schema.document import DocumentBuilder, HttpSecurityScheme
    >>> api = DocumentBuilder("Pets", "1.0.0")
    >>> api.security_scheme("bearerAuth", HttpSecurityScheme.bearer("JWT"))
    >>> api.build().write("openapi.yaml")
"""

from .builder import DocumentBuilder, OperationBuilder, PathBuilder
from .models import (
    JSON_MEDIA_TYPE,
    ApiKeySecurityScheme,
    Callback,
    Document,
    HttpMethod,
    HttpSecurityScheme,
    Info,
    Operation,
    OperationParameter,
    ParameterIn,
    Path,
    PathElement,
    PathValue,
    RequestBody,
    Response,
    Server,
    Tag,
)

__all__ = [
    # Builders
    "DocumentBuilder",
    "OperationBuilder",
    "PathBuilder",
    # Document
    "JSON_MEDIA_TYPE",
    "ApiKeySecurityScheme",
    "Callback",
    "Document",
    "HttpMethod",
    "HttpSecurityScheme",
    "Info",
    "Operation",
    "OperationParameter",
    "ParameterIn",
    "Path",
    "PathElement",
    "PathValue",
    "RequestBody",
    "Response",
    "Server",
    "Tag",
]
