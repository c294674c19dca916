"""Document value objects.

The OpenAPI document assembled around the component registry. Every object
provides to_dict() producing its OpenAPI form; unset optional values and
empty collections are omitted.

Structure:
    Document
      ├── info: Info
      ├── tags: {name: Tag}            (emitted as a list, by name)
      ├── servers: [Server]
      ├── paths: [(Path, PathValue)]   (declaration order)
      │     PathValue
      │       ├── operations: {HttpMethod: Operation}
      │       └── parameters: {name: OperationParameter}
      └── components: ComponentRegistry
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path as FilePath
from typing import Any, Optional, Union

import yaml

from wire_schema.config import DEFAULT_CONFIG, GeneratorConfig
from wire_schema.schema.registry import ComponentRegistry
from wire_schema.types import ModelReference

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


class HttpMethod(Enum):
    """Path item operation type, in OpenAPI emission order."""
    GET = "get"
    PUT = "put"
    POST = "post"
    DELETE = "delete"
    OPTIONS = "options"
    HEAD = "head"
    PATCH = "patch"
    TRACE = "trace"

    @classmethod
    def parse(cls, value: Union[HttpMethod, str]) -> HttpMethod:
        if isinstance(value, HttpMethod):
            return value
        return cls(value.lower())

    @property
    def order(self) -> int:
        return list(HttpMethod).index(self)


class ParameterIn(Enum):
    """Location of a parameter."""
    QUERY = "query"
    HEADER = "header"
    PATH = "path"
    COOKIE = "cookie"


@dataclass
class Info:
    """API metadata."""
    title: str
    version: str
    description: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"title": self.title}
        if self.description is not None:
            data["description"] = self.description
        data["version"] = self.version
        return data


@dataclass
class Tag:
    description: Optional[str] = None

    def to_dict(self, name: str) -> dict:
        data = {"name": name}
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass
class Server:
    url: str
    description: Optional[str] = None

    def to_dict(self) -> dict:
        data = {"url": self.url}
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass(frozen=True)
class PathElement:
    """One segment of a path: a literal or a ``{parameter}``."""
    value: str
    is_parameter: bool = False

    @classmethod
    def literal(cls, value: str) -> PathElement:
        return cls(value)

    @classmethod
    def parameter(cls, name: str) -> PathElement:
        return cls(name, is_parameter=True)

    def __str__(self) -> str:
        return f"{{{self.value}}}" if self.is_parameter else self.value


@dataclass(frozen=True)
class Path:
    """Path key, e.g. ``/pets/{petId}``."""
    elements: tuple[PathElement, ...] = ()

    def __str__(self) -> str:
        return "".join(f"/{element}" for element in self.elements)

    @property
    def parameter_names(self) -> list[str]:
        return [e.value for e in self.elements if e.is_parameter]


@dataclass
class OperationParameter:
    """Parameter of a path or an operation."""
    parameter_in: ParameterIn
    description: Optional[str] = None
    required: bool = False
    deprecated: bool = False
    schema: Optional[ModelReference] = None

    def to_dict(self, name: str, reference_prefix: str) -> dict:
        data: dict[str, Any] = {"name": name}
        if self.description is not None:
            data["description"] = self.description
        data["in"] = self.parameter_in.value
        if self.required:
            data["required"] = True
        if self.deprecated:
            data["deprecated"] = True
        if self.schema is not None:
            data["schema"] = self.schema.to_dict(reference_prefix)
        return data


def _content(schema: ModelReference, reference_prefix: str) -> dict:
    return {JSON_MEDIA_TYPE: {"schema": schema.to_dict(reference_prefix)}}


def _parameters(parameters: dict[str, OperationParameter], reference_prefix: str) -> list:
    return [
        parameters[name].to_dict(name, reference_prefix) for name in sorted(parameters)
    ]


@dataclass
class RequestBody:
    schema: ModelReference
    description: Optional[str] = None
    required: bool = True

    def to_dict(self, reference_prefix: str) -> dict:
        data: dict[str, Any] = {}
        if self.required:
            data["required"] = True
        if self.description is not None:
            data["description"] = self.description
        data["content"] = _content(self.schema, reference_prefix)
        return data


@dataclass
class Response:
    description: str
    schema: Optional[ModelReference] = None

    def to_dict(self, reference_prefix: str) -> dict:
        data: dict[str, Any] = {"description": self.description}
        if self.schema is not None:
            data["content"] = _content(self.schema, reference_prefix)
        return data


@dataclass
class Operation:
    """A single API operation on a path."""
    tags: list[str] = field(default_factory=list)
    summary: Optional[str] = None
    operation_id: Optional[str] = None
    description: Optional[str] = None
    deprecated: bool = False
    security: list[dict[str, list[str]]] = field(default_factory=list)
    request_body: Optional[RequestBody] = None
    responses: dict[int, Response] = field(default_factory=dict)
    parameters: dict[str, OperationParameter] = field(default_factory=dict)
    callbacks: dict[str, Callback] = field(default_factory=dict)

    def to_dict(self, reference_prefix: str) -> dict:
        data: dict[str, Any] = {}
        if self.tags:
            data["tags"] = list(self.tags)
        if self.summary is not None:
            data["summary"] = self.summary
        if self.operation_id is not None:
            data["operationId"] = self.operation_id
        if self.description is not None:
            data["description"] = self.description
        if self.deprecated:
            data["deprecated"] = True
        if self.security:
            data["security"] = [
                {name: list(scopes) for name, scopes in sorted(item.items())}
                for item in self.security
            ]
        if self.request_body is not None:
            data["requestBody"] = self.request_body.to_dict(reference_prefix)
        data["responses"] = {
            str(code): self.responses[code].to_dict(reference_prefix)
            for code in sorted(self.responses)
        }
        if self.parameters:
            data["parameters"] = _parameters(self.parameters, reference_prefix)
        if self.callbacks:
            data["callbacks"] = {
                name: self.callbacks[name].to_dict(reference_prefix)
                for name in sorted(self.callbacks)
            }
        return data


@dataclass
class PathValue:
    """Path item: the operations and shared parameters of one path."""
    summary: Optional[str] = None
    description: Optional[str] = None
    operations: dict[HttpMethod, Operation] = field(default_factory=dict)
    parameters: dict[str, OperationParameter] = field(default_factory=dict)

    def to_dict(self, reference_prefix: str) -> dict:
        data: dict[str, Any] = {}
        if self.summary is not None:
            data["summary"] = self.summary
        if self.description is not None:
            data["description"] = self.description
        for method in sorted(self.operations, key=lambda m: m.order):
            data[method.value] = self.operations[method].to_dict(reference_prefix)
        if self.parameters:
            data["parameters"] = _parameters(self.parameters, reference_prefix)
        return data


def _paths_dict(paths: list[tuple[Path, PathValue]], reference_prefix: str) -> dict:
    return {str(path): value.to_dict(reference_prefix) for path, value in paths}


@dataclass
class Callback:
    """Callback object: out-of-band paths keyed like the document's paths."""
    paths: list[tuple[Path, PathValue]] = field(default_factory=list)

    def to_dict(self, reference_prefix: str) -> dict:
        return _paths_dict(self.paths, reference_prefix)


@dataclass
class HttpSecurityScheme:
    """HTTP authentication scheme (``basic`` or ``bearer``)."""
    scheme: str = "bearer"
    bearer_format: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if self.scheme not in ("basic", "bearer"):
            raise ValueError(f"Unsupported HTTP security scheme: {self.scheme!r}")
        if self.scheme == "basic" and self.bearer_format is not None:
            raise ValueError("bearer_format only applies to the bearer scheme")

    @classmethod
    def basic(cls, description: Optional[str] = None) -> HttpSecurityScheme:
        return cls("basic", description=description)

    @classmethod
    def bearer(
        cls,
        bearer_format: Optional[str] = None,
        description: Optional[str] = None,
    ) -> HttpSecurityScheme:
        return cls("bearer", bearer_format=bearer_format, description=description)

    def to_dict(self) -> dict:
        data: dict[str, Any] = {"type": "http", "scheme": self.scheme}
        if self.bearer_format is not None:
            data["bearerFormat"] = self.bearer_format
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass
class ApiKeySecurityScheme:
    """API key passed in a header, query or cookie parameter."""
    name: str
    parameter_in: ParameterIn = ParameterIn.HEADER
    description: Optional[str] = None

    def to_dict(self) -> dict:
        data: dict[str, Any] = {
            "type": "apiKey",
            "in": self.parameter_in.value,
            "name": self.name,
        }
        if self.description is not None:
            data["description"] = self.description
        return data


@dataclass
class Document:
    """Assembled OpenAPI document.

    Example:
        >>> document = DocumentBuilder("Pets", "1.0.0").build()
        >>> document.to_dict()["openapi"]
        '3.0.3'
        >>> document.write("openapi.yaml")
    """
    info: Info
    components: ComponentRegistry
    tags: dict[str, Tag] = field(default_factory=dict)
    servers: list[Server] = field(default_factory=list)
    paths: list[tuple[Path, PathValue]] = field(default_factory=list)
    config: GeneratorConfig = DEFAULT_CONFIG

    def to_dict(self) -> dict:
        """Convert to an OpenAPI document object."""
        prefix = self.config.reference_prefix
        data: dict[str, Any] = {
            "openapi": self.config.openapi_version,
            "info": self.info.to_dict(),
        }
        if self.tags:
            data["tags"] = [tag.to_dict(name) for name, tag in sorted(self.tags.items())]
        if self.servers:
            data["servers"] = [server.to_dict() for server in self.servers]
        if self.paths:
            data["paths"] = _paths_dict(self.paths, prefix)
        data["components"] = self.components.to_dict(prefix)
        return data

    def to_json(self, indent: Optional[int] = None) -> str:
        """Serialize to JSON (indent defaults to the config's json_indent)."""
        if indent is None:
            indent = self.config.json_indent
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def to_yaml(self) -> str:
        """Serialize to YAML, keeping key order."""
        return yaml.safe_dump(
            self.to_dict(),
            sort_keys=False,
            allow_unicode=True,
            default_flow_style=False,
        )

    def write(self, path: Union[str, FilePath]) -> FilePath:
        """Write the document, as YAML for .yaml/.yml and JSON otherwise."""
        path = FilePath(path)
        if path.suffix.lower() in (".yaml", ".yml"):
            text = self.to_yaml()
        else:
            text = self.to_json() + "\n"
        path.write_text(text, encoding="utf-8")
        logger.info("Wrote OpenAPI document to %s", path)
        return path
