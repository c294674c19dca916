"""Document assembly.

DocumentBuilder is the caller-owned context of one document build: it owns
the ComponentRegistry and accumulates tags, servers, security schemes and
paths. Every parameter, request body and response schema goes through
``registry.mention``.

Usage:
    >>> from wire_schema import DocumentBuilder
    >>> from wire_schema.core import builtins as b
    >>> api = DocumentBuilder("Pets", "1.0.0")
    >>> api.tag("pets", "Pet operations")
    >>> (
    ...     api.path("pets", ("petId", b.UUID))
    ...     .operation("get")
    ...     .summary("Get a pet")
    ...     .tags("pets")
    ...     .response(200, "The pet", pet)
    ... )
    >>> document = api.build()
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from wire_schema.config import DEFAULT_CONFIG, GeneratorConfig
from wire_schema.core import builtins
from wire_schema.schema.registry import ComponentRegistry
from wire_schema.types import (
    ContextParams,
    DescriptorError,
    ModelReference,
    TypeDescriptor,
)

from .models import (
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

logger = logging.getLogger(__name__)

# A path segment: a literal, or (parameter name, parameter type)
Segment = Union[str, tuple[str, TypeDescriptor]]
SecurityScheme = Union[HttpSecurityScheme, ApiKeySecurityScheme]
SecurityItem = Union[str, tuple[str, list[str]]]


class DocumentBuilder:
    """Builds one OpenAPI document.

    Attributes:
        info: API metadata
        config: Generator configuration shared with the registry
        registry: The components table of this build
    """

    def __init__(
        self,
        title: str,
        version: str,
        description: Optional[str] = None,
        config: Optional[GeneratorConfig] = None,
    ):
        self.config = config or DEFAULT_CONFIG
        self.info = Info(title=title, version=version, description=description)
        self.registry = ComponentRegistry(self.config)
        self.tags: dict[str, Tag] = {}
        self.servers: list[Server] = []
        self.paths: list[tuple[Path, PathValue]] = []

    def tag(self, name: str, description: Optional[str] = None) -> DocumentBuilder:
        self.tags[name] = Tag(description=description)
        return self

    def server(self, url: str, description: Optional[str] = None) -> DocumentBuilder:
        self.servers.append(Server(url=url, description=description))
        return self

    def security_scheme(self, name: str, scheme: SecurityScheme) -> DocumentBuilder:
        self.registry.mention_security_scheme(name, scheme)
        return self

    def schema(
        self,
        descriptor: TypeDescriptor,
        name: Optional[str] = None,
        inline: bool = False,
        params: Optional[ContextParams] = None,
    ) -> ModelReference:
        """Mention a type directly (e.g. to publish it without an operation)."""
        return self.registry.mention(name, descriptor, inline=inline, params=params)

    def path(
        self,
        *segments: Segment,
        summary: Optional[str] = None,
        description: Optional[str] = None,
    ) -> PathBuilder:
        """Start (or continue) describing a path.

        Segments are literals or ``(name, descriptor)`` parameter pairs:
        ``path("pets", ("petId", UUID))`` describes ``/pets/{petId}``.
        """
        return PathBuilder.attach(self, self.paths, segments, summary, description)

    def build(self) -> Document:
        """Verify the components table and return the document.

        Raises:
            UnresolvedReferenceError: A stored schema links to a missing name
        """
        self.registry.verify_or_raise()
        logger.debug(
            "Built document %s %s: %d paths, %d schemas",
            self.info.title,
            self.info.version,
            len(self.paths),
            len(self.registry),
        )
        return Document(
            info=self.info,
            components=self.registry,
            tags=dict(self.tags),
            servers=list(self.servers),
            paths=list(self.paths),
            config=self.config,
        )


class PathBuilder:
    """Describes the operations and shared parameters of one path."""

    def __init__(self, document: DocumentBuilder, path: Path, value: PathValue):
        self.document = document
        self.path = path
        self.value = value

    @classmethod
    def attach(
        cls,
        document: DocumentBuilder,
        table: list[tuple[Path, PathValue]],
        segments: tuple[Segment, ...],
        summary: Optional[str] = None,
        description: Optional[str] = None,
    ) -> PathBuilder:
        elements: list[PathElement] = []
        parameters: dict[str, OperationParameter] = {}
        for segment in segments:
            if isinstance(segment, str):
                elements.append(PathElement.literal(segment.strip("/")))
                continue
            name, descriptor = segment
            if name in parameters:
                raise DescriptorError(f"duplicate path parameter {name!r}")
            elements.append(PathElement.parameter(name))
            parameters[name] = OperationParameter(
                parameter_in=ParameterIn.PATH,
                required=True,
                schema=document.registry.mention(None, descriptor),
            )

        path = Path(tuple(elements))
        for existing, value in table:
            if existing == path:
                break
        else:
            value = PathValue()
            table.append((path, value))

        value.parameters.update(parameters)
        if summary is not None:
            value.summary = summary
        if description is not None:
            value.description = description
        return cls(document, path, value)

    def parameter(
        self,
        name: str,
        descriptor: TypeDescriptor = builtins.STRING,
        location: Union[ParameterIn, str] = ParameterIn.QUERY,
        description: Optional[str] = None,
        required: Optional[bool] = None,
        deprecated: bool = False,
    ) -> PathBuilder:
        """Add a parameter shared by every operation on this path."""
        self.value.parameters[name] = _parameter(
            self.document, descriptor, location, description, required, deprecated
        )
        return self

    def operation(self, method: Union[HttpMethod, str]) -> OperationBuilder:
        method = HttpMethod.parse(method)
        if method in self.value.operations:
            raise DescriptorError(f"duplicate {method.value} operation", owner=str(self.path))
        operation = Operation()
        self.value.operations[method] = operation
        logger.debug("Describing %s %s", method.value.upper(), self.path)
        return OperationBuilder(self, operation)


def _parameter(
    document: DocumentBuilder,
    descriptor: TypeDescriptor,
    location: Union[ParameterIn, str],
    description: Optional[str],
    required: Optional[bool],
    deprecated: bool,
) -> OperationParameter:
    location = location if isinstance(location, ParameterIn) else ParameterIn(location)
    if required is None:
        required = location in (ParameterIn.PATH, ParameterIn.HEADER)
    if location == ParameterIn.PATH and not required:
        raise DescriptorError("path parameters are always required")
    return OperationParameter(
        parameter_in=location,
        description=description,
        required=required,
        deprecated=deprecated,
        schema=document.registry.mention(None, descriptor),
    )


class OperationBuilder:
    """Describes one operation. ``done()`` returns to the path."""

    def __init__(self, path: PathBuilder, operation: Operation):
        self._path = path
        self.operation = operation

    @property
    def registry(self) -> ComponentRegistry:
        return self._path.document.registry

    def summary(self, text: str) -> OperationBuilder:
        self.operation.summary = text
        return self

    def description(self, text: str) -> OperationBuilder:
        self.operation.description = text
        return self

    def operation_id(self, value: str) -> OperationBuilder:
        self.operation.operation_id = value
        return self

    def tags(self, *names: str) -> OperationBuilder:
        self.operation.tags.extend(names)
        return self

    def deprecated(self, flag: bool = True) -> OperationBuilder:
        self.operation.deprecated = flag
        return self

    def security(self, *schemes: SecurityItem) -> OperationBuilder:
        """Add one security requirement; all listed schemes apply together.

        Items are scheme names or ``(name, scopes)`` pairs. Calling this again
        adds an alternative requirement.
        """
        requirement: dict[str, list[str]] = {}
        for item in schemes:
            name, scopes = (item, []) if isinstance(item, str) else item
            requirement[name] = list(scopes)
        self.operation.security.append(requirement)
        return self

    def body(
        self,
        descriptor: TypeDescriptor,
        description: Optional[str] = None,
        required: bool = True,
        inline: bool = False,
        params: Optional[ContextParams] = None,
    ) -> OperationBuilder:
        if self.operation.request_body is not None:
            raise DescriptorError("request body already set", owner=str(self._path.path))
        self.operation.request_body = RequestBody(
            schema=self.registry.mention(None, descriptor, inline=inline, params=params),
            description=description,
            required=required,
        )
        return self

    def response(
        self,
        code: int,
        description: str,
        descriptor: Optional[TypeDescriptor] = None,
        inline: bool = False,
        params: Optional[ContextParams] = None,
    ) -> OperationBuilder:
        schema = None
        if descriptor is not None:
            schema = self.registry.mention(None, descriptor, inline=inline, params=params)
        self.operation.responses[int(code)] = Response(description=description, schema=schema)
        return self

    def query(
        self,
        name: str,
        descriptor: TypeDescriptor = builtins.STRING,
        description: Optional[str] = None,
        required: bool = False,
        deprecated: bool = False,
    ) -> OperationBuilder:
        self.operation.parameters[name] = _parameter(
            self._path.document, descriptor, ParameterIn.QUERY, description, required, deprecated
        )
        return self

    def header(
        self,
        name: str,
        descriptor: TypeDescriptor = builtins.STRING,
        description: Optional[str] = None,
        required: bool = True,
        deprecated: bool = False,
    ) -> OperationBuilder:
        self.operation.parameters[name] = _parameter(
            self._path.document, descriptor, ParameterIn.HEADER, description, required, deprecated
        )
        return self

    def callback(
        self,
        name: str,
        *segments: Segment,
        summary: Optional[str] = None,
        description: Optional[str] = None,
    ) -> PathBuilder:
        """Describe a path of the named callback; returns its PathBuilder."""
        callback = self.operation.callbacks.setdefault(name, Callback())
        return PathBuilder.attach(
            self._path.document, callback.paths, segments, summary, description
        )

    def done(self) -> PathBuilder:
        return self._path
