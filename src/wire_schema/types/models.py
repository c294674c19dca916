"""Wire Schema Types - Model Tree.

This module defines the schema value type produced by the derivation engine
and stored by the component registry.

Structure:
    Model
      ├── description
      └── data: ModelType (single type) | ModelOneOf (alternatives)
            ModelType
              ├── nullable
              └── type_description: ModelString | ModelNumber | ModelInteger
                                    | ModelBoolean | ModelArray | ModelObject
    ModelReference: Link(name) | Inline(model)

Models are only changed through ``apply_params`` (context overlay) and
``try_merge`` (object union); everything else builds fresh values.

Serialization:
    Every node provides to_dict() producing the OpenAPI schema object form.
    A model flattens to ``{description?, nullable?, type, ...}`` and a link
    becomes ``{"$ref": "<prefix><name>"}``. Model.from_dict() and
    ModelReference.from_dict() read that form back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar, Iterator, Optional, Union

from .config import SCHEMA_REFERENCE_PREFIX
from .exceptions import ModelMergeError

logger = logging.getLogger(__name__)


@dataclass
class ContextParams:
    """Per-site overrides applied on top of a derived schema.

    Attributes:
        description: Brief description of the object at this site
        nullable: Adds ``null`` to the allowed values of the type
        variants: Possible string values at this site
        format: Data type format at this site
        example: Example value at this site
    """
    description: Optional[str] = None
    nullable: Optional[bool] = None
    variants: Optional[list[str]] = None
    format: Optional[str] = None
    example: Optional[str] = None

    def is_empty(self) -> bool:
        """Check whether no override is set."""
        return (
            self.description is None
            and self.nullable is None
            and self.variants is None
            and self.format is None
            and self.example is None
        )

    def to_dict(self) -> dict:
        """Convert to dictionary (unset values omitted)."""
        data: dict[str, Any] = {}
        if self.description is not None:
            data["description"] = self.description
        if self.nullable is not None:
            data["nullable"] = self.nullable
        if self.variants is not None:
            data["variants"] = list(self.variants)
        if self.format is not None:
            data["format"] = self.format
        if self.example is not None:
            data["example"] = self.example
        return data

    @classmethod
    def from_dict(cls, data: dict) -> ContextParams:
        """Create from dictionary."""
        variants = data.get("variants")
        return cls(
            description=data.get("description"),
            nullable=data.get("nullable"),
            variants=list(variants) if variants is not None else None,
            format=data.get("format"),
            example=_optional_str(data.get("example")),
        )


# =============================================================================
# Type descriptions
# =============================================================================


@dataclass
class ModelSimple:
    """Leaf payload shared by numeric and string primitives.

    Attributes:
        format: Value format (e.g. "int32", "uuid")
        example: Example value, always kept as literal text
    """
    format: Optional[str] = None
    example: Optional[str] = None

    type_name: ClassVar[str] = ""

    def apply_params(self, params: ContextParams) -> ModelSimple:
        if params.format is not None:
            self.format = params.format
        if params.example is not None:
            self.example = params.example
        return self

    def links(self) -> Iterator[str]:
        return iter(())

    def _simple_dict(self) -> dict:
        data: dict[str, Any] = {}
        if self.format is not None:
            data["format"] = self.format
        if self.example is not None:
            data["example"] = self.example
        return data

    def to_dict(self, reference_prefix: str = SCHEMA_REFERENCE_PREFIX) -> dict:
        return {"type": self.type_name, **self._simple_dict()}


@dataclass
class ModelInteger(ModelSimple):
    """Integer data type."""

    type_name: ClassVar[str] = "integer"


@dataclass
class ModelNumber(ModelSimple):
    """Floating point data type."""

    type_name: ClassVar[str] = "number"


@dataclass
class ModelString(ModelSimple):
    """String data type.

    Attributes:
        variants: Ordered set of allowed literal values (serialized as ``enum``)
    """
    variants: Optional[list[str]] = None

    type_name: ClassVar[str] = "string"

    def apply_params(self, params: ContextParams) -> ModelString:
        if params.variants is not None:
            self.variants = list(params.variants)
        super().apply_params(params)
        return self

    def to_dict(self, reference_prefix: str = SCHEMA_REFERENCE_PREFIX) -> dict:
        data: dict[str, Any] = {"type": self.type_name}
        if self.variants is not None:
            data["enum"] = list(self.variants)
        data.update(self._simple_dict())
        return data


@dataclass
class ModelBoolean:
    """Boolean data type."""

    type_name: ClassVar[str] = "boolean"

    def apply_params(self, params: ContextParams) -> ModelBoolean:
        return self

    def links(self) -> Iterator[str]:
        return iter(())

    def to_dict(self, reference_prefix: str = SCHEMA_REFERENCE_PREFIX) -> dict:
        return {"type": self.type_name}


@dataclass
class ModelArray:
    """Array type description.

    Homogeneous arrays carry the item schema directly; tuples carry an
    inline one-of of their positional members.
    """
    items: ModelReference

    type_name: ClassVar[str] = "array"

    def apply_params(self, params: ContextParams) -> ModelArray:
        return self

    def links(self) -> Iterator[str]:
        return self.items.links()

    def to_dict(self, reference_prefix: str = SCHEMA_REFERENCE_PREFIX) -> dict:
        return {"type": self.type_name, "items": self.items.to_dict(reference_prefix)}


@dataclass
class ModelObject:
    """Object type description.

    Attributes:
        properties: Property name -> schema (iterated alphabetically)
        additional_properties: Schema of values under arbitrary keys
        required: Required property names, in declaration order
    """
    properties: dict[str, ModelReference] = field(default_factory=dict)
    additional_properties: Optional[ModelReference] = None
    required: list[str] = field(default_factory=list)

    type_name: ClassVar[str] = "object"

    def add_property(
        self,
        name: str,
        reference: ModelReference,
        required: bool = False,
    ) -> None:
        """Add a property, failing if the name is already taken.

        Raises:
            ModelMergeError: If a property with this name exists
        """
        if name in self.properties:
            raise ModelMergeError(property_name=name)
        self.properties[name] = reference
        if required:
            self.required.append(name)

    def merge(self, other: ModelObject) -> None:
        """Union another object's properties into this one.

        Nothing is changed when a property name collides.

        Raises:
            ModelMergeError: If any property name exists in both objects
        """
        for name in sorted(other.properties):
            if name in self.properties:
                raise ModelMergeError(property_name=name)
        self.properties.update(other.properties)
        self.required.extend(other.required)

    def sorted_properties(self) -> list[tuple[str, ModelReference]]:
        return sorted(self.properties.items())

    def apply_params(self, params: ContextParams) -> ModelObject:
        return self

    def links(self) -> Iterator[str]:
        for _, reference in self.sorted_properties():
            yield from reference.links()
        if self.additional_properties is not None:
            yield from self.additional_properties.links()

    def to_dict(self, reference_prefix: str = SCHEMA_REFERENCE_PREFIX) -> dict:
        data: dict[str, Any] = {"type": self.type_name}
        if self.properties:
            data["properties"] = {
                name: reference.to_dict(reference_prefix)
                for name, reference in self.sorted_properties()
            }
        if self.additional_properties is not None:
            data["additionalProperties"] = self.additional_properties.to_dict(
                reference_prefix
            )
        if self.required:
            data["required"] = list(self.required)
        return data


TypeDescription = Union[
    ModelString, ModelNumber, ModelInteger, ModelBoolean, ModelArray, ModelObject
]

_TYPE_DESCRIPTIONS: dict[str, type] = {
    "string": ModelString,
    "number": ModelNumber,
    "integer": ModelInteger,
    "boolean": ModelBoolean,
    "array": ModelArray,
    "object": ModelObject,
}


# =============================================================================
# Model data
# =============================================================================


@dataclass
class ModelType:
    """Single-type schema data.

    Attributes:
        type_description: The concrete type
        nullable: Whether ``null`` is also accepted
    """
    type_description: TypeDescription
    nullable: bool = False

    def apply_params(self, params: ContextParams) -> ModelType:
        if params.nullable is not None:
            self.nullable = params.nullable
        self.type_description = self.type_description.apply_params(params)
        return self

    def links(self) -> Iterator[str]:
        return self.type_description.links()

    def to_dict(self, reference_prefix: str = SCHEMA_REFERENCE_PREFIX) -> dict:
        data: dict[str, Any] = {}
        if self.nullable:
            data["nullable"] = True
        data.update(self.type_description.to_dict(reference_prefix))
        return data


@dataclass
class ModelOneOf:
    """Discriminated union of alternative shapes."""
    one_of: list[ModelReference] = field(default_factory=list)

    def apply_params(self, params: ContextParams) -> ModelOneOf:
        # Overrides are not propagated to the alternatives.
        overrides = (params.nullable, params.format, params.example, params.variants)
        if any(value is not None for value in overrides):
            logger.debug("Ignoring type-level overrides on a oneOf schema: %s", params)
        return self

    def links(self) -> Iterator[str]:
        for reference in self.one_of:
            yield from reference.links()

    def to_dict(self, reference_prefix: str = SCHEMA_REFERENCE_PREFIX) -> dict:
        return {"oneOf": [reference.to_dict(reference_prefix) for reference in self.one_of]}


ModelData = Union[ModelType, ModelOneOf]


@dataclass
class Model:
    """Schema object: the derived description of a type's wire shape.

    Attributes:
        description: Brief description of this schema
        data: Single type or one-of alternatives

    Example:
        >>> model = Model.object(description="User")
        >>> model.data.type_description.add_property("id", Inline(Model.string()), True)
        >>> model.to_dict()
        {'description': 'User', 'type': 'object', 'properties': {'id': {'type': 'string'}}, 'required': ['id']}
    """
    description: Optional[str] = None
    data: ModelData = field(default_factory=lambda: ModelType(ModelObject()))

    # -- constructors ---------------------------------------------------------

    @classmethod
    def string(
        cls,
        description: Optional[str] = None,
        format: Optional[str] = None,
        example: Optional[str] = None,
        variants: Optional[list[str]] = None,
        nullable: bool = False,
    ) -> Model:
        return cls(
            description=description,
            data=ModelType(
                ModelString(format=format, example=example, variants=variants),
                nullable=nullable,
            ),
        )

    @classmethod
    def integer(
        cls,
        description: Optional[str] = None,
        format: Optional[str] = None,
        example: Optional[str] = None,
        nullable: bool = False,
    ) -> Model:
        return cls(
            description=description,
            data=ModelType(ModelInteger(format=format, example=example), nullable=nullable),
        )

    @classmethod
    def number(
        cls,
        description: Optional[str] = None,
        format: Optional[str] = None,
        example: Optional[str] = None,
        nullable: bool = False,
    ) -> Model:
        return cls(
            description=description,
            data=ModelType(ModelNumber(format=format, example=example), nullable=nullable),
        )

    @classmethod
    def boolean(cls, description: Optional[str] = None, nullable: bool = False) -> Model:
        return cls(description=description, data=ModelType(ModelBoolean(), nullable=nullable))

    @classmethod
    def array(cls, items: ModelReference, description: Optional[str] = None) -> Model:
        return cls(description=description, data=ModelType(ModelArray(items=items)))

    @classmethod
    def object(
        cls,
        description: Optional[str] = None,
        additional_properties: Optional[ModelReference] = None,
    ) -> Model:
        return cls(
            description=description,
            data=ModelType(ModelObject(additional_properties=additional_properties)),
        )

    @classmethod
    def one_of(
        cls,
        alternatives: list[ModelReference],
        description: Optional[str] = None,
    ) -> Model:
        return cls(description=description, data=ModelOneOf(one_of=list(alternatives)))

    # -- inspection -----------------------------------------------------------

    @property
    def type_description(self) -> Optional[TypeDescription]:
        """Concrete type of a single-type model, None for one-of."""
        if isinstance(self.data, ModelType):
            return self.data.type_description
        return None

    @property
    def as_object(self) -> Optional[ModelObject]:
        description = self.type_description
        return description if isinstance(description, ModelObject) else None

    @property
    def is_one_of(self) -> bool:
        return isinstance(self.data, ModelOneOf)

    # -- operations -----------------------------------------------------------

    def apply_params(self, params: Optional[ContextParams]) -> Model:
        """Overlay context params on this model and return it."""
        if params is None:
            return self
        if params.description is not None:
            self.description = params.description
        self.data = self.data.apply_params(params)
        return self

    def try_merge(self, other: Model) -> None:
        """Merge another object model into this object model.

        Raises:
            ModelMergeError: If either model is not an object, or a property
                name collides
        """
        own = self.as_object
        theirs = other.as_object
        if own is None or theirs is None:
            raise ModelMergeError("only object schemas can be merged")
        own.merge(theirs)

    def links(self) -> Iterator[str]:
        """Yield every link target reachable from this model."""
        return self.data.links()

    def to_dict(self, reference_prefix: str = SCHEMA_REFERENCE_PREFIX) -> dict:
        """Convert to an OpenAPI schema object."""
        data: dict[str, Any] = {}
        if self.description is not None:
            data["description"] = self.description
        data.update(self.data.to_dict(reference_prefix))
        return data

    @classmethod
    def from_dict(cls, data: dict, reference_prefix: str = SCHEMA_REFERENCE_PREFIX) -> Model:
        """Create from an OpenAPI schema object."""
        description = data.get("description")
        if "oneOf" in data:
            return cls(
                description=description,
                data=ModelOneOf(
                    one_of=[
                        ModelReference.from_dict(item, reference_prefix)
                        for item in data["oneOf"]
                    ]
                ),
            )

        type_name = data.get("type")
        if type_name not in _TYPE_DESCRIPTIONS:
            raise ValueError(f"Unknown schema type: {type_name!r}")

        type_description: TypeDescription
        if type_name == "string":
            variants = data.get("enum")
            type_description = ModelString(
                format=data.get("format"),
                example=_optional_str(data.get("example")),
                variants=list(variants) if variants is not None else None,
            )
        elif type_name in ("number", "integer"):
            type_description = _TYPE_DESCRIPTIONS[type_name](
                format=data.get("format"),
                example=_optional_str(data.get("example")),
            )
        elif type_name == "boolean":
            type_description = ModelBoolean()
        elif type_name == "array":
            type_description = ModelArray(
                items=ModelReference.from_dict(data["items"], reference_prefix)
            )
        else:
            additional = data.get("additionalProperties")
            type_description = ModelObject(
                properties={
                    name: ModelReference.from_dict(value, reference_prefix)
                    for name, value in data.get("properties", {}).items()
                },
                additional_properties=(
                    ModelReference.from_dict(additional, reference_prefix)
                    if additional is not None
                    else None
                ),
                required=list(data.get("required", [])),
            )

        return cls(
            description=description,
            data=ModelType(type_description, nullable=bool(data.get("nullable", False))),
        )


# =============================================================================
# References
# =============================================================================


class ModelReference:
    """Reference to a schema: a named Link or an Inline model."""

    def links(self) -> Iterator[str]:
        raise NotImplementedError

    def to_dict(self, reference_prefix: str = SCHEMA_REFERENCE_PREFIX) -> dict:
        raise NotImplementedError

    @staticmethod
    def from_dict(data: dict, reference_prefix: str = SCHEMA_REFERENCE_PREFIX) -> ModelReference:
        """Create from a serialized reference or schema object."""
        ref = data.get("$ref")
        if ref is not None:
            if ref.startswith(reference_prefix):
                ref = ref[len(reference_prefix):]
            return Link(ref)
        return Inline(Model.from_dict(data, reference_prefix))


@dataclass
class Link(ModelReference):
    """Promise that a schema named ``name`` exists in the registry."""
    name: str

    def links(self) -> Iterator[str]:
        yield self.name

    def to_dict(self, reference_prefix: str = SCHEMA_REFERENCE_PREFIX) -> dict:
        return {"$ref": f"{reference_prefix}{self.name}"}


@dataclass
class Inline(ModelReference):
    """Schema embedded at its use site."""
    model: Model

    def links(self) -> Iterator[str]:
        return self.model.links()

    def to_dict(self, reference_prefix: str = SCHEMA_REFERENCE_PREFIX) -> dict:
        return self.model.to_dict(reference_prefix)


def _optional_str(value: Any) -> Optional[str]:
    # YAML readers turn bare examples like 42 into ints; examples are literal text.
    if value is None:
        return None
    return str(value)
