"""Descriptor builders.

Fluent registration step producing TypeDescriptors for user types:

    >>> from wire_schema.core import builtins as b
    >>> from wire_schema.core.builder import enum, field, record
    >>> user = (
    ...     record("User")
    ...     .describe("Registered user")
    ...     .field("id", b.UUID)
    ...     .field("nick_name", b.STRING, optional=True)
    ...     .rename_all("camelCase")
    ...     .build()
    ... )
    >>> shape = (
    ...     enum("Shape")
    ...     .tagged("type")
    ...     .variant("Circle", {"radius": b.F64})
    ...     .variant("Square", {"side": b.F64})
    ...     .build()
    ... )

The descriptor exists from the moment the builder is created, so a type can
refer to itself through ``builder.descriptor``:

    >>> node = record("Node")
    >>> node.field("next", b.optional(node.descriptor)).build()
"""

from __future__ import annotations

import logging
from typing import Optional, Union

from wire_schema.types import (
    ContextParams,
    DescriptorError,
    ExplicitModelType,
    FieldDescriptor,
    ShapeKind,
    TaggingConvention,
    TypeDescriptor,
    VariantDescriptor,
    VariantStyle,
)

from .naming import RenameRule
from .options import ExclusiveOption, MultiOption

logger = logging.getLogger(__name__)

ExplicitType = Union[ExplicitModelType, str]
VariantPayload = Union[
    None,
    TypeDescriptor,
    FieldDescriptor,
    tuple,
    dict,
]


def _explicit(value: Optional[ExplicitType]) -> Optional[ExplicitModelType]:
    if value is None or isinstance(value, ExplicitModelType):
        return value
    try:
        return ExplicitModelType(value)
    except ValueError as e:
        raise DescriptorError(f"unknown explicit type {value!r}") from e


def _rule(value: Union[RenameRule, str]) -> RenameRule:
    return value if isinstance(value, RenameRule) else RenameRule.from_str(value)


def field(
    name: str,
    type: TypeDescriptor,
    *,
    rename: Optional[str] = None,
    optional: bool = False,
    skip: bool = False,
    inline: bool = False,
    explicit_type: Optional[ExplicitType] = None,
    description: Optional[str] = None,
    format: Optional[str] = None,
    example: Optional[str] = None,
    nullable: Optional[bool] = None,
) -> FieldDescriptor:
    """Create a FieldDescriptor from keyword directives."""
    if not isinstance(type, TypeDescriptor):
        raise DescriptorError(f"field {name!r} needs a TypeDescriptor, got {type!r}")
    return FieldDescriptor(
        name=name,
        type=type,
        rename=rename,
        optional=optional,
        skip=skip,
        inline=inline,
        explicit_type=_explicit(explicit_type),
        params=ContextParams(
            description=description,
            nullable=nullable,
            format=format,
            example=example,
        ),
    )


class _TypeBuilder:
    """Directives shared by every builder."""

    kind: ShapeKind

    def __init__(self, name: str):
        if not name:
            raise DescriptorError("type name must not be empty")
        self.descriptor = TypeDescriptor(kind=self.kind, name=name)
        self._description: ExclusiveOption[ContextParams] = ExclusiveOption("description", name)
        self._inline = ExclusiveOption[bool]("inline", name)
        self._rename_rule: ExclusiveOption[RenameRule] = ExclusiveOption("rename_all", name)

    @property
    def name(self) -> str:
        return self.descriptor.name

    def describe(
        self,
        description: Optional[str] = None,
        *,
        format: Optional[str] = None,
        example: Optional[str] = None,
        nullable: Optional[bool] = None,
    ):
        """Set container-level description / format / example / nullable."""
        self._description.set(
            ContextParams(
                description=description,
                nullable=nullable,
                format=format,
                example=example,
            )
        )
        return self

    def inline(self):
        """Embed this type at every use site instead of linking it."""
        self._inline.set(True)
        return self

    def rename_all(self, rule: Union[RenameRule, str]):
        self._rename_rule.set(_rule(rule))
        return self

    def build(self) -> TypeDescriptor:
        self.descriptor.params = self._description.get(ContextParams())
        self.descriptor.inline = bool(self._inline.get(False))
        self._finish()
        logger.debug("Built descriptor %r", self.descriptor)
        return self.descriptor

    def _finish(self) -> None:
        raise NotImplementedError


def _apply_field_rule(fields: list[FieldDescriptor], rule: RenameRule, owner: str) -> None:
    names = MultiOption[str]("field name", owner, unique=True)
    for item in fields:
        if item.rename is None and rule != RenameRule.NONE:
            item.rename = rule.apply_to_field(item.name)
        if not item.skip:
            names.insert(item.serialized_name)


class RecordBuilder(_TypeBuilder):
    """Builder for records (named fields)."""

    kind = ShapeKind.RECORD

    def __init__(self, name: str):
        super().__init__(name)
        self._fields = MultiOption[str]("field", name, unique=True)
        self._items: list[FieldDescriptor] = []

    def field(self, name: str, type: TypeDescriptor, **directives) -> RecordBuilder:
        self._fields.insert(name)
        self._items.append(field(name, type, **directives))
        return self

    def _finish(self) -> None:
        rule = self._rename_rule.get(RenameRule.NONE)
        _apply_field_rule(self._items, rule, self.name)
        self.descriptor.fields = self._items


class TupleStructBuilder(_TypeBuilder):
    """Builder for tuple structs (positional fields)."""

    kind = ShapeKind.TUPLE

    def __init__(self, name: str):
        super().__init__(name)
        self._items: list[FieldDescriptor] = []

    def field(self, type: TypeDescriptor, **directives) -> TupleStructBuilder:
        self._items.append(field(str(len(self._items)), type, **directives))
        return self

    def _finish(self) -> None:
        if self._rename_rule.is_set:
            raise DescriptorError("rename_all has no effect on positional fields", self.name)
        self.descriptor.fields = self._items


class NewtypeBuilder(_TypeBuilder):
    """Builder for newtypes (a single unnamed field)."""

    kind = ShapeKind.NEWTYPE

    def __init__(self, name: str, inner: TypeDescriptor, **directives):
        super().__init__(name)
        self._explicit = MultiOption[ExplicitModelType]("explicit type", name)
        self._field = field("0", inner, **directives)

    def explicit(self, explicit_type: ExplicitType) -> NewtypeBuilder:
        """Replace the wrapped field's schema by a synthesized one."""
        self._explicit.insert(_explicit(explicit_type))
        return self

    def _finish(self) -> None:
        if self._rename_rule.is_set:
            raise DescriptorError("rename_all has no effect on a newtype", self.name)
        self.descriptor.explicit_type = self._explicit.at_most_one()
        self.descriptor.fields = [self._field]


class EnumBuilder(_TypeBuilder):
    """Builder for enums.

    Variant payloads:
        - None: unit variant
        - TypeDescriptor / FieldDescriptor: newtype variant
        - tuple of TypeDescriptors: tuple variant
        - dict of name -> TypeDescriptor / FieldDescriptor: record variant
    """

    kind = ShapeKind.ENUM

    def __init__(self, name: str):
        super().__init__(name)
        self._untagged = ExclusiveOption[bool]("untagged", name)
        self._tag = ExclusiveOption[str]("tag", name)
        self._content = ExclusiveOption[str]("content", name)
        self._names = MultiOption[str]("variant", name, unique=True)
        self._variants: list[VariantDescriptor] = []
        self._variant_rules: dict[int, RenameRule] = {}

    def tagged(self, tag: str, content: Optional[str] = None) -> EnumBuilder:
        """Internal tagging (``tag`` only) or adjacent tagging (with ``content``)."""
        self._tag.set(tag)
        if content is not None:
            self._content.set(content)
        return self

    def untagged(self) -> EnumBuilder:
        self._untagged.set(True)
        return self

    def unit(
        self,
        name: str,
        *,
        rename: Optional[str] = None,
        skip: bool = False,
        discriminant: Optional[Union[int, str]] = None,
        description: Optional[str] = None,
    ) -> EnumBuilder:
        return self._add(
            VariantDescriptor(
                name=name,
                style=VariantStyle.UNIT,
                rename=rename,
                skip=skip,
                discriminant=discriminant,
                params=ContextParams(description=description),
            )
        )

    def variant(
        self,
        name: str,
        payload: VariantPayload = None,
        *,
        rename: Optional[str] = None,
        skip: bool = False,
        inline: bool = False,
        rename_all: Optional[Union[RenameRule, str]] = None,
        description: Optional[str] = None,
        format: Optional[str] = None,
        example: Optional[str] = None,
    ) -> EnumBuilder:
        if payload is None:
            if rename_all is not None or inline or format or example:
                raise DescriptorError(f"unit variant {name!r} takes no payload directives", self.name)
            return self.unit(name, rename=rename, skip=skip, description=description)

        style, fields = self._payload(name, payload)
        variant = VariantDescriptor(
            name=name,
            style=style,
            fields=fields,
            rename=rename,
            skip=skip,
            inline=inline,
            params=ContextParams(description=description, format=format, example=example),
        )
        if rename_all is not None:
            if style != VariantStyle.RECORD:
                raise DescriptorError(f"rename_all on non-record variant {name!r}", self.name)
            self._variant_rules[len(self._variants)] = _rule(rename_all)
        return self._add(variant)

    def _payload(self, name: str, payload) -> tuple[VariantStyle, list[FieldDescriptor]]:
        if isinstance(payload, TypeDescriptor):
            return VariantStyle.NEWTYPE, [field("0", payload)]
        if isinstance(payload, FieldDescriptor):
            return VariantStyle.NEWTYPE, [payload]
        if isinstance(payload, tuple):
            if len(payload) < 2:
                raise DescriptorError(f"tuple variant {name!r} needs two or more members", self.name)
            return VariantStyle.TUPLE, [
                item if isinstance(item, FieldDescriptor) else field(str(i), item)
                for i, item in enumerate(payload)
            ]
        if isinstance(payload, dict):
            return VariantStyle.RECORD, [
                item if isinstance(item, FieldDescriptor) else field(key, item)
                for key, item in payload.items()
            ]
        raise DescriptorError(f"unsupported payload for variant {name!r}: {payload!r}", self.name)

    def _add(self, variant: VariantDescriptor) -> EnumBuilder:
        self._names.insert(variant.name)
        if variant.discriminant is not None and variant.style != VariantStyle.UNIT:
            raise DescriptorError(f"discriminant on non-unit variant {variant.name!r}", self.name)
        self._variants.append(variant)
        return self

    def _finish(self) -> None:
        self.descriptor.tagging = TaggingConvention.from_directives(
            untagged=bool(self._untagged.get(False)),
            tag=self._tag.get(),
            content=self._content.get(),
        )

        rule = self._rename_rule.get(RenameRule.NONE)
        serialized = MultiOption[str]("variant name", self.name, unique=True)
        for index, variant in enumerate(self._variants):
            if variant.rename is None and rule != RenameRule.NONE:
                variant.rename = rule.apply_to_variant(variant.name)
            if not variant.skip:
                serialized.insert(variant.serialized_name)
            if variant.style == VariantStyle.RECORD:
                _apply_field_rule(
                    variant.fields,
                    self._variant_rules.get(index, RenameRule.NONE),
                    f"{self.name}::{variant.name}",
                )

        self.descriptor.variants = self._variants


def record(name: str) -> RecordBuilder:
    return RecordBuilder(name)


def tuple_struct(name: str) -> TupleStructBuilder:
    return TupleStructBuilder(name)


def newtype(name: str, inner: TypeDescriptor, **directives) -> NewtypeBuilder:
    """Builder for a newtype around ``inner``; directives apply to the field."""
    return NewtypeBuilder(name, inner, **directives)


def enum(name: str) -> EnumBuilder:
    return EnumBuilder(name)
