"""Wire Schema Types - Type Descriptors.

A TypeDescriptor is the structural description of one data type as its
serializer sees it: the shape kind, the fields or variants, the enum tagging
convention and the per-site overrides. Descriptors are plain data produced by
a registration step (see ``wire_schema.core.builder``) and consumed by the
derivation engine.

Descriptors may form cycles (a record whose field refers back to the record
itself), so TypeDescriptor compares and hashes by identity and keeps a short
repr.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from .config import ExplicitModelType, ShapeKind, TagKind, VariantStyle
from .exceptions import DescriptorError
from .models import ContextParams, Model


@dataclass(frozen=True)
class TaggingConvention:
    """How a serializer marks which enum variant a value holds.

    Attributes:
        kind: Tagging strategy
        tag: Tag property name (internal and adjacent tagging)
        content: Content property name (adjacent tagging)
    """
    kind: TagKind = TagKind.EXTERNAL
    tag: Optional[str] = None
    content: Optional[str] = None

    def __post_init__(self) -> None:
        if self.kind == TagKind.INTERNAL and (not self.tag or self.content is not None):
            raise DescriptorError("internal tagging needs a tag and no content property")
        if self.kind == TagKind.ADJACENT and (not self.tag or not self.content):
            raise DescriptorError("adjacent tagging needs both tag and content properties")
        if self.kind in (TagKind.EXTERNAL, TagKind.UNTAGGED) and (
            self.tag is not None or self.content is not None
        ):
            raise DescriptorError(f"{self.kind.value} tagging takes no tag/content properties")

    @classmethod
    def external(cls) -> TaggingConvention:
        return cls(TagKind.EXTERNAL)

    @classmethod
    def internal(cls, tag: str) -> TaggingConvention:
        return cls(TagKind.INTERNAL, tag=tag)

    @classmethod
    def adjacent(cls, tag: str, content: str) -> TaggingConvention:
        return cls(TagKind.ADJACENT, tag=tag, content=content)

    @classmethod
    def untagged(cls) -> TaggingConvention:
        return cls(TagKind.UNTAGGED)

    @classmethod
    def from_directives(
        cls,
        untagged: bool = False,
        tag: Optional[str] = None,
        content: Optional[str] = None,
    ) -> TaggingConvention:
        """Decide the convention from serializer-style directives.

        ``untagged`` alone -> untagged; ``tag`` alone -> internal;
        ``tag`` and ``content`` -> adjacent; nothing -> external.
        """
        if untagged and tag is None and content is None:
            return cls.untagged()
        if not untagged and tag is not None and content is None:
            return cls.internal(tag)
        if not untagged and tag is not None and content is not None:
            return cls.adjacent(tag, content)
        if not untagged and tag is None and content is None:
            return cls.external()
        raise DescriptorError(
            f"conflicting tagging directives (untagged={untagged}, tag={tag!r}, content={content!r})"
        )

    def to_dict(self) -> dict:
        data = {"kind": self.kind.value}
        if self.tag is not None:
            data["tag"] = self.tag
        if self.content is not None:
            data["content"] = self.content
        return data


@dataclass
class FieldDescriptor:
    """One field of a record, tuple, newtype or enum variant.

    Attributes:
        name: Source field name (positional index for unnamed fields)
        type: Descriptor of the field's type
        rename: Serialized name, if different from the source name
        optional: Field may be absent (not listed in ``required``)
        skip: Field is never serialized
        inline: Always embed the field's schema instead of linking it
        explicit_type: Replace the member's schema by a synthesized one
        params: Description / format / example / nullable overrides
    """
    name: str
    type: TypeDescriptor
    rename: Optional[str] = None
    optional: bool = False
    skip: bool = False
    inline: bool = False
    explicit_type: Optional[ExplicitModelType] = None
    params: ContextParams = field(default_factory=ContextParams)

    @property
    def serialized_name(self) -> str:
        return self.rename if self.rename is not None else self.name


@dataclass
class VariantDescriptor:
    """One variant of an enum.

    Attributes:
        name: Source variant name
        style: Payload shape
        fields: Payload fields (empty for unit variants)
        rename: Serialized name, if different from the source name
        skip: Variant is never serialized
        inline: Embed every member schema of this variant
        discriminant: Explicit numeric discriminant, kept as literal text
        params: Description / format / example overrides
    """
    name: str
    style: VariantStyle = VariantStyle.UNIT
    fields: list[FieldDescriptor] = field(default_factory=list)
    rename: Optional[str] = None
    skip: bool = False
    inline: bool = False
    discriminant: Optional[Union[int, str]] = None
    params: ContextParams = field(default_factory=ContextParams)

    @property
    def serialized_name(self) -> str:
        return self.rename if self.rename is not None else self.name


@dataclass(eq=False, repr=False)
class TypeDescriptor:
    """Structural description of a type.

    Attributes:
        kind: Which derivation rule applies
        name: Component name; anonymous types are always inlined
        fields: Fields of records, tuples and newtypes
        variants: Variants of enums
        tagging: Enum tagging convention
        params: Container-level description / format / example / nullable
        explicit_type: Newtype override replacing the wrapped field's schema
        inline: The declaration asks to be inlined at every use site
        always_inline: Never registered as a component (primitives, wrappers)
        model: Fixed schema template for primitives
        inner: Item type of arrays, value type of maps, target of wrappers
        nullable: Wrappers only: the wrapper adds ``null``
    """
    kind: ShapeKind
    name: Optional[str] = None
    fields: list[FieldDescriptor] = field(default_factory=list)
    variants: list[VariantDescriptor] = field(default_factory=list)
    tagging: TaggingConvention = field(default_factory=TaggingConvention)
    params: ContextParams = field(default_factory=ContextParams)
    explicit_type: Optional[ExplicitModelType] = None
    inline: bool = False
    always_inline: bool = False
    model: Optional[Model] = None
    inner: Optional[TypeDescriptor] = None
    nullable: bool = False

    def __repr__(self) -> str:
        return f"TypeDescriptor({self.kind.value}, {self.display_name})"

    @property
    def description(self) -> Optional[str]:
        return self.params.description

    @property
    def display_name(self) -> str:
        """Name used in logs and error messages."""
        if self.name is not None:
            return self.name
        if self.kind in (ShapeKind.ARRAY, ShapeKind.MAP, ShapeKind.WRAPPER) and self.inner:
            return f"{self.kind.value}<{self.inner.display_name}>"
        if self.kind == ShapeKind.TUPLE:
            return "(" + ", ".join(f.type.display_name for f in self.fields) + ")"
        return f"<anonymous {self.kind.value}>"

    @property
    def is_always_inline(self) -> bool:
        """Whether every mention of this type must be inlined."""
        return self.always_inline or self.name is None

    def pass_through_target(self) -> TypeDescriptor:
        """Follow the wrapper chain down to the wrapped type."""
        target = self
        while target.kind == ShapeKind.WRAPPER and target.inner is not None:
            target = target.inner
        return target

    def active_fields(self) -> list[FieldDescriptor]:
        return [f for f in self.fields if not f.skip]

    def active_variants(self) -> list[VariantDescriptor]:
        return [v for v in self.variants if not v.skip]
