"""Built-in type descriptors.

Ready-made descriptors for primitives and generic containers. Every one of
them is always inlined at its use sites.

Usage:
    >>> from wire_schema.core import builtins as b
    >>> b.optional(b.STRING)
    TypeDescriptor(wrapper, wrapper<string>)
    >>> b.map_of(b.array_of(b.I64))
    TypeDescriptor(map, map<array<i64>>)
"""

from __future__ import annotations

from typing import Optional

from wire_schema.types import ContextParams, FieldDescriptor, Model, ShapeKind, TypeDescriptor


def primitive(name: str, model: Model) -> TypeDescriptor:
    """Descriptor for a fixed schema template.

    ``name`` is used in logs only; primitives are never registered.
    """
    return TypeDescriptor(
        kind=ShapeKind.PRIMITIVE,
        name=name,
        always_inline=True,
        model=model,
    )


# =============================================================================
# Primitives
# =============================================================================

STRING = primitive("string", Model.string())
BOOLEAN = primitive("boolean", Model.boolean())
INTEGER = primitive("integer", Model.integer())
NUMBER = primitive("number", Model.number())

I8 = primitive("i8", Model.integer(format="int8"))
U8 = primitive("u8", Model.integer(format="uint8"))
I16 = primitive("i16", Model.integer(format="int16"))
U16 = primitive("u16", Model.integer(format="uint16"))
I32 = primitive("i32", Model.integer(format="int32"))
U32 = primitive("u32", Model.integer(format="uint32"))
I64 = primitive("i64", Model.integer(format="int64"))
U64 = primitive("u64", Model.integer(format="uint64"))

F32 = primitive("f32", Model.number(format="float"))
F64 = primitive("f64", Model.number(format="double"))

UUID = primitive(
    "uuid",
    Model.string(
        description="UUID ver. 4 [rfc](https://tools.ietf.org/html/rfc4122)",
        format="uuid",
        example="00000000-0000-0000-0000-000000000000",
    ),
)

UNIT = primitive(
    "unit",
    Model.string(description="Always `null`", format="null", nullable=True),
)


# =============================================================================
# Containers
# =============================================================================


def optional(inner: TypeDescriptor) -> TypeDescriptor:
    """Nullable pass-through wrapper."""
    return TypeDescriptor(kind=ShapeKind.WRAPPER, inner=inner, always_inline=True, nullable=True)


def boxed(inner: TypeDescriptor) -> TypeDescriptor:
    """Transparent pass-through wrapper."""
    return TypeDescriptor(kind=ShapeKind.WRAPPER, inner=inner, always_inline=True)


def array_of(item: TypeDescriptor, description: Optional[str] = None) -> TypeDescriptor:
    return TypeDescriptor(
        kind=ShapeKind.ARRAY,
        inner=item,
        always_inline=True,
        params=ContextParams(description=description),
    )


def map_of(value: TypeDescriptor, description: Optional[str] = None) -> TypeDescriptor:
    """String-keyed dictionary; values described by ``additionalProperties``."""
    return TypeDescriptor(
        kind=ShapeKind.MAP,
        inner=value,
        always_inline=True,
        params=ContextParams(description=description),
    )


def tuple_of(*items: TypeDescriptor) -> TypeDescriptor:
    """Anonymous fixed-length heterogeneous sequence."""
    return TypeDescriptor(
        kind=ShapeKind.TUPLE,
        fields=[FieldDescriptor(name=str(i), type=item) for i, item in enumerate(items)],
        always_inline=True,
    )
