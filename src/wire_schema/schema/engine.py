"""Type Shape Derivation Engine.

Turns a TypeDescriptor into a Model. Member types are referenced through the
registry (``registry.mention``) so that named types become links and
always-inline types are embedded.

Shapes:
    - record   -> object, one property per field, ``required`` in field order
    - tuple    -> array whose items are a one-of of the positional members
    - newtype  -> the wrapped member's schema with the newtype's overrides
    - enum     -> string enum, integer one-of, or one of the four tagging
                  layouts (external, internal, adjacent, untagged)
    - built-in -> primitive template, array, string-keyed map, wrapper

Unsupported shape/tagging combinations raise UnsupportedShapeError.
"""

from __future__ import annotations

import copy
import logging
from typing import TYPE_CHECKING, Callable, Optional

from wire_schema.types import (
    ContextParams,
    ExplicitModelType,
    FieldDescriptor,
    Inline,
    Model,
    ModelArray,
    ModelMergeError,
    ModelObject,
    ModelReference,
    ModelType,
    ShapeKind,
    TagKind,
    TypeDescriptor,
    UnsupportedShapeError,
    VariantDescriptor,
    VariantStyle,
)

from .params import explicit_model, immediate_params, resolve_params

if TYPE_CHECKING:
    from .registry import ComponentRegistry

logger = logging.getLogger(__name__)


def derive_schema(descriptor: TypeDescriptor, registry: ComponentRegistry) -> Model:
    """Derive the schema of one type.

    Args:
        descriptor: Type to describe
        registry: Registry used for member mentions

    Returns:
        A fresh Model (not stored anywhere)

    Raises:
        UnsupportedShapeError: The shape/tagging combination has no rule
    """
    logger.debug("Deriving schema for %r", descriptor)
    handler = _HANDLERS.get(descriptor.kind)
    if handler is None:
        raise UnsupportedShapeError(descriptor.display_name, f"unknown kind {descriptor.kind}")
    return handler(descriptor, registry)


# =============================================================================
# Member references
# =============================================================================


def _explicit_items(
    explicit_type: ExplicitModelType,
    member: TypeDescriptor,
    registry: ComponentRegistry,
) -> Optional[ModelReference]:
    """Item schema for an explicit array override: the member's own items."""
    if explicit_type != ExplicitModelType.ARRAY:
        return None
    target = member.pass_through_target()
    if target.kind == ShapeKind.ARRAY and target.inner is not None:
        return registry.mention(None, target.inner)
    return registry.mention(None, member)


def _member_reference(
    field: FieldDescriptor,
    registry: ComponentRegistry,
    inline: bool,
    params: ContextParams,
    owner: str,
) -> ModelReference:
    if field.explicit_type is not None:
        items = _explicit_items(field.explicit_type, field.type, registry)
        return Inline(explicit_model(field.explicit_type, params, items=items, owner=owner))
    return registry.mention(None, field.type, inline=inline, params=params)


def _field_reference(
    field: FieldDescriptor,
    registry: ComponentRegistry,
    owner: str,
    variant: Optional[VariantDescriptor] = None,
) -> ModelReference:
    inline = field.inline or (variant is not None and variant.inline)
    params = immediate_params(field.params, variant.params if variant is not None else None)
    return _member_reference(field, registry, inline, params, owner)


def _object_description(
    fields: list[FieldDescriptor],
    registry: ComponentRegistry,
    owner: str,
    variant: Optional[VariantDescriptor] = None,
) -> ModelObject:
    obj = ModelObject()
    for field in fields:
        if field.skip:
            continue
        # Variant-level overrides describe the variant, not each of its fields
        reference = _member_reference(
            field,
            registry,
            field.inline or (variant is not None and variant.inline),
            immediate_params(field.params),
            owner,
        )
        obj.add_property(field.serialized_name, reference, required=not field.optional)
    return obj


def _tuple_description(
    fields: list[FieldDescriptor],
    registry: ComponentRegistry,
    owner: str,
    variant: Optional[VariantDescriptor] = None,
) -> ModelArray:
    one_of = [
        _member_reference(
            field,
            registry,
            field.inline or (variant is not None and variant.inline),
            immediate_params(field.params),
            owner,
        )
        for field in fields
    ]
    return ModelArray(items=Inline(Model.one_of(one_of)))


# =============================================================================
# Structs
# =============================================================================


def _derive_record(descriptor: TypeDescriptor, registry: ComponentRegistry) -> Model:
    obj = _object_description(descriptor.fields, registry, descriptor.display_name)
    return Model(description=descriptor.description, data=ModelType(obj))


def _derive_tuple(descriptor: TypeDescriptor, registry: ComponentRegistry) -> Model:
    array = _tuple_description(descriptor.fields, registry, descriptor.display_name)
    return Model(description=descriptor.description, data=ModelType(array))


def _derive_newtype(descriptor: TypeDescriptor, registry: ComponentRegistry) -> Model:
    owner = descriptor.display_name
    if len(descriptor.fields) != 1:
        raise UnsupportedShapeError(
            owner, f"a newtype wraps exactly one field, got {len(descriptor.fields)}"
        )
    field = descriptor.fields[0]
    # Container directives win over the ones given on the wrapped field
    nullable = descriptor.params.nullable
    if nullable is None:
        nullable = field.params.nullable
    params = resolve_params(descriptor.params, field.params, nullable=nullable)
    explicit_type = descriptor.explicit_type or field.explicit_type

    if explicit_type is not None:
        items = _explicit_items(explicit_type, field.type, registry)
        return explicit_model(explicit_type, params, items=items, owner=owner)

    # The member is always embedded so the newtype's overrides can reach it.
    return registry.derive(field.type).apply_params(params)


# =============================================================================
# Enums
# =============================================================================


def _variant_tag(descriptor: TypeDescriptor, values: list[str]) -> Inline:
    return Inline(
        Model.string(
            description=f"{descriptor.name or descriptor.display_name} type variant",
            variants=list(values),
            example=values[0] if values else None,
        )
    )


def _unit_only(variants: list[VariantDescriptor]) -> bool:
    return all(v.style == VariantStyle.UNIT for v in variants)


def _derive_enum(descriptor: TypeDescriptor, registry: ComponentRegistry) -> Model:
    variants = descriptor.active_variants()
    kind = descriptor.tagging.kind

    # With every variant skipped the declared variants decide the shape
    if _unit_only(variants or descriptor.variants):
        if kind == TagKind.UNTAGGED:
            raise UnsupportedShapeError(
                descriptor.display_name, "untagged enum with only unit variants"
            )
        if any(v.discriminant is not None for v in descriptor.variants):
            return _integer_enum(descriptor, variants)
        return _string_enum(descriptor, variants)

    if kind == TagKind.UNTAGGED:
        return _untagged_enum(descriptor, variants, registry)
    if kind == TagKind.INTERNAL:
        return _internal_enum(descriptor, variants, registry)
    if kind == TagKind.ADJACENT:
        return _adjacent_enum(descriptor, variants, registry)
    return _external_enum(descriptor, variants, registry)


def _string_enum(descriptor: TypeDescriptor, variants: list[VariantDescriptor]) -> Model:
    names = [v.serialized_name for v in variants]
    return Model.string(
        description=descriptor.description,
        variants=names,
        example=names[0] if names else None,
    )


def _integer_enum(descriptor: TypeDescriptor, variants: list[VariantDescriptor]) -> Model:
    """One integer alternative per variant, numbered like the serializer does."""
    literals: dict[int, str] = {}
    next_value = 0
    # Implicit discriminants count on from the previous variant, skipped or not
    for index, variant in enumerate(descriptor.variants):
        if variant.discriminant is not None:
            literal = str(variant.discriminant)
            try:
                next_value = int(literal, 10)
            except ValueError as e:
                raise UnsupportedShapeError(
                    descriptor.display_name,
                    f"discriminant of {variant.name} is not an integer: {literal!r}",
                ) from e
        else:
            literal = str(next_value)
        literals[index] = literal
        next_value += 1

    one_of: list[ModelReference] = []
    for index, variant in enumerate(descriptor.variants):
        if variant.skip:
            continue
        one_of.append(
            Inline(
                Model.integer(
                    description=f"`{variant.serialized_name}` variant",
                    example=literals[index],
                )
            )
        )
    return Model.one_of(one_of, description=descriptor.description)


def _variant_shape(
    descriptor: TypeDescriptor,
    variant: VariantDescriptor,
    registry: ComponentRegistry,
) -> ModelReference:
    """Reference describing one variant's payload (untagged/adjacent/external)."""
    owner = f"{descriptor.display_name}::{variant.name}"
    fields = variant.fields

    if variant.style == VariantStyle.NEWTYPE:
        if len(fields) != 1:
            raise UnsupportedShapeError(owner, "newtype variant needs exactly one field")
        return _field_reference(fields[0], registry, owner, variant)

    if variant.style == VariantStyle.TUPLE:
        array = _tuple_description(fields, registry, owner, variant)
        return Inline(Model(description=variant.params.description, data=ModelType(array)))

    if variant.style == VariantStyle.RECORD:
        obj = _object_description(fields, registry, owner, variant)
        return Inline(Model(description=variant.params.description, data=ModelType(obj)))

    raise UnsupportedShapeError(
        owner, f"unit variant in a {descriptor.tagging.kind.value} tagged enum"
    )


def _untagged_enum(
    descriptor: TypeDescriptor,
    variants: list[VariantDescriptor],
    registry: ComponentRegistry,
) -> Model:
    one_of = [_variant_shape(descriptor, variant, registry) for variant in variants]
    return Model.one_of(one_of, description=descriptor.description)


def _internal_enum(
    descriptor: TypeDescriptor,
    variants: list[VariantDescriptor],
    registry: ComponentRegistry,
) -> Model:
    tag = descriptor.tagging.tag
    one_of: list[ModelReference] = []

    for variant in variants:
        owner = f"{descriptor.display_name}::{variant.name}"

        if variant.style == VariantStyle.NEWTYPE:
            if len(variant.fields) != 1:
                raise UnsupportedShapeError(owner, "newtype variant needs exactly one field")
            field = variant.fields[0]
            params = resolve_params(variant.params, field.params, nullable=field.params.nullable)
            if field.explicit_type is not None:
                items = _explicit_items(field.explicit_type, field.type, registry)
                model = explicit_model(field.explicit_type, params, items=items, owner=owner)
            else:
                # Embedded in full so the tag property can be merged into it
                model = registry.derive(field.type).apply_params(params)
        elif variant.style == VariantStyle.RECORD:
            obj = _object_description(variant.fields, registry, owner, variant)
            model = Model(description=variant.params.description, data=ModelType(obj))
        else:
            raise UnsupportedShapeError(
                owner, f"{variant.style.value} variant in an internally tagged enum"
            )

        tag_object = Model.object()
        tag_object.as_object.add_property(
            tag, _variant_tag(descriptor, [variant.serialized_name]), required=True
        )
        try:
            model.try_merge(tag_object)
        except ModelMergeError as e:
            if registry.config.strict_merge:
                raise UnsupportedShapeError(owner, f"cannot add tag property '{tag}': {e}") from e
            logger.warning(
                "Tag property '%s' not added to %s, keeping the variant schema as is: %s",
                tag,
                owner,
                e,
            )
        one_of.append(Inline(model))

    return Model.one_of(one_of, description=descriptor.description)


def _adjacent_enum(
    descriptor: TypeDescriptor,
    variants: list[VariantDescriptor],
    registry: ComponentRegistry,
) -> Model:
    tagging = descriptor.tagging
    names = [v.serialized_name for v in variants]
    one_of = [_variant_shape(descriptor, variant, registry) for variant in variants]

    model = Model.object(description=descriptor.description)
    obj = model.as_object
    obj.add_property(tagging.tag, _variant_tag(descriptor, names), required=True)
    obj.add_property(
        tagging.content,
        Inline(Model.one_of(one_of, description=descriptor.description)),
        required=True,
    )
    return model


def _external_enum(
    descriptor: TypeDescriptor,
    variants: list[VariantDescriptor],
    registry: ComponentRegistry,
) -> Model:
    one_of: list[ModelReference] = []
    for variant in variants:
        if variant.style == VariantStyle.UNIT:
            name = variant.serialized_name
            one_of.append(
                Inline(Model.string(description=variant.params.description, variants=[name], example=name))
            )
        else:
            one_of.append(_variant_shape(descriptor, variant, registry))

    return Model.object(
        description=descriptor.description,
        additional_properties=Inline(Model.one_of(one_of, description=descriptor.description)),
    )


# =============================================================================
# Built-in shapes
# =============================================================================


def _derive_primitive(descriptor: TypeDescriptor, registry: ComponentRegistry) -> Model:
    if descriptor.model is None:
        raise UnsupportedShapeError(descriptor.display_name, "primitive without a schema template")
    return copy.deepcopy(descriptor.model).apply_params(
        descriptor.params if not descriptor.params.is_empty() else None
    )


def _require_inner(descriptor: TypeDescriptor) -> TypeDescriptor:
    if descriptor.inner is None:
        raise UnsupportedShapeError(
            descriptor.display_name, f"{descriptor.kind.value} without an inner type"
        )
    return descriptor.inner


def _derive_array(descriptor: TypeDescriptor, registry: ComponentRegistry) -> Model:
    items = registry.mention(None, _require_inner(descriptor))
    return Model.array(items, description=descriptor.description)


def _derive_map(descriptor: TypeDescriptor, registry: ComponentRegistry) -> Model:
    values = registry.mention(None, _require_inner(descriptor))
    return Model.object(description=descriptor.description, additional_properties=values)


def _derive_wrapper(descriptor: TypeDescriptor, registry: ComponentRegistry) -> Model:
    model = registry.derive(_require_inner(descriptor))
    if descriptor.nullable:
        model.apply_params(ContextParams(nullable=True))
    return model


_HANDLERS: dict[ShapeKind, Callable[[TypeDescriptor, "ComponentRegistry"], Model]] = {
    ShapeKind.RECORD: _derive_record,
    ShapeKind.TUPLE: _derive_tuple,
    ShapeKind.NEWTYPE: _derive_newtype,
    ShapeKind.ENUM: _derive_enum,
    ShapeKind.PRIMITIVE: _derive_primitive,
    ShapeKind.ARRAY: _derive_array,
    ShapeKind.MAP: _derive_map,
    ShapeKind.WRAPPER: _derive_wrapper,
}
