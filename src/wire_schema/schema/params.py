"""Context params resolution.

Overrides for a member-type mention can be declared at three levels: the
field, the enum variant holding the field, and the container type. The
first non-empty description/format/example wins, in that order. ``nullable``
and ``variants`` have no fallback chain.
"""

from __future__ import annotations

from typing import Optional

from wire_schema.types import (
    ContextParams,
    ExplicitModelType,
    Model,
    ModelArray,
    ModelReference,
    ModelType,
    UnsupportedShapeError,
)


def resolve_params(
    *levels: Optional[ContextParams],
    nullable: Optional[bool] = None,
    variants: Optional[list[str]] = None,
) -> ContextParams:
    """Compute effective params for one mention.

    Args:
        *levels: Params from the innermost level outward (field, variant,
            container); None entries are skipped
        nullable: Nullable flag of the immediate level
        variants: Allowed string values of the immediate level

    Returns:
        ContextParams with the resolved values
    """
    present = [level for level in levels if level is not None]

    def first(attribute: str) -> Optional[str]:
        for level in present:
            value = getattr(level, attribute)
            if value:
                return value
        return None

    return ContextParams(
        description=first("description"),
        nullable=nullable,
        variants=list(variants) if variants is not None else None,
        format=first("format"),
        example=first("example"),
    )


def immediate_params(params: ContextParams, *outer: Optional[ContextParams]) -> ContextParams:
    """Resolve params whose nullable/variants come from ``params`` itself."""
    return resolve_params(params, *outer, nullable=params.nullable, variants=params.variants)


def explicit_model(
    explicit_type: ExplicitModelType,
    params: Optional[ContextParams] = None,
    items: Optional[ModelReference] = None,
    owner: str = "<field>",
) -> Model:
    """Synthesize a fresh model for an explicit type override.

    Args:
        explicit_type: Replacement schema type
        params: Description / format / example / nullable for the new model
        items: Item schema, required for ARRAY
        owner: Type name used in error messages

    Raises:
        UnsupportedShapeError: ARRAY requested without an item schema
    """
    params = params or ContextParams()

    if explicit_type == ExplicitModelType.STRING:
        model = Model.string(variants=params.variants)
    elif explicit_type == ExplicitModelType.INTEGER:
        model = Model.integer()
    elif explicit_type == ExplicitModelType.NUMBER:
        model = Model.number()
    elif explicit_type == ExplicitModelType.BOOLEAN:
        model = Model.boolean()
    else:
        if items is None:
            raise UnsupportedShapeError(owner, "array override needs an item type")
        model = Model(data=ModelType(ModelArray(items=items)))

    return model.apply_params(params)
