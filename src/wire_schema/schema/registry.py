"""Component Registry.

The registry is the ``components`` table of one document build: a
name -> schema map with memoized derivation and a reference-closure check.
It is owned by a single build and passed by reference through the whole
derivation/mention recursion.

Mention rules:
    - Always-inline types (primitives, wrappers, arrays, maps and anonymous
      types) are derived and embedded with the call-site params applied.
    - Inline requests (by the caller or by the type's declaration) are
      embedded the same way without touching the table.
    - Everything else is derived once, stored raw under its name and
      referenced with a Link. Call-site params never reach the stored copy.

Recursion guard:
    The registry keeps the stack of descriptors being derived. A mention of a
    descriptor already on the stack is a back-edge: it becomes a Link to the
    named target (which is stored once its derivation finishes), or raises
    InlineRecursionError when the target is anonymous or back-edge linking is
    disabled.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Optional

from wire_schema.config import DEFAULT_CONFIG, GeneratorConfig
from wire_schema.types import (
    ContextParams,
    DuplicateComponentError,
    Inline,
    InlineRecursionError,
    Link,
    Model,
    ModelReference,
    TypeDescriptor,
    UnresolvedReferenceError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a reference-closure check.

    Attributes:
        missing: First unresolved link target, None when every link resolves
    """
    missing: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.missing is None

    def to_dict(self) -> dict:
        return {"ok": self.ok, "missing": self.missing}


class ComponentRegistry:
    """Name -> schema table for one document build.

    Example:
        >>> registry = ComponentRegistry()
        >>> registry.mention("User", user_descriptor)
        Link(name='User')
        >>> registry.verify().ok
        True
    """

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or DEFAULT_CONFIG
        self.models: dict[str, Model] = {}
        self.security_schemes: dict[str, Any] = {}
        self._deriving: list[TypeDescriptor] = []
        self._back_edges: set[str] = set()

    def __contains__(self, name: str) -> bool:
        return self.contains(name)

    def __len__(self) -> int:
        return len(self.models)

    def contains(self, name: str) -> bool:
        """Check whether a schema is stored under ``name``."""
        return name in self.models

    def names(self) -> list[str]:
        """Stored schema names in iteration (alphabetic) order."""
        return sorted(self.models)

    def get(self, name: str) -> Optional[Model]:
        return self.models.get(name)

    def add(self, name: str, model: Model) -> Optional[Model]:
        """Store ``model`` under ``name``, returning the previous model.

        Last write wins. A different model replacing an existing one is
        logged, or rejected when ``strict_overwrite`` is set.

        Raises:
            DuplicateComponentError: strict_overwrite and the models differ
        """
        previous = self.models.get(name)
        if previous is not None and previous != model:
            if self.config.strict_overwrite:
                raise DuplicateComponentError(name)
            logger.warning("Replacing schema '%s' with a different definition", name)
        self.models[name] = model
        return previous

    # =========================================================================
    # Mention / derive
    # =========================================================================

    def mention(
        self,
        name: Optional[str],
        descriptor: TypeDescriptor,
        inline: bool = False,
        params: Optional[ContextParams] = None,
    ) -> ModelReference:
        """Return a reference to ``descriptor``'s schema at one use site.

        Args:
            name: Component name (defaults to the descriptor's name)
            descriptor: Type being referenced
            inline: Caller asks for the schema to be embedded
            params: Call-site overrides (applied to inline results only)

        Returns:
            Inline(model) or Link(name)

        Raises:
            InlineRecursionError: The type would have to embed itself
        """
        name = name if name is not None else descriptor.name
        embed = descriptor.is_always_inline or inline or descriptor.inline

        target = descriptor.pass_through_target()
        if self._is_deriving(target):
            return self._back_edge(target, embed)

        if embed or name is None:
            logger.debug("Inlining %s", descriptor.display_name)
            return Inline(self.derive(descriptor).apply_params(params))

        if not self.contains(name):
            model = self.derive(descriptor)
            # A back-edge may have stored it already
            if not self.contains(name):
                self.add(name, model)
        logger.debug("Linking %s", name)
        return Link(name)

    def derive(self, descriptor: TypeDescriptor) -> Model:
        """Run the derivation engine for ``descriptor`` under the recursion guard.

        Raises:
            InlineRecursionError: ``descriptor`` is already being derived
        """
        from wire_schema.schema.engine import derive_schema

        if self._is_deriving(descriptor):
            raise InlineRecursionError(self._cycle_path(descriptor))

        self._deriving.append(descriptor)
        try:
            model = derive_schema(descriptor, self)
        finally:
            self._deriving.pop()

        name = descriptor.name
        if name is not None and name in self._back_edges:
            self._back_edges.discard(name)
            if not self.contains(name):
                self.add(name, copy.deepcopy(model))
        return model

    def _is_deriving(self, descriptor: TypeDescriptor) -> bool:
        return any(active is descriptor for active in self._deriving)

    def _cycle_path(self, descriptor: TypeDescriptor) -> list[str]:
        start = next(i for i, active in enumerate(self._deriving) if active is descriptor)
        return [active.display_name for active in self._deriving[start:]] + [
            descriptor.display_name
        ]

    def _back_edge(self, target: TypeDescriptor, embed: bool) -> ModelReference:
        name = target.name
        if name is None:
            raise InlineRecursionError(self._cycle_path(target))
        if embed:
            if not self.config.link_back_edges:
                raise InlineRecursionError(self._cycle_path(target))
            logger.info("Breaking inline cycle through '%s' with a link", name)
        self._back_edges.add(name)
        return Link(name)

    # =========================================================================
    # Security schemes
    # =========================================================================

    def mention_security_scheme(self, name: str, scheme: Any) -> str:
        """Store a security scheme once and return its name."""
        if name not in self.security_schemes:
            self.security_schemes[name] = scheme
        return name

    # =========================================================================
    # Verification / output
    # =========================================================================

    def verify(self) -> VerificationResult:
        """Check that every stored link resolves.

        Stored models are walked in alphabetic name order; the first link
        without a matching entry is reported.
        """
        for name in self.names():
            for target in self.models[name].links():
                if target not in self.models:
                    return VerificationResult(missing=target)
        return VerificationResult()

    def verify_or_raise(self) -> None:
        """Raise UnresolvedReferenceError for the first dangling link."""
        result = self.verify()
        if not result.ok:
            raise UnresolvedReferenceError(result.missing)

    def to_dict(self, reference_prefix: Optional[str] = None) -> dict:
        """Convert to an OpenAPI components object."""
        prefix = reference_prefix or self.config.reference_prefix
        data: dict[str, Any] = {}
        if self.models:
            data["schemas"] = {
                name: self.models[name].to_dict(prefix) for name in self.names()
            }
        if self.security_schemes:
            data["securitySchemes"] = {
                name: self.security_schemes[name].to_dict()
                for name in sorted(self.security_schemes)
            }
        return data
