"""Wire Schema - Derivation and registry.

Package Structure:
    - engine.py: derive_schema() (descriptor -> Model)
    - registry.py: ComponentRegistry (name -> Model table, mention, verify)
    - params.py: Context params resolution and explicit type overrides
"""

from .engine import derive_schema
from .params import explicit_model, immediate_params, resolve_params
from .registry import ComponentRegistry, VerificationResult

__all__ = [
    "ComponentRegistry",
    "VerificationResult",
    "derive_schema",
    "explicit_model",
    "immediate_params",
    "resolve_params",
]
