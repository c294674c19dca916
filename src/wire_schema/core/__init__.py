"""Wire Schema Core - Descriptor registration.

This package provides the registration step that replaces reflection:
builders that produce TypeDescriptors, the built-in descriptors for
primitives and containers, and the directive utilities they share.

Package Structure:
    - builder.py: record(), tuple_struct(), newtype(), enum(), field()
    - builtins.py: STRING, I64, UUID, ..., optional(), array_of(), map_of()
    - naming.py: RenameRule (serializer-style case conventions)
    - options.py: ExclusiveOption, MultiOption
"""

from . import builtins
from .builder import (
    EnumBuilder,
    NewtypeBuilder,
    RecordBuilder,
    TupleStructBuilder,
    enum,
    field,
    newtype,
    record,
    tuple_struct,
)
from .naming import RenameRule
from .options import ExclusiveOption, MultiOption

__all__ = [
    "builtins",
    # Builders
    "EnumBuilder",
    "NewtypeBuilder",
    "RecordBuilder",
    "TupleStructBuilder",
    "enum",
    "field",
    "newtype",
    "record",
    "tuple_struct",
    # Utilities
    "ExclusiveOption",
    "MultiOption",
    "RenameRule",
]
