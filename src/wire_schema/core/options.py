"""Directive collectors used by the descriptor builders.

A builder gathers directives (rename, tag, explicit type, ...) one call at a
time. ExclusiveOption accepts a directive at most once; MultiOption keeps
every value and remembers whether any was given twice.
"""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from wire_schema.types import DescriptorError

T = TypeVar("T")


class ExclusiveOption(Generic[T]):
    """At-most-one directive value.

    Example:
        >>> tag = ExclusiveOption("tag", owner="Shape")
        >>> tag.set("type")
        >>> tag.set("kind")
        Traceback (most recent call last):
        ...
        DescriptorError: Invalid descriptor (Shape): duplicate directive `tag`
    """

    def __init__(self, name: str, owner: str = ""):
        self.name = name
        self.owner = owner
        self._value: Optional[T] = None
        self._is_set = False

    def set(self, value: T) -> None:
        if self._is_set:
            raise DescriptorError(f"duplicate directive `{self.name}`", owner=self.owner)
        self._value = value
        self._is_set = True

    def set_if_none(self, value: T) -> None:
        if not self._is_set:
            self._value = value
            self._is_set = True

    @property
    def is_set(self) -> bool:
        return self._is_set

    def get(self, default: Optional[T] = None) -> Optional[T]:
        return self._value if self._is_set else default


class MultiOption(Generic[T]):
    """Many directive values with duplicate detection.

    ``unique`` makes a repeated value an immediate error; otherwise the
    repetition is only recorded in ``has_duplicates``.
    """

    def __init__(self, name: str, owner: str = "", unique: bool = False):
        self.name = name
        self.owner = owner
        self.unique = unique
        self._values: list[T] = []
        self.has_duplicates = False

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, value: object) -> bool:
        return value in self._values

    def insert(self, value: T) -> None:
        if value in self._values:
            if self.unique:
                raise DescriptorError(f"duplicate {self.name} {value!r}", owner=self.owner)
            self.has_duplicates = True
        self._values.append(value)

    def at_most_one(self) -> Optional[T]:
        """Return the single value, raising if several were collected."""
        if len(self._values) > 1:
            raise DescriptorError(f"conflicting `{self.name}` directives", owner=self.owner)
        return self._values[0] if self._values else None

    def get(self) -> list[T]:
        return list(self._values)
