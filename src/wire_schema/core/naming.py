"""Serializer-style rename rules.

Field names are assumed to be written in snake_case and variant names in
PascalCase, as a serializer's ``rename_all`` directive assumes.
"""

from __future__ import annotations

from enum import Enum

from wire_schema.types import DescriptorError


class RenameRule(Enum):
    """Case convention applied to fields and variants that are not renamed."""
    NONE = "none"
    LOWER_CASE = "lowercase"
    UPPER_CASE = "UPPERCASE"
    PASCAL_CASE = "PascalCase"
    CAMEL_CASE = "camelCase"
    SNAKE_CASE = "snake_case"
    SCREAMING_SNAKE_CASE = "SCREAMING_SNAKE_CASE"
    KEBAB_CASE = "kebab-case"
    SCREAMING_KEBAB_CASE = "SCREAMING-KEBAB-CASE"

    @classmethod
    def from_str(cls, value: str) -> RenameRule:
        for rule in cls:
            if rule.value == value:
                return rule
        raise DescriptorError(f"unknown rename rule {value!r}")

    def apply_to_variant(self, name: str) -> str:
        if self in (RenameRule.NONE, RenameRule.PASCAL_CASE):
            return name
        if self == RenameRule.LOWER_CASE:
            return name.lower()
        if self == RenameRule.UPPER_CASE:
            return name.upper()
        if self == RenameRule.CAMEL_CASE:
            return name[:1].lower() + name[1:]

        snake = ""
        for i, ch in enumerate(name):
            if i > 0 and ch.isupper():
                snake += "_"
            snake += ch.lower()
        return self._from_snake(snake, self)

    def apply_to_field(self, name: str) -> str:
        if self in (RenameRule.NONE, RenameRule.LOWER_CASE, RenameRule.SNAKE_CASE):
            return name
        if self == RenameRule.UPPER_CASE:
            return name.upper()
        if self in (RenameRule.PASCAL_CASE, RenameRule.CAMEL_CASE):
            pascal = ""
            capitalize = True
            for ch in name:
                if ch == "_":
                    capitalize = True
                elif capitalize:
                    pascal += ch.upper()
                    capitalize = False
                else:
                    pascal += ch
            if self == RenameRule.CAMEL_CASE:
                return pascal[:1].lower() + pascal[1:]
            return pascal
        return self._from_snake(name, self)

    @staticmethod
    def _from_snake(snake: str, rule: RenameRule) -> str:
        if rule == RenameRule.SCREAMING_SNAKE_CASE:
            return snake.upper()
        if rule == RenameRule.KEBAB_CASE:
            return snake.replace("_", "-")
        if rule == RenameRule.SCREAMING_KEBAB_CASE:
            return snake.upper().replace("_", "-")
        return snake
