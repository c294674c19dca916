"""Tests for directive collectors and rename rules."""

import pytest

from wire_schema import DescriptorError, RenameRule
from wire_schema.core import ExclusiveOption, MultiOption


class TestExclusiveOption:
    """Test at-most-one directives."""

    def test_set_once(self):
        """Test the first value is kept."""
        option = ExclusiveOption("tag", owner="Shape")
        assert not option.is_set
        assert option.get("default") == "default"

        option.set("type")
        assert option.is_set
        assert option.get("default") == "type"

    def test_duplicate_raises(self):
        """Test that a second value is an error naming the directive."""
        option = ExclusiveOption("tag", owner="Shape")
        option.set("type")
        with pytest.raises(DescriptorError, match="duplicate directive `tag`") as exc_info:
            option.set("kind")
        assert exc_info.value.owner == "Shape"

    def test_set_if_none(self):
        """Test that set_if_none never overrides."""
        option = ExclusiveOption("rename", owner="User")
        option.set_if_none("a")
        option.set_if_none("b")
        assert option.get() == "a"


class TestMultiOption:
    """Test many-valued directives."""

    def test_duplicates_recorded(self):
        """Test that repeats are remembered when not unique."""
        option = MultiOption("alias")
        option.insert("a")
        option.insert("b")
        assert not option.has_duplicates
        option.insert("a")
        assert option.has_duplicates
        assert option.get() == ["a", "b", "a"]
        assert len(option) == 3
        assert "b" in option

    def test_unique_raises(self):
        """Test that repeats are errors when unique."""
        option = MultiOption("field", owner="User", unique=True)
        option.insert("id")
        with pytest.raises(DescriptorError, match="duplicate field 'id'"):
            option.insert("id")

    def test_at_most_one(self):
        """Test single-value extraction."""
        option = MultiOption("explicit type")
        assert option.at_most_one() is None
        option.insert("string")
        assert option.at_most_one() == "string"
        option.insert("integer")
        with pytest.raises(DescriptorError, match="conflicting"):
            option.at_most_one()


class TestRenameRule:
    """Test serializer-style rename rules."""

    @pytest.mark.parametrize(
        "rule,expected",
        [
            (RenameRule.NONE, "ValueA"),
            (RenameRule.LOWER_CASE, "valuea"),
            (RenameRule.UPPER_CASE, "VALUEA"),
            (RenameRule.PASCAL_CASE, "ValueA"),
            (RenameRule.CAMEL_CASE, "valueA"),
            (RenameRule.SNAKE_CASE, "value_a"),
            (RenameRule.SCREAMING_SNAKE_CASE, "VALUE_A"),
            (RenameRule.KEBAB_CASE, "value-a"),
            (RenameRule.SCREAMING_KEBAB_CASE, "VALUE-A"),
        ],
    )
    def test_variant_names(self, rule, expected):
        """Test renaming PascalCase variant names."""
        assert rule.apply_to_variant("ValueA") == expected

    @pytest.mark.parametrize(
        "rule,expected",
        [
            (RenameRule.NONE, "nick_name"),
            (RenameRule.LOWER_CASE, "nick_name"),
            (RenameRule.UPPER_CASE, "NICK_NAME"),
            (RenameRule.PASCAL_CASE, "NickName"),
            (RenameRule.CAMEL_CASE, "nickName"),
            (RenameRule.SNAKE_CASE, "nick_name"),
            (RenameRule.SCREAMING_SNAKE_CASE, "NICK_NAME"),
            (RenameRule.KEBAB_CASE, "nick-name"),
            (RenameRule.SCREAMING_KEBAB_CASE, "NICK-NAME"),
        ],
    )
    def test_field_names(self, rule, expected):
        """Test renaming snake_case field names."""
        assert rule.apply_to_field("nick_name") == expected

    def test_from_str(self):
        """Test parsing serializer spellings."""
        assert RenameRule.from_str("camelCase") == RenameRule.CAMEL_CASE
        assert RenameRule.from_str("SCREAMING-KEBAB-CASE") == RenameRule.SCREAMING_KEBAB_CASE

    def test_from_str_unknown(self):
        """Test that unknown rules are rejected."""
        with pytest.raises(DescriptorError, match="Camel"):
            RenameRule.from_str("Camel")
