"""Tests for descriptor builders."""

import pytest

from wire_schema import (
    DescriptorError,
    ExplicitModelType,
    FieldDescriptor,
    RenameRule,
    ShapeKind,
    TagKind,
    TaggingConvention,
    VariantStyle,
    enum,
    field,
    newtype,
    record,
    tuple_struct,
)
from wire_schema.core import builtins as b


class TestField:
    """Test the field() helper."""

    def test_directives(self):
        """Test that keyword directives reach the descriptor."""
        item = field(
            "created_at",
            b.STRING,
            rename="created",
            optional=True,
            format="date-time",
            explicit_type="string",
        )
        assert item.serialized_name == "created"
        assert item.optional is True
        assert item.params.format == "date-time"
        assert item.explicit_type == ExplicitModelType.STRING

    def test_unknown_explicit_type(self):
        """Test that unknown explicit types are rejected."""
        with pytest.raises(DescriptorError, match="explicit type"):
            field("id", b.STRING, explicit_type="date")

    def test_type_required(self):
        """Test that a field needs a descriptor."""
        with pytest.raises(DescriptorError):
            field("id", "string")


class TestRecordBuilder:
    """Test record registration."""

    def test_build(self):
        """Test a plain record."""
        descriptor = (
            record("User")
            .describe("Registered user", example="{}")
            .field("id", b.UUID)
            .field("note", b.STRING, optional=True)
            .build()
        )
        assert descriptor.kind == ShapeKind.RECORD
        assert descriptor.description == "Registered user"
        assert descriptor.params.example == "{}"
        assert [f.name for f in descriptor.fields] == ["id", "note"]
        assert descriptor.inline is False

    def test_descriptor_available_before_build(self):
        """Test self-reference through builder.descriptor."""
        node = record("Node")
        node.field("next", b.optional(node.descriptor))
        descriptor = node.build()
        assert descriptor is node.descriptor
        assert descriptor.fields[0].type.inner is descriptor

    def test_rename_all(self):
        """Test that rename_all only touches fields without a rename."""
        descriptor = (
            record("Profile")
            .rename_all(RenameRule.KEBAB_CASE)
            .field("nick_name", b.STRING)
            .field("home_page", b.STRING, rename="url")
            .build()
        )
        assert [f.serialized_name for f in descriptor.fields] == ["nick-name", "url"]

    def test_duplicate_field(self):
        """Test that a repeated source field name raises."""
        builder = record("User").field("id", b.STRING)
        with pytest.raises(DescriptorError, match="duplicate field 'id'"):
            builder.field("id", b.STRING)

    def test_serialized_name_collision(self):
        """Test that two fields renamed to the same name raise."""
        builder = (
            record("User")
            .rename_all("camelCase")
            .field("user_id", b.STRING)
            .field("userId", b.STRING)
        )
        with pytest.raises(DescriptorError, match="userId"):
            builder.build()

    def test_skipped_field_may_collide(self):
        """Test that skipped fields are not checked for collisions."""
        descriptor = (
            record("User")
            .field("id", b.STRING)
            .field("legacy_id", b.STRING, rename="id", skip=True)
            .build()
        )
        assert len(descriptor.active_fields()) == 1

    def test_duplicate_directive(self):
        """Test that container directives are given once."""
        builder = record("User").describe("A")
        with pytest.raises(DescriptorError, match="description"):
            builder.describe("B")
        with pytest.raises(DescriptorError, match="inline"):
            record("Point").inline().inline()

    def test_empty_name(self):
        """Test that a type needs a name."""
        with pytest.raises(DescriptorError):
            record("")


class TestTupleAndNewtypeBuilders:
    """Test positional builders."""

    def test_tuple_fields_are_numbered(self):
        """Test tuple field names."""
        descriptor = tuple_struct("Pair").field(b.STRING).field(b.I32, description="Count").build()
        assert descriptor.kind == ShapeKind.TUPLE
        assert [f.name for f in descriptor.fields] == ["0", "1"]
        assert descriptor.fields[1].params.description == "Count"

    def test_tuple_rename_all(self):
        """Test that rename_all is rejected on tuples."""
        with pytest.raises(DescriptorError):
            tuple_struct("Pair").rename_all("camelCase").field(b.STRING).build()

    def test_newtype(self):
        """Test a newtype with an explicit override."""
        descriptor = newtype("Id", b.I64).explicit("string").describe(format="uuid").build()
        assert descriptor.kind == ShapeKind.NEWTYPE
        assert descriptor.explicit_type == ExplicitModelType.STRING
        assert descriptor.params.format == "uuid"
        assert descriptor.fields[0].type is b.I64

    def test_newtype_conflicting_overrides(self):
        """Test that two explicit types conflict."""
        builder = newtype("Id", b.I64).explicit("string").explicit(ExplicitModelType.INTEGER)
        with pytest.raises(DescriptorError, match="conflicting"):
            builder.build()


class TestEnumBuilder:
    """Test enum registration."""

    def test_tagging_conventions(self):
        """Test the four tagging directives."""
        assert enum("A").variant("X").build().tagging == TaggingConvention.external()
        assert enum("B").tagged("t").variant("X").build().tagging.kind == TagKind.INTERNAL
        adjacent = enum("C").tagged("t", "c").variant("X").build().tagging
        assert (adjacent.kind, adjacent.tag, adjacent.content) == (TagKind.ADJACENT, "t", "c")
        assert enum("D").untagged().variant("X").build().tagging.kind == TagKind.UNTAGGED

    def test_conflicting_tagging(self):
        """Test that untagged and tag cannot be combined."""
        with pytest.raises(DescriptorError, match="conflicting tagging"):
            enum("E").untagged().tagged("t").variant("X").build()

    def test_variant_payloads(self, user_descriptor):
        """Test the payload forms."""
        descriptor = (
            enum("Event")
            .variant("Ping")
            .variant("Joined", user_descriptor)
            .variant("Moved", (b.I32, b.I32))
            .variant("Said", {"text": b.STRING, "at": field("at", b.I64, optional=True)})
            .variant("Tagged", field("0", b.STRING, format="tag"))
            .build()
        )
        styles = [v.style for v in descriptor.variants]
        assert styles == [
            VariantStyle.UNIT,
            VariantStyle.NEWTYPE,
            VariantStyle.TUPLE,
            VariantStyle.RECORD,
            VariantStyle.NEWTYPE,
        ]
        said = descriptor.variants[3]
        assert [f.name for f in said.fields] == ["text", "at"]
        assert said.fields[1].optional is True
        assert isinstance(descriptor.variants[4].fields[0], FieldDescriptor)

    def test_short_tuple_payload(self):
        """Test that a one-element tuple is not a tuple variant."""
        with pytest.raises(DescriptorError, match="two or more"):
            enum("E").variant("One", (b.STRING,))

    def test_unsupported_payload(self):
        """Test that unknown payloads are rejected."""
        with pytest.raises(DescriptorError, match="unsupported payload"):
            enum("E").variant("Bad", [b.STRING])

    def test_unit_variant_directives(self):
        """Test that payload directives are rejected on unit variants."""
        with pytest.raises(DescriptorError):
            enum("E").variant("Unit", inline=True)

    def test_discriminants(self):
        """Test that discriminants are kept as given."""
        descriptor = enum("Code").unit("Ok", discriminant=200).unit("Missing", discriminant="404").build()
        assert [v.discriminant for v in descriptor.variants] == [200, "404"]

    def test_duplicate_variant(self):
        """Test that variant names are unique."""
        builder = enum("E").variant("A")
        with pytest.raises(DescriptorError, match="duplicate variant 'A'"):
            builder.variant("A")

    def test_rename_rules(self):
        """Test container and per-variant rename rules."""
        descriptor = (
            enum("Event")
            .rename_all("snake_case")
            .variant("UserJoined", {"user_id": b.STRING}, rename_all="camelCase")
            .variant("UserLeft", {"user_id": b.STRING})
            .variant("Other", rename="misc")
            .build()
        )
        joined, left, other = descriptor.variants
        assert joined.serialized_name == "user_joined"
        assert joined.fields[0].serialized_name == "userId"
        assert left.serialized_name == "user_left"
        assert left.fields[0].serialized_name == "user_id"
        assert other.serialized_name == "misc"

    def test_variant_rename_all_needs_record(self):
        """Test that rename_all is only accepted on record variants."""
        with pytest.raises(DescriptorError, match="rename_all"):
            enum("E").variant("Wrapped", b.STRING, rename_all="camelCase")

    def test_serialized_variant_collision(self):
        """Test that renames may not make two variants collide."""
        builder = enum("E").variant("A").variant("B", rename="A")
        with pytest.raises(DescriptorError, match="duplicate variant name 'A'"):
            builder.build()
