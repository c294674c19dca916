"""Tests for the type shape derivation engine."""

import logging

import pytest

from wire_schema import (
    ComponentRegistry,
    GeneratorConfig,
    Link,
    ShapeKind,
    TypeDescriptor,
    UnsupportedShapeError,
    derive_schema,
    enum,
    newtype,
    record,
    tuple_struct,
)
from wire_schema.core import builtins as b

TAG = {"type": "string"}


def derive(registry, descriptor):
    return registry.derive(descriptor).to_dict()


class TestRecords:
    """Test record derivation."""

    def test_required_and_optional_fields(self, registry, user_descriptor):
        """Test that only non-optional fields are required."""
        assert derive(registry, user_descriptor) == {
            "type": "object",
            "properties": {
                "id": {"type": "string"},
                "note": {"type": "string"},
            },
            "required": ["id"],
        }

    def test_skipped_field_excluded(self, registry):
        """Test that skipped fields are not described."""
        descriptor = (
            record("Account")
            .field("login", b.STRING)
            .field("password_hash", b.STRING, skip=True)
            .build()
        )
        data = derive(registry, descriptor)
        assert list(data["properties"]) == ["login"]
        assert data["required"] == ["login"]

    def test_rename_rules(self, registry):
        """Test rename_all and explicit renames."""
        descriptor = (
            record("Profile")
            .rename_all("camelCase")
            .field("nick_name", b.STRING)
            .field("birth_date", b.STRING, rename="born")
            .build()
        )
        data = derive(registry, descriptor)
        assert set(data["properties"]) == {"nickName", "born"}
        assert data["required"] == ["nickName", "born"]

    def test_field_params(self, registry):
        """Test description / example / nullable on a field."""
        descriptor = (
            record("Person")
            .describe("A person")
            .field("name", b.STRING, description="Name", example="Bob")
            .field("alias", b.STRING, nullable=True, optional=True)
            .build()
        )
        data = derive(registry, descriptor)
        assert data["description"] == "A person"
        assert data["properties"]["name"] == {
            "description": "Name",
            "type": "string",
            "example": "Bob",
        }
        assert data["properties"]["alias"] == {"nullable": True, "type": "string"}

    def test_named_field_is_linked(self, registry, user_descriptor):
        """Test that named member types become links."""
        descriptor = (
            record("Post")
            .field("author", user_descriptor)
            .field("editor", user_descriptor, inline=True)
            .build()
        )
        data = derive(registry, descriptor)
        assert data["properties"]["author"] == {"$ref": "#/components/schemas/User"}
        assert data["properties"]["editor"]["type"] == "object"
        assert "User" in registry

    def test_explicit_field_type(self, registry):
        """Test that an explicit type replaces the member schema."""
        descriptor = (
            record("Row")
            .field("id", b.I64, explicit_type="string", format="uuid")
            .field("tags", b.array_of(b.STRING), explicit_type="array", description="Tags")
            .build()
        )
        data = derive(registry, descriptor)
        assert data["properties"]["id"] == {"type": "string", "format": "uuid"}
        assert data["properties"]["tags"] == {
            "description": "Tags",
            "type": "array",
            "items": {"type": "string"},
        }

    def test_containers(self, registry):
        """Test arrays, maps and optionals."""
        descriptor = (
            record("Inventory")
            .field("counts", b.map_of(b.I64))
            .field("labels", b.array_of(b.optional(b.STRING)))
            .field("owner", b.UUID)
            .build()
        )
        properties = derive(registry, descriptor)["properties"]
        assert properties["counts"] == {
            "type": "object",
            "additionalProperties": {"type": "integer", "format": "int64"},
        }
        assert properties["labels"] == {
            "type": "array",
            "items": {"nullable": True, "type": "string"},
        }
        assert properties["owner"] == {
            "description": "UUID ver. 4 [rfc](https://tools.ietf.org/html/rfc4122)",
            "type": "string",
            "format": "uuid",
            "example": "00000000-0000-0000-0000-000000000000",
        }

    def test_required_subset_of_properties(self, registry, user_descriptor):
        """Test the required-set invariant on a derived object."""
        obj = registry.derive(user_descriptor).as_object
        assert set(obj.required) <= set(obj.properties)


class TestTuplesAndNewtypes:
    """Test tuple struct and newtype derivation."""

    def test_tuple_struct(self, registry):
        """Test that a tuple becomes an array of alternatives."""
        descriptor = tuple_struct("Pair").field(b.STRING).field(b.I32).build()
        assert derive(registry, descriptor) == {
            "type": "array",
            "items": {
                "oneOf": [
                    {"type": "string"},
                    {"type": "integer", "format": "int32"},
                ]
            },
        }

    def test_anonymous_tuple(self, registry):
        """Test that anonymous tuples are always inlined."""
        reference = registry.mention(None, b.tuple_of(b.BOOLEAN, b.UNIT))
        assert reference.to_dict() == {
            "type": "array",
            "items": {
                "oneOf": [
                    {"type": "boolean"},
                    {
                        "description": "Always `null`",
                        "nullable": True,
                        "type": "string",
                        "format": "null",
                    },
                ]
            },
        }

    def test_newtype_overlays_container_params(self, registry):
        """Test that the newtype's own params reach the member schema."""
        descriptor = (
            newtype("Email", b.STRING)
            .describe("Email address", format="email", example="a@b.c")
            .build()
        )
        assert derive(registry, descriptor) == {
            "description": "Email address",
            "type": "string",
            "format": "email",
            "example": "a@b.c",
        }

    def test_newtype_override(self, registry):
        """Test that an explicit type ignores the wrapped member's schema."""
        descriptor = (
            newtype("Id", b.INTEGER)
            .explicit("string")
            .describe(format="uuid")
            .build()
        )
        assert derive(registry, descriptor) == {"type": "string", "format": "uuid"}

    def test_newtype_field_directives(self, registry):
        """Test that directives given on the wrapped field are honoured."""
        descriptor = newtype("Id", b.I64, explicit_type="string", format="uuid").build()
        assert derive(registry, descriptor) == {"type": "string", "format": "uuid"}

        descriptor = newtype("Note", b.STRING, description="a note", nullable=True).build()
        assert derive(registry, descriptor) == {
            "description": "a note",
            "nullable": True,
            "type": "string",
        }

    def test_newtype_container_wins_over_field(self, registry):
        """Test that container directives take precedence over field ones."""
        descriptor = (
            newtype("Code", b.STRING, description="field", example="x")
            .describe("container")
            .build()
        )
        assert derive(registry, descriptor) == {
            "description": "container",
            "type": "string",
            "example": "x",
        }

    def test_newtype_embeds_named_member(self, registry, user_descriptor):
        """Test that a newtype embeds (not links) its member."""
        descriptor = newtype("Author", user_descriptor).describe("Post author").build()
        data = derive(registry, descriptor)
        assert data["description"] == "Post author"
        assert data["required"] == ["id"]
        assert "User" not in registry

    def test_newtype_needs_one_field(self, registry):
        """Test that a newtype without exactly one field is rejected."""
        descriptor = TypeDescriptor(kind=ShapeKind.NEWTYPE, name="Empty")
        with pytest.raises(UnsupportedShapeError):
            registry.derive(descriptor)


class TestUnitEnums:
    """Test enums whose variants are all units."""

    def test_string_enum(self, registry):
        """Test the string enum with example = first variant."""
        descriptor = (
            enum("Colour")
            .describe("Paint colour")
            .variant("Red")
            .variant("Green")
            .unit("Secret", skip=True)
            .build()
        )
        assert derive(registry, descriptor) == {
            "description": "Paint colour",
            "type": "string",
            "enum": ["Red", "Green"],
            "example": "Red",
        }

    def test_all_variants_skipped(self, registry):
        """Test that an enum with every unit variant skipped stays a string."""
        descriptor = enum("Hidden").unit("A", skip=True).unit("B", skip=True).build()
        assert derive(registry, descriptor) == {"type": "string", "enum": []}

    def test_rename_all_variants(self, registry):
        """Test that rename_all applies to variant names."""
        descriptor = (
            enum("SimpleEnum")
            .rename_all("camelCase")
            .variant("Test")
            .variant("AnotherOne")
            .build()
        )
        assert derive(registry, descriptor)["enum"] == ["test", "anotherOne"]

    def test_tagged_unit_enum_is_still_a_string(self, registry):
        """Test that a tag on an all-unit enum keeps the string form."""
        descriptor = enum("Mode").tagged("kind").variant("On").variant("Off").build()
        assert derive(registry, descriptor)["enum"] == ["On", "Off"]

    def test_numeric_discriminants(self, registry):
        """Test the integer one-of with implicit continuation."""
        descriptor = (
            enum("LedgerAccountId")
            .unit("IssuedLoans", discriminant=5586)
            .unit("Pledge", discriminant="008")
            .unit("Other")
            .build()
        )
        assert derive(registry, descriptor) == {
            "oneOf": [
                {"description": "`IssuedLoans` variant", "type": "integer", "example": "5586"},
                {"description": "`Pledge` variant", "type": "integer", "example": "008"},
                {"description": "`Other` variant", "type": "integer", "example": "9"},
            ]
        }

    def test_untagged_unit_enum_rejected(self, registry):
        """Test that all-unit untagged enums have no schema."""
        descriptor = enum("Nothing").untagged().variant("A").variant("B").build()
        with pytest.raises(UnsupportedShapeError):
            registry.derive(descriptor)


class TestExternalEnums:
    """Test externally tagged enums."""

    def test_unit_and_newtype(self, registry):
        """Test the externally tagged scenario."""
        descriptor = enum("Event").variant("Unit").variant("Wrapped", b.STRING).build()
        assert derive(registry, descriptor) == {
            "type": "object",
            "additionalProperties": {
                "oneOf": [
                    {"type": "string", "enum": ["Unit"], "example": "Unit"},
                    {"type": "string"},
                ]
            },
        }

    def test_tuple_and_record_variants(self, registry):
        """Test multi-field variants."""
        descriptor = (
            enum("Message")
            .describe("Message")
            .variant("Move", (b.I32, b.I32))
            .variant("Write", {"text": b.STRING}, description="Write text")
            .build()
        )
        data = derive(registry, descriptor)
        assert data["description"] == "Message"
        one_of = data["additionalProperties"]["oneOf"]
        assert data["additionalProperties"]["description"] == "Message"
        assert one_of[0] == {
            "type": "array",
            "items": {
                "oneOf": [
                    {"type": "integer", "format": "int32"},
                    {"type": "integer", "format": "int32"},
                ]
            },
        }
        assert one_of[1] == {
            "description": "Write text",
            "type": "object",
            "properties": {"text": {"type": "string"}},
            "required": ["text"],
        }

    def test_newtype_variant_link_and_inline(self, registry, user_descriptor):
        """Test that variant inline requests embed the member."""
        descriptor = (
            enum("Actor")
            .variant("Known", user_descriptor)
            .variant("Copy", user_descriptor, inline=True)
            .build()
        )
        one_of = derive(registry, descriptor)["additionalProperties"]["oneOf"]
        assert one_of[0] == {"$ref": "#/components/schemas/User"}
        assert one_of[1]["type"] == "object"

    def test_newtype_variant_params(self, registry):
        """Test that variant params reach a newtype member."""
        descriptor = (
            enum("Contact")
            .variant("Mail", b.STRING, description="Mail address", format="email")
            .variant("Phone", b.STRING)
            .build()
        )
        one_of = derive(registry, descriptor)["additionalProperties"]["oneOf"]
        assert one_of[0] == {"description": "Mail address", "type": "string", "format": "email"}


class TestUntaggedEnums:
    """Test untagged enums."""

    def test_variant_shapes(self, registry):
        """Test newtype and record alternatives."""
        descriptor = (
            enum("Value")
            .untagged()
            .variant("Text", b.STRING)
            .variant("Pair", {"a": b.I32}, description="Pair")
            .build()
        )
        assert derive(registry, descriptor) == {
            "oneOf": [
                {"type": "string"},
                {
                    "description": "Pair",
                    "type": "object",
                    "properties": {"a": {"type": "integer", "format": "int32"}},
                    "required": ["a"],
                },
            ]
        }

    def test_unit_variant_rejected(self, registry):
        """Test that a unit variant in a mixed untagged enum raises."""
        descriptor = enum("Mixed").untagged().variant("None").variant("Some", b.STRING).build()
        with pytest.raises(UnsupportedShapeError):
            registry.derive(descriptor)


class TestInternalEnums:
    """Test internally tagged enums."""

    def test_tag_merged_into_variants(self, registry, user_descriptor):
        """Test record and newtype variants receive the tag property."""
        descriptor = (
            enum("Shape")
            .tagged("type")
            .variant("Circle", {"radius": b.F64})
            .variant("Owner", user_descriptor)
            .build()
        )
        one_of = derive(registry, descriptor)["oneOf"]
        tag = {
            "description": "Shape type variant",
            "type": "string",
            "enum": ["Circle"],
            "example": "Circle",
        }
        assert one_of[0] == {
            "type": "object",
            "properties": {
                "radius": {"type": "number", "format": "double"},
                "type": tag,
            },
            "required": ["radius", "type"],
        }
        assert one_of[1]["properties"]["type"]["enum"] == ["Owner"]
        assert one_of[1]["required"] == ["id", "type"]
        assert "User" not in registry

    def test_merge_failure_logged(self, registry, caplog):
        """Test that a non-object variant is kept and the failure logged."""
        descriptor = enum("Payload").tagged("kind").variant("Text", b.STRING).build()
        with caplog.at_level(logging.WARNING, logger="wire_schema.schema.engine"):
            data = derive(registry, descriptor)
        assert data == {"oneOf": [{"type": "string"}]}
        assert "Payload::Text" in caplog.text

    def test_tag_collision_logged(self, registry, caplog):
        """Test that a field named like the tag cannot take the tag."""
        descriptor = enum("Item").tagged("type").variant("Rec", {"type": b.I32}).build()
        with caplog.at_level(logging.WARNING, logger="wire_schema.schema.engine"):
            data = derive(registry, descriptor)
        assert data["oneOf"][0]["properties"]["type"] == {"type": "integer", "format": "int32"}
        assert "'type'" in caplog.text

    def test_strict_merge_raises(self):
        """Test that strict_merge surfaces merge failures."""
        registry = ComponentRegistry(GeneratorConfig(strict_merge=True))
        descriptor = enum("Payload").tagged("kind").variant("Text", b.STRING).build()
        with pytest.raises(UnsupportedShapeError):
            registry.derive(descriptor)

    def test_tuple_variant_rejected(self, registry):
        """Test that tuple variants cannot be internally tagged."""
        descriptor = enum("Bad").tagged("t").variant("Pair", (b.I32, b.I32)).build()
        with pytest.raises(UnsupportedShapeError):
            registry.derive(descriptor)


class TestAdjacentEnums:
    """Test adjacently tagged enums."""

    def test_tag_and_content(self, registry):
        """Test the adjacently tagged scenario."""
        descriptor = (
            enum("Number")
            .tagged("type", "value")
            .variant("A", b.INTEGER)
            .variant("B", b.INTEGER)
            .build()
        )
        assert derive(registry, descriptor) == {
            "type": "object",
            "properties": {
                "type": {
                    "description": "Number type variant",
                    "type": "string",
                    "enum": ["A", "B"],
                    "example": "A",
                },
                "value": {"oneOf": [{"type": "integer"}, {"type": "integer"}]},
            },
            "required": ["type", "value"],
        }

    def test_unit_variant_rejected(self, registry):
        """Test that a unit variant in a mixed adjacent enum raises."""
        descriptor = enum("Bad").tagged("t", "c").variant("A").variant("B", b.STRING).build()
        with pytest.raises(UnsupportedShapeError):
            registry.derive(descriptor)


class TestDispatch:
    """Test derive_schema() entry point."""

    def test_derive_schema_does_not_store_root(self, registry, user_descriptor):
        """Test that deriving a root does not register it."""
        model = derive_schema(user_descriptor, registry)
        assert model.as_object is not None
        assert "User" not in registry

    def test_primitive_without_template(self, registry):
        """Test that a primitive must carry a schema template."""
        with pytest.raises(UnsupportedShapeError):
            registry.derive(TypeDescriptor(kind=ShapeKind.PRIMITIVE, name="odd"))

    def test_array_without_inner(self, registry):
        """Test that an array must have an item type."""
        with pytest.raises(UnsupportedShapeError):
            registry.derive(TypeDescriptor(kind=ShapeKind.ARRAY))

    def test_links_stay_links(self, registry, user_descriptor):
        """Test that links inside derived models are not resolved."""
        holder = record("Holder").field("users", b.array_of(user_descriptor)).build()
        items = registry.derive(holder).as_object.properties["users"].model.type_description.items
        assert items == Link("User")
