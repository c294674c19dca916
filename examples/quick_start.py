"""Quick Start Example - Describing Types and Building a Document.

This example demonstrates the basic usage of wire-schema: describing a few
types, deriving their schemas and assembling an OpenAPI document.
"""

import logging

from wire_schema import (
    STRICT_CONFIG,
    ComponentRegistry,
    DocumentBuilder,
    HttpSecurityScheme,
    WireSchemaError,
    enum,
    newtype,
    record,
)
from wire_schema.core import builtins as b


def describe_types():
    """Example: Registering descriptors."""
    pet_id = newtype("PetId", b.I64).explicit("string").describe(format="uuid").build()

    kind = (
        enum("PetKind")
        .describe("Kind of pet")
        .rename_all("lowercase")
        .variant("Cat")
        .variant("Dog")
        .build()
    )

    pet = (
        record("Pet")
        .describe("A pet in the store")
        .rename_all("camelCase")
        .field("id", pet_id)
        .field("kind", kind)
        .field("display_name", b.STRING, example="Rex")
        .field("tags", b.array_of(b.STRING), optional=True)
        .build()
    )

    event = (
        enum("PetEvent")
        .tagged("type", "payload")
        .variant("Added", pet)
        .variant("Removed", pet_id)
        .variant("Renamed", {"old_name": b.STRING, "new_name": b.STRING}, rename_all="camelCase")
        .build()
    )
    return pet_id, pet, event


def example_registry():
    """Example: Deriving schemas into a components table."""
    print("=== Registry Example ===")

    _, pet, event = describe_types()
    registry = ComponentRegistry()
    print(f"Pet reference: {registry.mention(None, pet).to_dict()}")
    print(f"Event reference: {registry.mention(None, event).to_dict()}")
    print(f"Stored schemas: {registry.names()}")
    print(f"Verification: {registry.verify().to_dict()}")


def example_document():
    """Example: Assembling an OpenAPI document."""
    print("\n=== Document Example ===")

    pet_id, pet, event = describe_types()

    api = DocumentBuilder("Pet Store", "1.0.0", description="Example pet store API")
    api.tag("pets", "Pet operations").server("https://petstore.example.com/v1")
    api.security_scheme("bearer", HttpSecurityScheme.bearer("JWT"))

    pets = api.path("pets")
    (
        pets.operation("get")
        .summary("List pets")
        .tags("pets")
        .query("limit", b.U32, "Maximum number of pets to return")
        .response(200, "All pets", b.array_of(pet))
    )
    (
        pets.operation("post")
        .summary("Add a pet")
        .tags("pets")
        .security("bearer")
        .body(pet, "Pet to add")
        .response(201, "Created", pet)
    )
    (
        api.path("pets", ("petId", pet_id))
        .operation("delete")
        .summary("Remove a pet")
        .tags("pets")
        .response(204, "Removed")
    )
    api.schema(event)

    document = api.build()
    print(document.to_yaml())


def example_strict():
    """Example: Strict configuration turning warnings into errors."""
    print("\n=== Strict Config Example ===")

    payload = enum("Payload").tagged("kind").variant("Text", b.STRING).build()
    registry = ComponentRegistry(STRICT_CONFIG)
    try:
        registry.mention(None, payload)
    except WireSchemaError as e:
        print(f"Rejected: {e}")


def main():
    """Run all examples."""
    logging.basicConfig(level=logging.INFO)
    print("wire-schema Quick Start Examples")
    print("=" * 50)

    example_registry()
    example_document()
    example_strict()

    print("\n" + "=" * 50)
    print("Examples completed!")


if __name__ == "__main__":
    main()
