"""Test configuration for wire-schema."""
import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest
from wire_schema import ComponentRegistry, DocumentBuilder, STRICT_CONFIG, record
from wire_schema.core import builtins as b


@pytest.fixture
def registry():
    """Empty registry with the default configuration."""
    return ComponentRegistry()


@pytest.fixture
def strict_registry():
    """Empty registry that turns every questionable construction into an error."""
    return ComponentRegistry(STRICT_CONFIG)


@pytest.fixture
def user_descriptor():
    """Record with a required id and an optional note."""
    return (
        record("User")
        .field("id", b.STRING)
        .field("note", b.STRING, optional=True)
        .build()
    )


@pytest.fixture
def api():
    """Document builder for a small API."""
    return DocumentBuilder("Test API", "1.0.0", description="API under test")
