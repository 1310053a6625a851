"""
tests/conftest.py
Shared fixtures for the nestgen test suite.

No external mocking libraries are used; real file I/O is performed
inside temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import logging
import pathlib
import textwrap
from typing import Iterator

import pytest

from nestgen.models import GenerationConfig, ModelDefinition, SchemaDefinition
from nestgen.parser import parse_schema
from nestgen.templates import TemplateGenerator


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

ROOT_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent.parent
SCHEMA_EXAMPLE_PATH: pathlib.Path = ROOT_DIR / "schema_example.prisma"


# ---------------------------------------------------------------------------
# Logging isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_nestgen_logging() -> Iterator[None]:
    """Undo what the CLI does to logging so caplog keeps working."""
    yield
    logging.disable(logging.NOTSET)
    root = logging.getLogger("nestgen")
    root.handlers.clear()
    root.propagate = True
    root.setLevel(logging.NOTSET)


# ---------------------------------------------------------------------------
# Schema text fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def example_schema_text() -> str:
    """The reference schema_example.prisma, read once per session."""
    assert SCHEMA_EXAMPLE_PATH.exists(), (
        f"Reference schema not found at {SCHEMA_EXAMPLE_PATH}. "
        "Make sure schema_example.prisma is in the project root."
    )
    return SCHEMA_EXAMPLE_PATH.read_text(encoding="utf-8")


@pytest.fixture()
def minimal_schema_text() -> str:
    """Smallest useful schema: one model with an id and two strings."""
    return textwrap.dedent(
        """\
        model User {
          id    Int    @id @default(autoincrement())
          name  String
          email String @unique
        }
        """
    )


@pytest.fixture()
def schema_path(example_schema_text: str, tmp_path: pathlib.Path) -> pathlib.Path:
    """Copy of the reference schema inside tmp_path."""
    path = tmp_path / "schema.prisma"
    path.write_text(example_schema_text, encoding="utf-8")
    return path


@pytest.fixture()
def output_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    return tmp_path / "out"


# ---------------------------------------------------------------------------
# Parsed model fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def example_schema(example_schema_text: str) -> SchemaDefinition:
    return parse_schema(example_schema_text, source_file=str(SCHEMA_EXAMPLE_PATH))


@pytest.fixture()
def user_model(example_schema: SchemaDefinition) -> ModelDefinition:
    model = example_schema.get_model("User")
    assert model is not None
    return model


@pytest.fixture()
def post_model(example_schema: SchemaDefinition) -> ModelDefinition:
    model = example_schema.get_model("Post")
    assert model is not None
    return model


@pytest.fixture()
def minimal_user(minimal_schema_text: str) -> ModelDefinition:
    return parse_schema(minimal_schema_text).models[0]


# ---------------------------------------------------------------------------
# Config / generator fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def config() -> GenerationConfig:
    return GenerationConfig()


@pytest.fixture()
def templates(config: GenerationConfig) -> TemplateGenerator:
    return TemplateGenerator(config)
