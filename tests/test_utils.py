"""
tests/test_utils.py
Unit tests for nestgen.utils and the config / schema models.
"""

from __future__ import annotations

import pathlib

import pytest
from pydantic import ValidationError

from nestgen.models import GenerationConfig, ModelDefinition, SchemaDefinition
from nestgen.utils import (
    build_ts_import,
    build_ts_import_block,
    count_lines,
    is_identifier,
    lower_first,
    to_kebab_case,
    to_pascal_case,
    to_plural,
    write_file,
)


class TestNaming:
    """Tests for identifier conversions."""

    @pytest.mark.parametrize(
        "value, expected",
        [("user", "User"), ("order-item", "OrderItem"), ("blog_post", "BlogPost")],
    )
    def test_pascal_case(self, value: str, expected: str) -> None:
        assert to_pascal_case(value) == expected

    def test_kebab_case(self) -> None:
        assert to_kebab_case("OrderItems") == "order-items"

    def test_lower_first(self) -> None:
        assert lower_first("OrderItem") == "orderItem"
        assert lower_first("") == ""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("User", "Users"),
            ("Category", "Categories"),
            ("Box", "Boxes"),
            ("Person", "People"),
            ("Day", "Days"),
        ],
    )
    def test_plural(self, value: str, expected: str) -> None:
        assert to_plural(value) == expected

    def test_is_identifier(self) -> None:
        assert is_identifier("createdAt")
        assert not is_identifier("@@index")
        assert not is_identifier("1st")


class TestTypeScriptImports:
    def test_dedupes_in_order(self) -> None:
        assert build_ts_import(["B", "A", "B"], "mod") == "import { B, A } from 'mod';"

    def test_block_skips_empty(self) -> None:
        assert build_ts_import_block({"a": ["X"], "b": [], "c": ["Y"]}) == [
            "import { X } from 'a';",
            "import { Y } from 'c';",
        ]


class TestFileHelpers:
    def test_write_creates_parents_and_overwrites(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "a" / "b" / "file.ts"
        write_file(target, "first\n")
        written = write_file(target, "second\n")
        assert target.read_text() == "second\n"
        assert written == len("second\n")
        assert [p.name for p in target.parent.iterdir()] == ["file.ts"]

    def test_count_lines(self) -> None:
        assert count_lines("") == 0
        assert count_lines("a\nb\n") == 2
        assert count_lines("a\nb") == 2


class TestModels:
    """Tests for pydantic model behaviour."""

    def test_extension_dot_stripped(self) -> None:
        assert GenerationConfig(file_extension=".tsx").file_extension == "tsx"

    def test_empty_extension_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GenerationConfig(file_extension=".")

    def test_exclusions_deduped(self) -> None:
        config = GenerationConfig(excluded_fields=["id", "id", "email"])
        assert config.excluded_fields == ["id", "email"]

    def test_model_naming(self) -> None:
        model = ModelDefinition(name="OrderItem")
        assert model.folder_name == "orderitem"
        assert model.handle == "orderItem"
        assert model.route == "order-items"

    def test_select(self) -> None:
        schema = SchemaDefinition(
            models=[ModelDefinition(name=n) for n in ("A", "B", "C")]
        )
        assert [m.name for m in schema.select()] == ["A", "B", "C"]
        assert [m.name for m in schema.select(first_only=True)] == ["A"]
        assert [m.name for m in schema.select(["C", "A"])] == ["A", "C"]
        assert schema.select(["Z"]) == []
