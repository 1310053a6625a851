# File: nestgen/parser.py
"""
nestgen - Schema Parser
========================

Turns Prisma-style schema text into a ``SchemaDefinition``::

    read_schema(path) → extract_models / extract_enums → classify_field

Parsing is regular-expression based. A block runs from ``model Name {`` to
the first ``}``; nested braces inside a block are not supported. Data-shape
problems never raise: blank lines, ``//`` comments and lines that do not
yield a name and a type are dropped, and unknown type tokens fall back to an
open object. Those decisions are logged at DEBUG level only.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from nestgen.models import (
    EnumDefinition,
    FieldInfo,
    ModelDefinition,
    SchemaDefinition,
)
from nestgen.utils import is_identifier, read_file

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.parser")

# ---------------------------------------------------------------------------
# Patterns & tables
# ---------------------------------------------------------------------------

_MODEL_BLOCK_RE: re.Pattern[str] = re.compile(r"\bmodel\s+(\w+)\s*\{([^}]*)\}")
_ENUM_BLOCK_RE: re.Pattern[str] = re.compile(r"\benum\s+(\w+)\s*\{([^}]*)\}")

COMMENT_MARKER: str = "//"

OPEN_OBJECT_TYPE: str = "Record<string, any>"

# Schema scalar → (TypeScript type, class-validator decorator)
TYPE_TABLE: Dict[str, Tuple[str, str]] = {
    "String": ("string", "IsString"),
    "Int": ("number", "IsInt"),
    "Boolean": ("boolean", "IsBoolean"),
    "DateTime": ("Date", "IsDate"),
    "Float": ("number", "IsNumber"),
    "Decimal": ("number", "IsNumber"),
    "Json": (OPEN_OBJECT_TYPE, "IsObject"),
}

FALLBACK_TYPE: Tuple[str, str] = (OPEN_OBJECT_TYPE, "IsObject")


# ---------------------------------------------------------------------------
# Schema Reader
# ---------------------------------------------------------------------------


def read_schema(path: Union[str, Path]) -> str:
    """
    Load raw schema text.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        OSError: Any other read failure.
    """
    schema_path: Path = Path(path)
    text: str = read_file(schema_path)
    logger.info("Read schema %s (%d chars).", schema_path, len(text))
    return text


# ---------------------------------------------------------------------------
# Model / Enum Extractor
# ---------------------------------------------------------------------------


def extract_models(text: str) -> List[Tuple[str, str]]:
    """Return ``(name, body)`` for every ``model`` block, in source order."""
    return [(m.group(1), m.group(2)) for m in _MODEL_BLOCK_RE.finditer(text)]


def extract_enums(text: str) -> List[Tuple[str, str]]:
    """Return ``(name, body)`` for every ``enum`` block, in source order."""
    return [(m.group(1), m.group(2)) for m in _ENUM_BLOCK_RE.finditer(text)]


def iter_body_lines(body: str) -> Iterator[str]:
    """Yield trimmed block lines, skipping blanks and comment lines."""
    for raw_line in body.split("\n"):
        line: str = raw_line.strip()
        if not line or line.startswith(COMMENT_MARKER):
            continue
        yield line


def parse_enum(name: str, body: str) -> EnumDefinition:
    """
    Build an ``EnumDefinition``; each value is the first token of a line.

    Block attributes (``@@map("roles")``) are not values and are dropped.
    """
    values: List[str] = []
    for line in iter_body_lines(body):
        token: str = line.split()[0]
        if not is_identifier(token):
            logger.debug("Dropping non-value enum line: %r", line)
            continue
        values.append(token)
    return EnumDefinition(name=name, values=values)


# ---------------------------------------------------------------------------
# Field Classifier
# ---------------------------------------------------------------------------


def resolve_type(base_type: str) -> Tuple[str, str]:
    """Map a scalar token to ``(ts_type, validator)``; unknown → open object."""
    resolved: Optional[Tuple[str, str]] = TYPE_TABLE.get(base_type)
    if resolved is None:
        logger.debug("Unknown type token '%s' - using open object.", base_type)
        return FALLBACK_TYPE
    return resolved


def _exposure_for(
    is_optional: bool,
    is_array: bool,
    enum_name: Optional[str],
) -> str:
    decorator: str = "ApiPropertyOptional" if is_optional else "ApiProperty"
    options: List[str] = []
    if enum_name is not None:
        options.append(f"enum: {enum_name}")
    if is_array:
        options.append("isArray: true")
    if options:
        return f"{decorator}({{ {', '.join(options)} }})"
    return f"{decorator}()"


def classify_field(
    line: str,
    enum_names: Iterable[str] = (),
) -> Optional[FieldInfo]:
    """
    Classify one trimmed field declaration (``name Type[?][]``).

    The first two whitespace-separated tokens are the name and the raw type;
    anything after them (Prisma ``@`` attributes) is ignored. Returns
    ``None`` for lines that don't yield both tokens or whose name is not an
    identifier (``@@index([...])`` and similar block attributes).
    """
    tokens: List[str] = line.split()
    if len(tokens) < 2:
        logger.debug("Dropping field line without a type: %r", line)
        return None

    name, raw_type = tokens[0], tokens[1]
    if not is_identifier(name):
        logger.debug("Dropping non-field line: %r", line)
        return None

    # Markers are read off the raw token: `Float[]?` is optional, not a list
    is_optional: bool = "?" in raw_type
    is_array: bool = raw_type.endswith("[]")
    base_type: str = raw_type.replace("?", "").replace("[]", "")
    if not base_type:
        logger.debug("Dropping field line with empty type: %r", line)
        return None

    is_enum: bool = base_type in frozenset(enum_names)

    validators: List[str] = []
    if is_optional:
        validators.append("IsOptional()")

    if is_enum:
        ts_type: str = base_type
        validators.append(f"IsEnum({base_type})")
    else:
        ts_type, check = resolve_type(base_type)
        validators.append(f"{check}()")

    if is_array:
        ts_type = f"{ts_type}[]"
        validators.append("IsArray()")

    return FieldInfo(
        name=name,
        raw_type=raw_type,
        base_type=base_type,
        is_optional=is_optional,
        is_array=is_array,
        is_enum=is_enum,
        ts_type=ts_type,
        validators=validators,
        exposure=_exposure_for(is_optional, is_array, base_type if is_enum else None),
    )


def parse_model(
    name: str,
    body: str,
    enum_names: Iterable[str] = (),
) -> ModelDefinition:
    """Build a ``ModelDefinition`` from one extracted block, keeping field order."""
    enum_set = frozenset(enum_names)
    fields: List[FieldInfo] = []
    for line in iter_body_lines(body):
        field_info: Optional[FieldInfo] = classify_field(line, enum_set)
        if field_info is not None:
            fields.append(field_info)
    return ModelDefinition(name=name, fields=fields)


# ---------------------------------------------------------------------------
# Whole-schema entry points
# ---------------------------------------------------------------------------


def parse_schema(text: str, source_file: Optional[str] = None) -> SchemaDefinition:
    """
    Parse schema text into a ``SchemaDefinition``.

    Enums are extracted first so enum-typed fields resolve regardless of
    where the enum block appears in the file.
    """
    enums: List[EnumDefinition] = [
        parse_enum(name, body) for name, body in extract_enums(text)
    ]
    enum_names = frozenset(e.name for e in enums)
    models: List[ModelDefinition] = [
        parse_model(name, body, enum_names) for name, body in extract_models(text)
    ]
    logger.info(
        "Parsed schema: %d model(s), %d enum(s).", len(models), len(enums)
    )
    return SchemaDefinition(models=models, enums=enums, source_file=source_file)


def load_schema(path: Union[str, Path]) -> SchemaDefinition:
    """Read and parse a schema file. File-system errors propagate."""
    return parse_schema(read_schema(path), source_file=str(path))


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "COMMENT_MARKER",
    "OPEN_OBJECT_TYPE",
    "TYPE_TABLE",
    "FALLBACK_TYPE",
    "read_schema",
    "extract_models",
    "extract_enums",
    "iter_body_lines",
    "parse_enum",
    "resolve_type",
    "classify_field",
    "parse_model",
    "parse_schema",
    "load_schema",
]

logger.debug("nestgen.parser loaded.")
