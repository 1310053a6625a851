# File: nestgen/models.py
"""
nestgen - Core Data Models
===========================
Pydantic V2 models representing the parsed data-model schema and the
generation configuration. These models are the single source of truth for
the pipeline: Schema Parsing → Template Rendering → Export.

Everything here lives for one generation pass only; nothing is persisted
beyond the written output files.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
)

from nestgen.utils import lower_first, to_kebab_case, to_plural

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.models")

# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SHARED_CONFIG: ConfigDict = ConfigDict(
    strict=False,
    populate_by_name=True,
    validate_assignment=True,
    frozen=False,
    extra="forbid",
)

DEFAULT_EXCLUDED_FIELDS: List[str] = ["id", "createdAt", "updatedAt"]


# ---------------------------------------------------------------------------
# Schema primitives
# ---------------------------------------------------------------------------


class EnumDefinition(BaseModel):
    """A named ``enum Name { ... }`` block and its values, in source order."""

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Enum type name.")
    values: List[str] = Field(
        default_factory=list, description="Enum values in declaration order."
    )

    def __repr__(self) -> str:
        return f"<Enum {self.name} ({len(self.values)} values)>"


class FieldInfo(BaseModel):
    """
    One classified field declaration of a model.

    ``validators`` holds decorator expressions without the leading ``@``
    (``IsOptional()``, ``IsEnum(Role)``), in emission order. ``exposure``
    holds the API documentation decorator expression; templates leave it
    out when swagger output is disabled for the run.
    """

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Field name.")
    raw_type: str = Field(..., min_length=1, description="Type token as written.")
    base_type: str = Field(
        ..., min_length=1, description="Type token without '?' and '[]'."
    )
    is_optional: bool = Field(default=False, description="Declared with '?'.")
    is_array: bool = Field(default=False, description="Declared with '[]'.")
    is_enum: bool = Field(
        default=False, description="Base type names a declared enum."
    )
    ts_type: str = Field(..., min_length=1, description="TypeScript type.")
    validators: List[str] = Field(
        default_factory=list, description="class-validator decorators."
    )
    exposure: str = Field(..., min_length=1, description="Swagger decorator.")

    @computed_field  # type: ignore[misc]
    @property
    def validator_names(self) -> List[str]:
        """Decorator names without their argument lists (for imports)."""
        return [v.split("(", 1)[0] for v in self.validators]

    @computed_field  # type: ignore[misc]
    @property
    def exposure_name(self) -> str:
        return self.exposure.split("(", 1)[0]

    def __repr__(self) -> str:
        return f"<Field {self.name}: {self.ts_type}{'?' if self.is_optional else ''}>"


class ModelDefinition(BaseModel):
    """
    A named ``model Name { ... }`` block.

    Field order is the declaration order and is kept in every artifact.
    Field name uniqueness is not checked.
    """

    model_config = _SHARED_CONFIG

    name: str = Field(..., min_length=1, description="Model name.")
    fields: List[FieldInfo] = Field(
        default_factory=list, description="Fields in declaration order."
    )

    @computed_field  # type: ignore[misc]
    @property
    def folder_name(self) -> str:
        """Lowercased model name; used for the output folder and file stems."""
        return self.name.lower()

    @computed_field  # type: ignore[misc]
    @property
    def handle(self) -> str:
        """Prisma client delegate name (``prisma.user``)."""
        return lower_first(self.name)

    @computed_field  # type: ignore[misc]
    @property
    def route(self) -> str:
        """Controller route: kebab-case plural of the model name."""
        return to_kebab_case(to_plural(self.name))

    @computed_field  # type: ignore[misc]
    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> Optional[FieldInfo]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    @property
    def id_field(self) -> Optional[FieldInfo]:
        return self.get_field("id")

    def __repr__(self) -> str:
        return f"<Model {self.name} ({len(self.fields)} fields)>"


class SchemaDefinition(BaseModel):
    """The parsed schema file: models and enums in source order."""

    model_config = _SHARED_CONFIG

    models: List[ModelDefinition] = Field(
        default_factory=list, description="All models in the schema."
    )
    enums: List[EnumDefinition] = Field(
        default_factory=list, description="All enums in the schema."
    )
    source_file: Optional[str] = Field(
        default=None, description="Path the schema was read from."
    )

    @property
    def model_names(self) -> List[str]:
        return [m.name for m in self.models]

    @property
    def enum_names(self) -> List[str]:
        return [e.name for e in self.enums]

    def get_model(self, name: str) -> Optional[ModelDefinition]:
        for model in self.models:
            if model.name == name:
                return model
        return None

    def select(
        self,
        names: Optional[Sequence[str]] = None,
        *,
        first_only: bool = False,
    ) -> List[ModelDefinition]:
        """
        Pick the models a run should generate.

        With *names*, keep models whose name matches exactly, in schema order.
        Without, keep all models, or only the first one if *first_only*.
        """
        if names:
            wanted = set(names)
            return [m for m in self.models if m.name in wanted]
        if first_only:
            return self.models[:1]
        return list(self.models)

    def __repr__(self) -> str:
        return (
            f"<SchemaDefinition {len(self.models)} models, "
            f"{len(self.enums)} enums>"
        )


# ---------------------------------------------------------------------------
# Generation configuration
# ---------------------------------------------------------------------------


class GenerationConfig(BaseModel):
    """
    Settings that control one generation run.

    Loaded from defaults, then an optional YAML/JSON config file, then
    command-line overrides.
    """

    model_config = _SHARED_CONFIG

    # -- Input / output -----------------------------------------------------
    schema_path: str = Field(
        default="prisma/schema.prisma", description="Schema file to read."
    )
    output_dir: str = Field(
        default="generated", description="Root directory for generated code."
    )
    file_extension: str = Field(
        default="ts", min_length=1, description="Extension of emitted files."
    )

    # -- Selection ----------------------------------------------------------
    first_model_only: bool = Field(
        default=False,
        description="When no model names are given, generate only the first model.",
    )

    # -- DTO shape ----------------------------------------------------------
    excluded_fields: List[str] = Field(
        default_factory=lambda: list(DEFAULT_EXCLUDED_FIELDS),
        description="Field names left out of the create-DTO.",
    )

    # -- Decorators ---------------------------------------------------------
    enable_swagger: bool = Field(
        default=True, description="Emit @nestjs/swagger decorators."
    )
    enable_guards: bool = Field(
        default=True, description="Guard controllers with an auth guard."
    )
    guard_name: str = Field(default="JwtAuthGuard", min_length=1)
    guard_import: str = Field(default="../auth/jwt-auth.guard", min_length=1)

    # -- Import paths -------------------------------------------------------
    prisma_service_import: str = Field(
        default="../prisma/prisma.service", min_length=1
    )
    enum_import: str = Field(default="@prisma/client", min_length=1)
    base_query_import: str = Field(
        default="../../common/dto/base-query.dto", min_length=1
    )

    # -- Extras -------------------------------------------------------------
    generate_common: bool = Field(
        default=True, description="Emit the shared BaseQueryDto once per run."
    )
    default_page_size: int = Field(default=10, ge=1, le=1000)
    indent_size: int = Field(default=2, ge=2, le=8)
    write_manifest: bool = Field(
        default=False, description="Write a checksum manifest next to the output."
    )

    @field_validator("file_extension")
    @classmethod
    def _strip_leading_dot(cls, v: str) -> str:
        stripped: str = v.lstrip(".")
        if not stripped:
            raise ValueError("file_extension must not be empty.")
        return stripped

    @field_validator("excluded_fields")
    @classmethod
    def _dedupe_exclusions(cls, v: List[str]) -> List[str]:
        return list(dict.fromkeys(v))


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "DEFAULT_EXCLUDED_FIELDS",
    "EnumDefinition",
    "FieldInfo",
    "ModelDefinition",
    "SchemaDefinition",
    "GenerationConfig",
]

logger.debug("nestgen.models loaded - %d public symbols.", len(__all__))
