# File: nestgen/templates.py
"""
nestgen - Code Template Engine
===============================
Turns ``ModelDefinition`` objects into NestJS source files:

    1. create-DTO        (class-validator + swagger decorators per field)
    2. update-DTO        (``PartialType`` of the create-DTO)
    3. search-query DTO  (extends the shared ``BaseQueryDto``)
    4. entity            (swagger decorators only)
    5. service           (Prisma-backed CRUD with paginated listing)
    6. controller        (five endpoints bound to the service)
    7. module            (controller + service wiring)

Each ``generate_*`` method is a pure function of the model and the config:
no timestamps, no random values and a fixed ordering, so two runs over the
same schema produce identical text. Output is assembled as ``List[str]``
joined with ``"\\n"``.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from nestgen.models import FieldInfo, GenerationConfig, ModelDefinition
from nestgen.utils import build_ts_import_block, count_lines

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("nestgen.templates")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SWAGGER_MODULE: str = "@nestjs/swagger"
VALIDATOR_MODULE: str = "class-validator"
COMMON_MODULE: str = "@nestjs/common"
MAPPED_TYPES_MODULE: str = "@nestjs/mapped-types"

# Import order for class-validator names; keeps import lines stable.
_VALIDATOR_ORDER: Tuple[str, ...] = (
    "IsOptional",
    "IsString",
    "IsInt",
    "IsBoolean",
    "IsDate",
    "IsNumber",
    "IsObject",
    "IsEnum",
    "IsArray",
)

# Artifact kind → relative path pattern ({name} = lowercased model name)
ARTIFACT_PATHS: Dict[str, str] = {
    "create_dto": "{name}/dto/create-{name}.dto.{ext}",
    "update_dto": "{name}/dto/update-{name}.dto.{ext}",
    "search_dto": "{name}/dto/search-{name}.dto.{ext}",
    "entity": "{name}/entities/{name}.entity.{ext}",
    "service": "{name}/{name}.service.{ext}",
    "controller": "{name}/{name}.controller.{ext}",
    "module": "{name}/{name}.module.{ext}",
}

COMMON_BASE_QUERY_PATH: str = "common/dto/base-query.dto.{ext}"


def _ordered_validators(names: Sequence[str]) -> List[str]:
    present = set(names)
    return [n for n in _VALIDATOR_ORDER if n in present]


def _ordered_exposures(fields: Sequence[FieldInfo]) -> List[str]:
    present = {f.exposure_name for f in fields}
    return [n for n in ("ApiProperty", "ApiPropertyOptional") if n in present]


def _enum_imports(fields: Sequence[FieldInfo]) -> List[str]:
    return list(dict.fromkeys(f.base_type for f in fields if f.is_enum))


# ---------------------------------------------------------------------------
# TemplateGenerator class
# ---------------------------------------------------------------------------


class TemplateGenerator:
    """
    Stateless NestJS code-generation engine.

    Each ``generate_*`` method returns complete file content for one model.
    ``generate_all_for_model`` maps artifact kinds to relative paths.
    """

    def __init__(self, config: GenerationConfig) -> None:
        self._config: GenerationConfig = config
        self._indent: str = " " * config.indent_size
        self._double_indent: str = self._indent * 2
        self._triple_indent: str = self._indent * 3
        self._renderers: Dict[str, Callable[[ModelDefinition], str]] = {
            "create_dto": self.generate_create_dto,
            "update_dto": self.generate_update_dto,
            "search_dto": self.generate_search_dto,
            "entity": self.generate_entity,
            "service": self.generate_service,
            "controller": self.generate_controller,
            "module": self.generate_module,
        }
        logger.debug(
            "TemplateGenerator initialised (swagger=%s, guards=%s, ext=%s).",
            config.enable_swagger,
            config.enable_guards,
            config.file_extension,
        )

    # -----------------------------------------------------------------
    # Naming helpers
    # -----------------------------------------------------------------

    @staticmethod
    def create_dto_name(model: ModelDefinition) -> str:
        return f"Create{model.name}Dto"

    @staticmethod
    def update_dto_name(model: ModelDefinition) -> str:
        return f"Update{model.name}Dto"

    @staticmethod
    def search_dto_name(model: ModelDefinition) -> str:
        return f"Search{model.name}Dto"

    @staticmethod
    def entity_name(model: ModelDefinition) -> str:
        return f"{model.name}Entity"

    @staticmethod
    def service_name(model: ModelDefinition) -> str:
        return f"{model.name}Service"

    @staticmethod
    def controller_name(model: ModelDefinition) -> str:
        return f"{model.name}Controller"

    @staticmethod
    def module_name(model: ModelDefinition) -> str:
        return f"{model.name}Module"

    def artifact_path(self, kind: str, model: ModelDefinition) -> str:
        """Relative output path of one artifact kind for *model*."""
        return ARTIFACT_PATHS[kind].format(
            name=model.folder_name, ext=self._config.file_extension
        )

    def _id_signature(self, model: ModelDefinition) -> Tuple[str, bool]:
        """``(ts type, needs ParseIntPipe)`` for the ``:id`` route parameter."""
        id_field = model.id_field
        if id_field is not None and id_field.base_type == "Int":
            return "number", True
        return "string", False

    def _paged_response_doc(self, entity_name: str) -> List[str]:
        """``ApiOkResponse`` for ``findAll``: a page of entities plus ``meta``."""
        i1, i2, i3 = self._indent, self._double_indent, self._triple_indent
        i4, i5 = self._indent * 4, self._indent * 5
        lines: List[str] = [
            "ApiOkResponse({",
            f"{i1}schema: {{",
            f"{i2}properties: {{",
            f"{i3}data: {{ type: 'array', items: {{ $ref: getSchemaPath({entity_name}) }} }},",
            f"{i3}meta: {{",
            f"{i4}type: 'object',",
            f"{i4}properties: {{",
        ]
        lines.extend(
            f"{i5}{key}: {{ type: 'number' }},"
            for key in ("total", "page", "limit", "totalPages")
        )
        lines.extend([
            f"{i4}}},",
            f"{i3}}},",
            f"{i2}}},",
            f"{i1}}},",
            "})",
        ])
        return lines

    def dto_fields(self, model: ModelDefinition) -> List[FieldInfo]:
        """Fields that make it into the create-DTO (exclusion set removed)."""
        excluded = set(self._config.excluded_fields)
        return [f for f in model.fields if f.name not in excluded]

    # -----------------------------------------------------------------
    # Property rendering
    # -----------------------------------------------------------------

    def _property_lines(
        self,
        field_info: FieldInfo,
        *,
        with_validators: bool,
    ) -> List[str]:
        lines: List[str] = []
        if with_validators:
            lines.extend(f"{self._indent}@{v}" for v in field_info.validators)
        if self._config.enable_swagger:
            lines.append(f"{self._indent}@{field_info.exposure}")
        marker: str = "?" if field_info.is_optional else ""
        lines.append(f"{self._indent}{field_info.name}{marker}: {field_info.ts_type};")
        return lines

    def _class_body(
        self,
        fields: Sequence[FieldInfo],
        *,
        with_validators: bool,
    ) -> List[str]:
        lines: List[str] = []
        for index, field_info in enumerate(fields):
            if index:
                lines.append("")
            lines.extend(self._property_lines(field_info, with_validators=with_validators))
        return lines

    def _finish(self, lines: List[str]) -> str:
        return "\n".join(lines) + "\n"

    # ===================================================================
    # 1. create-DTO
    # ===================================================================

    def generate_create_dto(self, model: ModelDefinition) -> str:
        """Create-DTO: one validated property per non-excluded field."""
        fields: List[FieldInfo] = self.dto_fields(model)

        imports: Dict[str, List[str]] = {}
        if self._config.enable_swagger:
            imports[SWAGGER_MODULE] = _ordered_exposures(fields)
        imports[VALIDATOR_MODULE] = _ordered_validators(
            [name for f in fields for name in f.validator_names]
        )
        imports[self._config.enum_import] = _enum_imports(fields)

        lines: List[str] = build_ts_import_block(imports)
        if lines:
            lines.append("")
        lines.append(f"export class {self.create_dto_name(model)} {{")
        lines.extend(self._class_body(fields, with_validators=True))
        lines.append("}")
        return self._finish(lines)

    # ===================================================================
    # 2. update-DTO
    # ===================================================================

    def generate_update_dto(self, model: ModelDefinition) -> str:
        """Update-DTO: every create-DTO field made optional via ``PartialType``."""
        source: str = SWAGGER_MODULE if self._config.enable_swagger else MAPPED_TYPES_MODULE
        create_name: str = self.create_dto_name(model)
        lines: List[str] = [
            f"import {{ PartialType }} from '{source}';",
            f"import {{ {create_name} }} from './create-{model.folder_name}.dto';",
            "",
            f"export class {self.update_dto_name(model)} "
            f"extends PartialType({create_name}) {{}}",
        ]
        return self._finish(lines)

    # ===================================================================
    # 3. search-query DTO
    # ===================================================================

    def generate_search_dto(self, model: ModelDefinition) -> str:
        lines: List[str] = [
            f"import {{ BaseQueryDto }} from '{self._config.base_query_import}';",
            "",
            f"export class {self.search_dto_name(model)} extends BaseQueryDto {{}}",
        ]
        return self._finish(lines)

    # ===================================================================
    # 4. entity
    # ===================================================================

    def generate_entity(self, model: ModelDefinition) -> str:
        """Entity: every field, exposure decorator only."""
        fields: List[FieldInfo] = list(model.fields)

        imports: Dict[str, List[str]] = {}
        if self._config.enable_swagger:
            imports[SWAGGER_MODULE] = _ordered_exposures(fields)
        imports[self._config.enum_import] = _enum_imports(fields)

        lines: List[str] = build_ts_import_block(imports)
        if lines:
            lines.append("")
        lines.append(f"export class {self.entity_name(model)} {{")
        lines.extend(self._class_body(fields, with_validators=False))
        lines.append("}")
        return self._finish(lines)

    # ===================================================================
    # 5. service
    # ===================================================================

    def generate_service(self, model: ModelDefinition) -> str:
        """
        Service with create / findAll / findOne / update / remove.

        ``findAll`` pops ``page`` and ``limit`` off the query, turns every
        other defined key into an ``equals`` filter and wraps the page of
        rows with ``meta`` paging info.
        """
        i1, i2, i3, i4 = (
            self._indent,
            self._double_indent,
            self._triple_indent,
            self._indent * 4,
        )
        handle: str = f"this.prisma.{model.handle}"
        create_name: str = self.create_dto_name(model)
        update_name: str = self.update_dto_name(model)
        search_name: str = self.search_dto_name(model)
        create_arg: str = f"create{model.name}Dto"
        update_arg: str = f"update{model.name}Dto"
        id_type, _ = self._id_signature(model)
        folder: str = model.folder_name

        lines: List[str] = [
            "import { Injectable } from '@nestjs/common';",
            f"import {{ PrismaService }} from '{self._config.prisma_service_import}';",
            f"import {{ {create_name} }} from './dto/create-{folder}.dto';",
            f"import {{ {update_name} }} from './dto/update-{folder}.dto';",
            f"import {{ {search_name} }} from './dto/search-{folder}.dto';",
            "",
            "@Injectable()",
            f"export class {self.service_name(model)} {{",
            f"{i1}constructor(private readonly prisma: PrismaService) {{}}",
            "",
            f"{i1}create({create_arg}: {create_name}) {{",
            f"{i2}return {handle}.create({{ data: {create_arg} }});",
            f"{i1}}}",
            "",
            f"{i1}async findAll(query: {search_name}) {{",
            f"{i2}const {{ page = 1, limit = {self._config.default_page_size}, "
            f"...filters }} = query;",
            f"{i2}const where = Object.fromEntries(",
            f"{i3}Object.entries(filters)",
            f"{i4}.filter(([, value]) => value !== undefined)",
            f"{i4}.map(([key, value]) => [key, {{ equals: value }}]),",
            f"{i2});",
            f"{i2}const [data, total] = await this.prisma.$transaction([",
            f"{i3}{handle}.findMany({{",
            f"{i4}where,",
            f"{i4}skip: (page - 1) * limit,",
            f"{i4}take: limit,",
            f"{i3}}}),",
            f"{i3}{handle}.count({{ where }}),",
            f"{i2}]);",
            f"{i2}return {{",
            f"{i3}data,",
            f"{i3}meta: {{",
            f"{i4}total,",
            f"{i4}page,",
            f"{i4}limit,",
            f"{i4}totalPages: Math.ceil(total / limit),",
            f"{i3}}},",
            f"{i2}}};",
            f"{i1}}}",
            "",
            f"{i1}findOne(id: {id_type}) {{",
            f"{i2}return {handle}.findUnique({{ where: {{ id }} }});",
            f"{i1}}}",
            "",
            f"{i1}update(id: {id_type}, {update_arg}: {update_name}) {{",
            f"{i2}return {handle}.update({{ where: {{ id }}, data: {update_arg} }});",
            f"{i1}}}",
            "",
            f"{i1}remove(id: {id_type}) {{",
            f"{i2}return {handle}.delete({{ where: {{ id }} }});",
            f"{i1}}}",
            "}",
        ]
        return self._finish(lines)

    # ===================================================================
    # 6. controller
    # ===================================================================

    def generate_controller(self, model: ModelDefinition) -> str:
        """Controller: five routes bound 1:1 to the service methods."""
        swagger: bool = self._config.enable_swagger
        guards: bool = self._config.enable_guards
        id_type, use_pipe = self._id_signature(model)

        create_name: str = self.create_dto_name(model)
        update_name: str = self.update_dto_name(model)
        search_name: str = self.search_dto_name(model)
        entity_name: str = self.entity_name(model)
        service_name: str = self.service_name(model)
        service_attr: str = f"{model.handle}Service"
        create_arg: str = f"create{model.name}Dto"
        update_arg: str = f"update{model.name}Dto"
        folder: str = model.folder_name

        common_names: List[str] = [
            "Body",
            "Controller",
            "Delete",
            "Get",
            "Param",
        ]
        if use_pipe:
            common_names.append("ParseIntPipe")
        common_names.extend(["Patch", "Post", "Query"])
        if guards:
            common_names.append("UseGuards")

        imports: Dict[str, List[str]] = {COMMON_MODULE: common_names}
        if swagger:
            swagger_names: List[str] = []
            if guards:
                swagger_names.append("ApiBearerAuth")
            swagger_names.extend([
                "ApiCreatedResponse",
                "ApiExtraModels",
                "ApiOkResponse",
                "ApiTags",
                "getSchemaPath",
            ])
            imports[SWAGGER_MODULE] = swagger_names
        if guards:
            imports[self._config.guard_import] = [self._config.guard_name]
        imports[f"./{folder}.service"] = [service_name]
        imports[f"./dto/create-{folder}.dto"] = [create_name]
        imports[f"./dto/update-{folder}.dto"] = [update_name]
        imports[f"./dto/search-{folder}.dto"] = [search_name]
        if swagger:
            imports[f"./entities/{folder}.entity"] = [entity_name]

        id_param: str = (
            f"@Param('id', ParseIntPipe) id: {id_type}"
            if use_pipe
            else f"@Param('id') id: {id_type}"
        )
        i1, i2 = self._indent, self._double_indent

        lines: List[str] = build_ts_import_block(imports)
        lines.append("")
        if swagger:
            lines.append(f"@ApiTags('{model.route}')")
            lines.append(f"@ApiExtraModels({entity_name})")
        if guards:
            if swagger:
                lines.append("@ApiBearerAuth()")
            lines.append(f"@UseGuards({self._config.guard_name})")
        lines.append(f"@Controller('{model.route}')")
        lines.append(f"export class {self.controller_name(model)} {{")
        lines.append(
            f"{i1}constructor(private readonly {service_attr}: {service_name}) {{}}"
        )

        endpoints: List[Tuple[str, List[str], str, str]] = [
            (
                "Post()",
                [f"ApiCreatedResponse({{ type: {entity_name} }})"],
                f"create(@Body() {create_arg}: {create_name})",
                f"this.{service_attr}.create({create_arg})",
            ),
            (
                "Get()",
                self._paged_response_doc(entity_name),
                f"findAll(@Query() query: {search_name})",
                f"this.{service_attr}.findAll(query)",
            ),
            (
                "Get(':id')",
                [f"ApiOkResponse({{ type: {entity_name} }})"],
                f"findOne({id_param})",
                f"this.{service_attr}.findOne(id)",
            ),
            (
                "Patch(':id')",
                [f"ApiOkResponse({{ type: {entity_name} }})"],
                f"update({id_param}, @Body() {update_arg}: {update_name})",
                f"this.{service_attr}.update(id, {update_arg})",
            ),
            (
                "Delete(':id')",
                [f"ApiOkResponse({{ type: {entity_name} }})"],
                f"remove({id_param})",
                f"this.{service_attr}.remove(id)",
            ),
        ]

        for route_decorator, doc_lines, signature, call in endpoints:
            lines.append("")
            lines.append(f"{i1}@{route_decorator}")
            if swagger:
                lines.append(f"{i1}@{doc_lines[0]}")
                lines.extend(f"{i1}{line}" for line in doc_lines[1:])
            lines.append(f"{i1}{signature} {{")
            lines.append(f"{i2}return {call};")
            lines.append(f"{i1}}}")

        lines.append("}")
        return self._finish(lines)

    # ===================================================================
    # 7. module
    # ===================================================================

    def generate_module(self, model: ModelDefinition) -> str:
        folder: str = model.folder_name
        service_name: str = self.service_name(model)
        controller_name: str = self.controller_name(model)
        lines: List[str] = [
            "import { Module } from '@nestjs/common';",
            f"import {{ PrismaService }} from '{self._config.prisma_service_import}';",
            f"import {{ {controller_name} }} from './{folder}.controller';",
            f"import {{ {service_name} }} from './{folder}.service';",
            "",
            "@Module({",
            f"{self._indent}controllers: [{controller_name}],",
            f"{self._indent}providers: [{service_name}, PrismaService],",
            "})",
            f"export class {self.module_name(model)} {{}}",
        ]
        return self._finish(lines)

    # ===================================================================
    # 8. Shared base query
    # ===================================================================

    def generate_base_query_dto(self) -> str:
        """Shared ``BaseQueryDto`` with ``page`` / ``limit`` pagination keys."""
        swagger: bool = self._config.enable_swagger
        page_size: int = self._config.default_page_size
        imports: Dict[str, List[str]] = {}
        if swagger:
            imports[SWAGGER_MODULE] = ["ApiPropertyOptional"]
        imports["class-transformer"] = ["Type"]
        imports[VALIDATOR_MODULE] = ["IsInt", "IsOptional", "Min"]

        lines: List[str] = build_ts_import_block(imports)
        lines.append("")
        lines.append("export class BaseQueryDto {")
        for index, (key, default) in enumerate((("page", 1), ("limit", page_size))):
            if index:
                lines.append("")
            lines.append(f"{self._indent}@IsOptional()")
            lines.append(f"{self._indent}@Type(() => Number)")
            lines.append(f"{self._indent}@IsInt()")
            lines.append(f"{self._indent}@Min(1)")
            if swagger:
                lines.append(f"{self._indent}@ApiPropertyOptional({{ default: {default} }})")
            lines.append(f"{self._indent}{key}?: number = {default};")
        lines.append("}")
        return self._finish(lines)

    # ===================================================================
    # 9. Aggregate generation
    # ===================================================================

    def render(self, kind: str, model: ModelDefinition) -> str:
        """Render one artifact kind; raises ``KeyError`` for unknown kinds."""
        return self._renderers[kind](model)

    def generate_all_for_model(self, model: ModelDefinition) -> Dict[str, str]:
        """Return ``relative_path → content`` for every artifact of one model."""
        result: Dict[str, str] = {
            self.artifact_path(kind, model): renderer(model)
            for kind, renderer in self._renderers.items()
        }
        logger.debug(
            "Generated all files for model '%s': %d files.",
            model.name,
            len(result),
        )
        return result

    def generate_all(self, models: Sequence[ModelDefinition]) -> Dict[str, str]:
        """
        Generate every file for *models*, plus the shared base query DTO when
        ``generate_common`` is on and at least one model is selected.

        Models whose names differ only in case share a folder; the later
        model's files replace the earlier one's, with a warning.
        """
        result: Dict[str, str] = {}
        folder_owners: Dict[str, str] = {}
        for model in models:
            previous: Optional[str] = folder_owners.get(model.folder_name)
            if previous is not None:
                logger.warning(
                    "Models '%s' and '%s' both map to folder '%s/'; "
                    "'%s' overwrites the files of '%s'.",
                    previous,
                    model.name,
                    model.folder_name,
                    model.name,
                    previous,
                )
            folder_owners[model.folder_name] = model.name
            result.update(self.generate_all_for_model(model))

        if models and self._config.generate_common:
            result[COMMON_BASE_QUERY_PATH.format(ext=self._config.file_extension)] = (
                self.generate_base_query_dto()
            )

        logger.info(
            "Rendered %d file(s), ~%d lines, for %d model(s).",
            len(result),
            sum(count_lines(content) for content in result.values()),
            len(models),
        )
        return result


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ARTIFACT_PATHS",
    "COMMON_BASE_QUERY_PATH",
    "TemplateGenerator",
]

logger.debug("nestgen.templates loaded.")
