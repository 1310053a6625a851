"""
tests/test_templates.py
Unit tests for nestgen.templates (TemplateGenerator).

Tests cover:
- create / update / search DTO generation
- entity, service, controller and module generation
- config toggles (swagger, guards, page size, indentation, extension)
- generate_all aggregation and determinism
"""

from __future__ import annotations

import logging

import pytest

from nestgen.models import GenerationConfig, ModelDefinition, SchemaDefinition
from nestgen.parser import parse_schema
from nestgen.templates import ARTIFACT_PATHS, TemplateGenerator


# ===========================================================================
# create-DTO
# ===========================================================================


class TestCreateDto:
    """Tests for create-DTO generation."""

    def test_minimal_model(
        self, templates: TemplateGenerator, minimal_user: ModelDefinition
    ) -> None:
        code = templates.generate_create_dto(minimal_user)
        assert "export class CreateUserDto {" in code
        assert "  name: string;" in code
        assert "  email: string;" in code
        assert "  id:" not in code

    def test_decorators_precede_property(
        self, templates: TemplateGenerator, user_model: ModelDefinition
    ) -> None:
        code = templates.generate_create_dto(user_model)
        assert "  @IsOptional()\n  @IsString()\n  @ApiPropertyOptional()\n  bio?: string;" in code
        assert "  @IsString()\n  @IsArray()\n  @ApiProperty({ isArray: true })\n  tags: string[];" in code

    def test_imports(
        self, templates: TemplateGenerator, user_model: ModelDefinition
    ) -> None:
        code = templates.generate_create_dto(user_model)
        assert "import { ApiProperty, ApiPropertyOptional } from '@nestjs/swagger';" in code
        assert (
            "import { IsOptional, IsString, IsObject, IsEnum, IsArray } "
            "from 'class-validator';"
        ) in code
        assert "import { Role } from '@prisma/client';" in code

    def test_default_exclusions(
        self, templates: TemplateGenerator, user_model: ModelDefinition
    ) -> None:
        code = templates.generate_create_dto(user_model)
        for name in ("id", "createdAt", "updatedAt"):
            assert f"  {name}:" not in code

    def test_custom_exclusions(self, user_model: ModelDefinition) -> None:
        gen = TemplateGenerator(GenerationConfig(excluded_fields=["email"]))
        code = gen.generate_create_dto(user_model)
        assert "  id: number;" in code
        assert "  email:" not in code

    def test_fields_keep_declaration_order(
        self, templates: TemplateGenerator, user_model: ModelDefinition
    ) -> None:
        code = templates.generate_create_dto(user_model)
        positions = [code.index(f"  {n}") for n in ("name:", "email:", "role:", "tags:")]
        assert positions == sorted(positions)

    def test_without_swagger(self, user_model: ModelDefinition) -> None:
        gen = TemplateGenerator(GenerationConfig(enable_swagger=False))
        code = gen.generate_create_dto(user_model)
        assert "ApiProperty" not in code
        assert "@nestjs/swagger" not in code
        assert "@IsString()" in code

    def test_model_without_fields(self, templates: TemplateGenerator) -> None:
        code = templates.generate_create_dto(ModelDefinition(name="Empty"))
        assert code == "export class CreateEmptyDto {\n}\n"


# ===========================================================================
# update / search DTOs
# ===========================================================================


class TestDerivedDtos:
    """Tests for update and search DTOs."""

    def test_update_dto(
        self, templates: TemplateGenerator, user_model: ModelDefinition
    ) -> None:
        code = templates.generate_update_dto(user_model)
        assert "import { PartialType } from '@nestjs/swagger';" in code
        assert "import { CreateUserDto } from './create-user.dto';" in code
        assert "export class UpdateUserDto extends PartialType(CreateUserDto) {}" in code

    def test_update_dto_without_swagger(self, user_model: ModelDefinition) -> None:
        gen = TemplateGenerator(GenerationConfig(enable_swagger=False))
        code = gen.generate_update_dto(user_model)
        assert "from '@nestjs/mapped-types';" in code

    def test_search_dto(
        self, templates: TemplateGenerator, post_model: ModelDefinition
    ) -> None:
        code = templates.generate_search_dto(post_model)
        assert "import { BaseQueryDto } from '../../common/dto/base-query.dto';" in code
        assert "export class SearchPostDto extends BaseQueryDto {}" in code

    def test_base_query_dto(self, templates: TemplateGenerator) -> None:
        code = templates.generate_base_query_dto()
        assert "export class BaseQueryDto {" in code
        assert "  page?: number = 1;" in code
        assert "  limit?: number = 10;" in code
        assert "  @Type(() => Number)" in code
        assert "import { Type } from 'class-transformer';" in code


# ===========================================================================
# entity
# ===========================================================================


class TestEntity:
    """Tests for entity generation."""

    def test_all_fields_present(
        self, templates: TemplateGenerator, minimal_user: ModelDefinition
    ) -> None:
        code = templates.generate_entity(minimal_user)
        assert "export class UserEntity {" in code
        assert "  @ApiProperty()\n  id: number;" in code
        assert "  name: string;" in code
        assert "  email: string;" in code

    def test_no_validators(
        self, templates: TemplateGenerator, user_model: ModelDefinition
    ) -> None:
        code = templates.generate_entity(user_model)
        assert "class-validator" not in code
        assert "@IsString" not in code
        assert "  @ApiProperty({ enum: Role })\n  role: Role;" in code


# ===========================================================================
# service
# ===========================================================================


class TestService:
    """Tests for the Prisma-backed service."""

    def test_uses_model_delegate(
        self, templates: TemplateGenerator, minimal_user: ModelDefinition
    ) -> None:
        code = templates.generate_service(minimal_user)
        assert "this.prisma.user.create({ data: createUserDto })" in code
        assert "this.prisma.user.findUnique({ where: { id } })" in code
        assert "this.prisma.user.delete({ where: { id } })" in code
        assert "export class UserService {" in code

    def test_paginated_find_all(
        self, templates: TemplateGenerator, user_model: ModelDefinition
    ) -> None:
        code = templates.generate_service(user_model)
        assert "async findAll(query: SearchUserDto) {" in code
        assert "const { page = 1, limit = 10, ...filters } = query;" in code
        assert "skip: (page - 1) * limit," in code
        assert "totalPages: Math.ceil(total / limit)," in code
        assert "[key, { equals: value }]" in code

    def test_page_size_from_config(self, user_model: ModelDefinition) -> None:
        gen = TemplateGenerator(GenerationConfig(default_page_size=25))
        assert "limit = 25" in gen.generate_service(user_model)

    def test_id_type_follows_id_field(
        self,
        templates: TemplateGenerator,
        user_model: ModelDefinition,
        post_model: ModelDefinition,
    ) -> None:
        assert "findOne(id: number)" in templates.generate_service(user_model)
        assert "findOne(id: string)" in templates.generate_service(post_model)

    def test_multi_word_model_handle(self, templates: TemplateGenerator) -> None:
        model = parse_schema("model OrderItem {\n  id Int\n}\n").models[0]
        code = templates.generate_service(model)
        assert "this.prisma.orderItem.findMany" in code
        assert "from './dto/create-orderitem.dto';" in code


# ===========================================================================
# controller
# ===========================================================================


class TestController:
    """Tests for controller generation."""

    def test_routes_and_guard(
        self, templates: TemplateGenerator, user_model: ModelDefinition
    ) -> None:
        code = templates.generate_controller(user_model)
        assert "@ApiTags('users')" in code
        assert "@ApiBearerAuth()" in code
        assert "@UseGuards(JwtAuthGuard)" in code
        assert "@Controller('users')" in code
        assert "import { JwtAuthGuard } from '../auth/jwt-auth.guard';" in code
        for decorator in ("@Post()", "@Get()", "@Get(':id')", "@Patch(':id')", "@Delete(':id')"):
            assert decorator in code

    def test_int_id_uses_parse_int_pipe(
        self, templates: TemplateGenerator, user_model: ModelDefinition
    ) -> None:
        code = templates.generate_controller(user_model)
        assert "findOne(@Param('id', ParseIntPipe) id: number)" in code
        assert "ParseIntPipe," in code

    def test_string_id(
        self, templates: TemplateGenerator, post_model: ModelDefinition
    ) -> None:
        code = templates.generate_controller(post_model)
        assert "findOne(@Param('id') id: string)" in code
        assert "ParseIntPipe" not in code

    def test_service_binding(
        self, templates: TemplateGenerator, user_model: ModelDefinition
    ) -> None:
        code = templates.generate_controller(user_model)
        assert "constructor(private readonly userService: UserService) {}" in code
        assert "return this.userService.update(id, updateUserDto);" in code
        assert "findAll(@Query() query: SearchUserDto)" in code

    def test_find_all_documents_paged_response(
        self, templates: TemplateGenerator, user_model: ModelDefinition
    ) -> None:
        code = templates.generate_controller(user_model)
        assert "@ApiExtraModels(UserEntity)" in code
        assert "data: { type: 'array', items: { $ref: getSchemaPath(UserEntity) } }," in code
        assert "totalPages: { type: 'number' }," in code
        assert "isArray: true" not in code
        find_all = code.index("findAll(@Query()")
        assert code.rindex("@Get()", 0, find_all) < code.rindex("schema: {", 0, find_all)
        assert "ApiExtraModels, ApiOkResponse, ApiTags, getSchemaPath }" in code

    def test_without_guards(self, user_model: ModelDefinition) -> None:
        gen = TemplateGenerator(GenerationConfig(enable_guards=False))
        code = gen.generate_controller(user_model)
        assert "UseGuards" not in code
        assert "JwtAuthGuard" not in code
        assert "ApiBearerAuth" not in code

    def test_without_swagger(self, user_model: ModelDefinition) -> None:
        gen = TemplateGenerator(GenerationConfig(enable_swagger=False))
        code = gen.generate_controller(user_model)
        assert "@nestjs/swagger" not in code
        assert "UserEntity" not in code
        assert "@UseGuards(JwtAuthGuard)" in code

    def test_custom_guard(self, user_model: ModelDefinition) -> None:
        gen = TemplateGenerator(
            GenerationConfig(guard_name="ApiKeyGuard", guard_import="../auth/api-key.guard")
        )
        code = gen.generate_controller(user_model)
        assert "import { ApiKeyGuard } from '../auth/api-key.guard';" in code
        assert "@UseGuards(ApiKeyGuard)" in code


# ===========================================================================
# module
# ===========================================================================


class TestModule:
    def test_module_wiring(
        self, templates: TemplateGenerator, user_model: ModelDefinition
    ) -> None:
        code = templates.generate_module(user_model)
        assert "controllers: [UserController]," in code
        assert "providers: [UserService, PrismaService]," in code
        assert "export class UserModule {}" in code


# ===========================================================================
# Aggregation
# ===========================================================================


class TestGenerateAll:
    """Tests for the full file map."""

    def test_paths_for_two_models(
        self, templates: TemplateGenerator, example_schema: SchemaDefinition
    ) -> None:
        files = templates.generate_all(example_schema.models)
        assert len(files) == 2 * len(ARTIFACT_PATHS) + 1
        assert "user/dto/create-user.dto.ts" in files
        assert "user/entities/user.entity.ts" in files
        assert "post/post.controller.ts" in files
        assert "common/dto/base-query.dto.ts" in files

    def test_no_common_file(self, example_schema: SchemaDefinition) -> None:
        gen = TemplateGenerator(GenerationConfig(generate_common=False))
        files = gen.generate_all(example_schema.models)
        assert "common/dto/base-query.dto.ts" not in files
        assert len(files) == 2 * len(ARTIFACT_PATHS)

    def test_case_only_name_clash_warns(
        self, templates: TemplateGenerator, caplog: pytest.LogCaptureFixture
    ) -> None:
        models = parse_schema(
            "model OrderItem {\n  id Int\n}\nmodel Orderitem {\n  id String\n}\n"
        ).models
        with caplog.at_level(logging.WARNING, logger="nestgen.templates"):
            files = templates.generate_all(models)
        assert "OrderItem" in caplog.text
        assert "Orderitem" in caplog.text
        assert "class OrderitemService" in files["orderitem/orderitem.service.ts"]

    def test_distinct_folders_do_not_warn(
        self,
        templates: TemplateGenerator,
        example_schema: SchemaDefinition,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="nestgen.templates"):
            templates.generate_all(example_schema.models)
        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_empty_selection(self, templates: TemplateGenerator) -> None:
        assert templates.generate_all([]) == {}

    def test_file_extension(self, minimal_user: ModelDefinition) -> None:
        gen = TemplateGenerator(GenerationConfig(file_extension=".js"))
        files = gen.generate_all([minimal_user])
        assert all(path.endswith(".js") for path in files)

    def test_indent_size(self, minimal_user: ModelDefinition) -> None:
        gen = TemplateGenerator(GenerationConfig(indent_size=4))
        assert "    name: string;" in gen.generate_create_dto(minimal_user)

    def test_deterministic(
        self, templates: TemplateGenerator, example_schema: SchemaDefinition
    ) -> None:
        first = templates.generate_all(example_schema.models)
        second = TemplateGenerator(GenerationConfig()).generate_all(example_schema.models)
        assert first == second

    def test_every_file_ends_with_newline(
        self, templates: TemplateGenerator, example_schema: SchemaDefinition
    ) -> None:
        for content in templates.generate_all(example_schema.models).values():
            assert content.endswith("}\n")

    def test_render_unknown_kind(
        self, templates: TemplateGenerator, user_model: ModelDefinition
    ) -> None:
        with pytest.raises(KeyError):
            templates.render("resolver", user_model)
