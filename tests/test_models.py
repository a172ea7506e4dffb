"""
Tests for structural data models.

이 모듈은 ClassModel/FieldModel/MethodModel 등의 불변 조건을 검증합니다.
"""

import dataclasses
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from springtestgen.models import (
    AccessLevel, AnnotationModel, ArchitecturalRole, ClassModel, ClassModelBuilder,
    FieldModel, MethodModel, ParameterModel
)


class TestAnnotationModel:
    """AnnotationModel 테스트"""

    def test_blank_name_rejected(self):
        """빈 이름 거부"""
        with pytest.raises(ValueError):
            AnnotationModel("  ", "x.Y")

    def test_qualified_name_defaults_to_simple_name(self):
        """정규화된 이름 미지정 시 단순 이름 사용"""
        annotation = AnnotationModel("Custom", "")
        assert annotation.qualified_name == "Custom"

    def test_attributes_read_only(self):
        """속성 맵은 읽기 전용"""
        source = {"value": '"/users"'}
        annotation = AnnotationModel("RequestMapping",
                                     "org.springframework.web.bind.annotation.RequestMapping", source)
        source["value"] = "changed"

        assert annotation.get("value") == '"/users"'
        with pytest.raises(TypeError):
            annotation.attributes["value"] = "x"

    def test_predicates(self):
        """스테레오타입/웹 매핑/주입 판별"""
        service = AnnotationModel("Service", "org.springframework.stereotype.Service")
        mapping = AnnotationModel("GetMapping", "org.springframework.web.bind.annotation.GetMapping")
        autowired = AnnotationModel("Autowired", "org.springframework.beans.factory.annotation.Autowired")

        assert service.is_stereotype and not service.is_web_mapping
        assert mapping.is_web_mapping
        assert autowired.is_injection
        assert not AnnotationModel("Custom", "Custom").is_stereotype


class TestMethodModel:
    """MethodModel 테스트"""

    def test_defaults(self):
        """기본 접근 제한자는 public, 목록은 튜플"""
        method = MethodModel("run", "void", access=None, parameters=None)
        assert method.access is AccessLevel.PUBLIC
        assert method.parameters == ()
        assert method.returns_void

    def test_blank_return_type_rejected(self):
        """빈 반환 타입 거부"""
        with pytest.raises(ValueError):
            MethodModel("run", "")

    def test_getter_detection(self):
        """getter 판별"""
        assert MethodModel("getName", "String").is_getter
        assert MethodModel("isActive", "boolean").is_getter
        assert not MethodModel("getName", "void").is_getter
        assert not MethodModel("getName", "String", parameters=[ParameterModel("id", "Long")]).is_getter

    def test_setter_detection(self):
        """setter 판별"""
        param = ParameterModel("name", "String")
        assert MethodModel("setName", "void", parameters=[param]).is_setter
        assert not MethodModel("setName", "String", parameters=[param]).is_setter
        assert not MethodModel("setName", "void").is_setter

    def test_throws_exceptions(self):
        """선언/추정 예외 여부"""
        assert MethodModel("a", "void", declared_exceptions=["IOException"]).throws_exceptions
        assert MethodModel("b", "void", possible_exceptions=["NumberFormatException"]).throws_exceptions
        assert not MethodModel("c", "void").throws_exceptions


class TestFieldModel:
    """FieldModel 테스트"""

    def test_access_defaults_to_private(self):
        """접근 제한자 미지정 시 private"""
        field_model = FieldModel("repo", "UserRepository", access=None)
        assert field_model.access is AccessLevel.PRIVATE
        assert field_model.qualified_type == "UserRepository"

    def test_blank_name_rejected(self):
        """빈 필드 이름 거부"""
        with pytest.raises(ValueError):
            FieldModel("", "String")


class TestClassModel:
    """ClassModel / ClassModelBuilder 테스트"""

    def test_blank_names_rejected(self):
        """빈 이름 거부"""
        with pytest.raises(ValueError):
            ClassModel("", "com.example.A")
        with pytest.raises(ValueError):
            ClassModel("A", " ")

    def test_role_defaults_to_other(self):
        """역할 미지정 시 OTHER"""
        model = ClassModel("A", "A", role=None, fields=None)
        assert model.role is ArchitecturalRole.OTHER
        assert model.fields == ()

    def test_builder_copies_collections(self):
        """빌더 결과는 이후 빌더 변경의 영향을 받지 않음"""
        builder = ClassModelBuilder("UserService", "com.example.UserService")
        builder.add_field(FieldModel("repo", "UserRepository", injected=True))
        builder.add_dependency("UserRepository")
        model = builder.build()

        builder.add_field(FieldModel("other", "String"))

        assert len(model.fields) == 1
        assert model.dependencies == ("UserRepository",)
        assert [f.name for f in model.injected_fields] == ["repo"]

    def test_immutable(self):
        """생성 후 변경 불가"""
        model = ClassModel("A", "A")
        with pytest.raises(dataclasses.FrozenInstanceError):
            model.simple_name = "B"

    def test_instance_name(self):
        """lowerCamel 인스턴스 이름"""
        assert ClassModel("UserService", "x.UserService").instance_name == "userService"

    def test_find_annotation_by_simple_or_qualified_name(self):
        """단순/정규화된 이름으로 어노테이션 검색"""
        annotation = AnnotationModel("RestController",
                                     "org.springframework.web.bind.annotation.RestController")
        model = ClassModel("C", "C", annotations=[annotation])

        assert model.find_annotation("RestController") is annotation
        assert model.find_annotation("org.springframework.web.bind.annotation.RestController") is annotation
        assert model.find_annotation("Service") is None
        assert model.is_rest_controller
