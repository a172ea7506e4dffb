"""
Data models for the test generation system.

이 모듈은 Java 소스 분석 결과(클래스/필드/메서드/매개변수/어노테이션)를
저장하기 위한 불변 데이터 모델을 제공합니다.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Optional, Mapping, Sequence, Tuple
from enum import Enum


class ArchitecturalRole(Enum):
    """아키텍처 역할 (스테레오타입 어노테이션으로 결정)"""
    CONTROLLER = "controller"
    SERVICE = "service"
    REPOSITORY = "repository"
    COMPONENT = "component"
    CONFIGURATION = "configuration"
    OTHER = "other"


class AccessLevel(Enum):
    """접근 제한자"""
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    PACKAGE_PRIVATE = "package"


STEREOTYPE_ANNOTATIONS = frozenset({
    "org.springframework.stereotype.Component",
    "org.springframework.stereotype.Service",
    "org.springframework.stereotype.Repository",
    "org.springframework.stereotype.Controller",
    "org.springframework.web.bind.annotation.RestController",
    "org.springframework.context.annotation.Configuration",
})

WEB_MAPPING_ANNOTATIONS = frozenset({
    "org.springframework.web.bind.annotation.RequestMapping",
    "org.springframework.web.bind.annotation.GetMapping",
    "org.springframework.web.bind.annotation.PostMapping",
    "org.springframework.web.bind.annotation.PutMapping",
    "org.springframework.web.bind.annotation.DeleteMapping",
    "org.springframework.web.bind.annotation.PatchMapping",
})

VALIDATION_ANNOTATIONS = frozenset({
    "jakarta.validation.constraints.NotNull",
    "jakarta.validation.constraints.NotBlank",
    "jakarta.validation.constraints.NotEmpty",
    "jakarta.validation.constraints.Size",
    "jakarta.validation.constraints.Min",
    "jakarta.validation.constraints.Max",
    "jakarta.validation.constraints.Pattern",
    "jakarta.validation.constraints.Email",
    "jakarta.validation.Valid",
    "org.springframework.validation.annotation.Validated",
})

INJECTION_ANNOTATIONS = frozenset({
    "org.springframework.beans.factory.annotation.Autowired",
    "jakarta.inject.Inject",
    "org.springframework.beans.factory.annotation.Value",
    "org.springframework.beans.factory.annotation.Qualifier",
})


def _require_text(value: Optional[str], what: str) -> None:
    if value is None or not str(value).strip():
        raise ValueError(f"{what} cannot be None or blank")


def _freeze(items: Optional[Sequence]) -> Tuple:
    return tuple(items) if items is not None else ()


@dataclass(frozen=True)
class AnnotationModel:
    """어노테이션 정보"""
    name: str
    qualified_name: str
    attributes: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        _require_text(self.name, "Annotation name")
        if not self.qualified_name:
            object.__setattr__(self, "qualified_name", self.name)
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes or {})))

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.attributes.get(key, default)

    @property
    def is_stereotype(self) -> bool:
        return self.qualified_name in STEREOTYPE_ANNOTATIONS

    @property
    def is_web_mapping(self) -> bool:
        return self.qualified_name in WEB_MAPPING_ANNOTATIONS

    @property
    def is_validation(self) -> bool:
        return self.qualified_name in VALIDATION_ANNOTATIONS

    @property
    def is_injection(self) -> bool:
        return self.qualified_name in INJECTION_ANNOTATIONS


@dataclass(frozen=True)
class ParameterModel:
    """메서드 매개변수 정보"""
    name: str
    type: str
    qualified_type: Optional[str] = None
    annotations: Tuple[AnnotationModel, ...] = ()
    required: bool = False
    generic_type: Optional[str] = None

    def __post_init__(self):
        _require_text(self.name, "Parameter name")
        _require_text(self.type, "Parameter type")
        if not self.qualified_type:
            object.__setattr__(self, "qualified_type", self.type)
        object.__setattr__(self, "annotations", _freeze(self.annotations))


@dataclass(frozen=True)
class FieldModel:
    """클래스 필드 정보"""
    name: str
    type: str
    qualified_type: Optional[str] = None
    annotations: Tuple[AnnotationModel, ...] = ()
    injected: bool = False
    access: Optional[AccessLevel] = AccessLevel.PRIVATE
    is_final: bool = False

    def __post_init__(self):
        _require_text(self.name, "Field name")
        _require_text(self.type, "Field type")
        if not self.qualified_type:
            object.__setattr__(self, "qualified_type", self.type)
        if self.access is None:
            object.__setattr__(self, "access", AccessLevel.PRIVATE)
        object.__setattr__(self, "annotations", _freeze(self.annotations))


@dataclass(frozen=True)
class MethodModel:
    """클래스 메서드 정보"""
    name: str
    return_type: str
    qualified_return_type: Optional[str] = None
    parameters: Tuple[ParameterModel, ...] = ()
    annotations: Tuple[AnnotationModel, ...] = ()
    declared_exceptions: Tuple[str, ...] = ()
    # 메서드 본문에서 추정한 예외 (휴리스틱, 완전하지 않음)
    possible_exceptions: Tuple[str, ...] = ()
    # 선언/추정 예외의 정규화된 이름 (알 수 없으면 작성된 이름 그대로)
    qualified_exceptions: Tuple[str, ...] = ()
    has_validation: bool = False
    access: Optional[AccessLevel] = AccessLevel.PUBLIC
    is_static: bool = False
    is_abstract: bool = False

    def __post_init__(self):
        _require_text(self.name, "Method name")
        _require_text(self.return_type, "Method return type")
        if not self.qualified_return_type:
            object.__setattr__(self, "qualified_return_type", self.return_type)
        if self.access is None:
            object.__setattr__(self, "access", AccessLevel.PUBLIC)
        object.__setattr__(self, "parameters", _freeze(self.parameters))
        object.__setattr__(self, "annotations", _freeze(self.annotations))
        object.__setattr__(self, "declared_exceptions", _freeze(self.declared_exceptions))
        object.__setattr__(self, "possible_exceptions", _freeze(self.possible_exceptions))
        object.__setattr__(self, "qualified_exceptions", _freeze(self.qualified_exceptions))

    @property
    def returns_void(self) -> bool:
        return self.return_type == "void"

    @property
    def has_parameters(self) -> bool:
        return bool(self.parameters)

    @property
    def throws_exceptions(self) -> bool:
        return bool(self.declared_exceptions or self.possible_exceptions)

    @property
    def is_getter(self) -> bool:
        return ((self.name.startswith("get") or self.name.startswith("is"))
                and not self.parameters and not self.returns_void)

    @property
    def is_setter(self) -> bool:
        return (self.name.startswith("set") and len(self.parameters) == 1
                and self.returns_void)

    @property
    def is_web_mapping(self) -> bool:
        return any(a.is_web_mapping for a in self.annotations)

    def find_annotation(self, name: str) -> Optional[AnnotationModel]:
        """단순 이름 또는 정규화된 이름으로 어노테이션 검색"""
        for annotation in self.annotations:
            if name in (annotation.name, annotation.qualified_name):
                return annotation
        return None


@dataclass(frozen=True)
class ClassModel:
    """분석된 클래스/인터페이스 정보"""
    simple_name: str
    qualified_name: str
    package_name: str = ""
    role: Optional[ArchitecturalRole] = ArchitecturalRole.OTHER
    annotations: Tuple[AnnotationModel, ...] = ()
    fields: Tuple[FieldModel, ...] = ()
    methods: Tuple[MethodModel, ...] = ()
    dependencies: Tuple[str, ...] = ()
    implemented_interfaces: Tuple[str, ...] = ()
    superclass: Optional[str] = None
    source_path: Optional[str] = None
    is_interface: bool = False
    is_abstract: bool = False

    def __post_init__(self):
        _require_text(self.simple_name, "Class simple name")
        _require_text(self.qualified_name, "Class qualified name")
        if self.role is None:
            object.__setattr__(self, "role", ArchitecturalRole.OTHER)
        if self.package_name is None:
            object.__setattr__(self, "package_name", "")
        for name in ("annotations", "fields", "methods", "dependencies", "implemented_interfaces"):
            object.__setattr__(self, name, _freeze(getattr(self, name)))

    @property
    def injected_fields(self) -> List[FieldModel]:
        return [f for f in self.fields if f.injected]

    @property
    def is_stereotyped(self) -> bool:
        return any(a.is_stereotype for a in self.annotations)

    @property
    def is_rest_controller(self) -> bool:
        return any(a.qualified_name == "org.springframework.web.bind.annotation.RestController"
                   for a in self.annotations)

    @property
    def web_mapping_methods(self) -> List[MethodModel]:
        return [m for m in self.methods if m.is_web_mapping]

    @property
    def instance_name(self) -> str:
        return self.simple_name[:1].lower() + self.simple_name[1:]

    def find_annotation(self, name: str) -> Optional[AnnotationModel]:
        for annotation in self.annotations:
            if name in (annotation.name, annotation.qualified_name):
                return annotation
        return None


class ClassModelBuilder:
    """
    ClassModel 단계별 빌더

    필드/메서드/어노테이션을 누적한 후 build()에서 한 번에 불변 모델을 생성합니다.
    """

    def __init__(self, simple_name: str = "", qualified_name: str = ""):
        self.simple_name = simple_name
        self.qualified_name = qualified_name
        self.package_name = ""
        self.role: Optional[ArchitecturalRole] = None
        self.annotations: List[AnnotationModel] = []
        self.fields: List[FieldModel] = []
        self.methods: List[MethodModel] = []
        self.dependencies: List[str] = []
        self.implemented_interfaces: List[str] = []
        self.superclass: Optional[str] = None
        self.source_path: Optional[str] = None
        self.is_interface = False
        self.is_abstract = False

    def add_annotation(self, annotation: AnnotationModel) -> "ClassModelBuilder":
        self.annotations.append(annotation)
        return self

    def add_field(self, field_model: FieldModel) -> "ClassModelBuilder":
        self.fields.append(field_model)
        return self

    def add_method(self, method: MethodModel) -> "ClassModelBuilder":
        self.methods.append(method)
        return self

    def add_dependency(self, type_name: str) -> "ClassModelBuilder":
        self.dependencies.append(type_name)
        return self

    def add_interface(self, type_name: str) -> "ClassModelBuilder":
        self.implemented_interfaces.append(type_name)
        return self

    def build(self) -> ClassModel:
        return ClassModel(
            simple_name=self.simple_name,
            qualified_name=self.qualified_name,
            package_name=self.package_name,
            role=self.role,
            annotations=self.annotations,
            fields=self.fields,
            methods=self.methods,
            dependencies=self.dependencies,
            implemented_interfaces=self.implemented_interfaces,
            superclass=self.superclass,
            source_path=self.source_path,
            is_interface=self.is_interface,
            is_abstract=self.is_abstract,
        )
