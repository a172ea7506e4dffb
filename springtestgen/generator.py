"""
Role-specific test source generators.

이 모듈은 ClassModel을 템플릿 데이터 맵으로 변환하고 TemplateEngine으로 렌더링하여
JUnit 5 테스트 스캐폴드를 생성합니다. 생성되는 단언문은 자리표시자이며
사람이 완성해야 합니다.
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from .assertions import result_assertion
from .config import TestCategory
from .edge_cases import edge_cases_for
from .models import AccessLevel, ArchitecturalRole, ClassModel, MethodModel, ParameterModel
from .naming import NamingStrategy
from .template.engine import TemplateEngine, java_default_value
from .template.loader import (
    CONTROLLER_TEST_TEMPLATE, INTEGRATION_TEST_TEMPLATE,
    REPOSITORY_TEST_TEMPLATE, SERVICE_TEST_TEMPLATE
)
from .template.writer import INTEGRATION_TEST_SUFFIX, UNIT_TEST_SUFFIX

logger = logging.getLogger(__name__)

JUNIT_TEST = "org.junit.jupiter.api.Test"
AUTOWIRED = "org.springframework.beans.factory.annotation.Autowired"
ASSERT_THAT = "org.assertj.core.api.Assertions.assertThat"
ASSERT_THAT_CODE = "org.assertj.core.api.Assertions.assertThatCode"

HTTP_MAPPING_VERBS = {
    "GetMapping": "get",
    "PostMapping": "post",
    "PutMapping": "put",
    "DeleteMapping": "delete",
    "PatchMapping": "patch",
}

# 커스텀 쿼리 테스트에서 제외할 CRUD 기본 메서드
CRUD_METHOD_NAMES = frozenset({
    "save", "saveAll", "saveAndFlush", "findById", "findAll", "findAllById",
    "count", "existsById", "delete", "deleteById", "deleteAll", "deleteAllById",
})
QUERY_METHOD_PREFIXES = ("find", "count", "exists")

_PATH_VARIABLE = re.compile(r"\{[^}]*\}")


def base_type(type_name: str) -> str:
    """제네릭 인자/배열/가변인자 표기를 제거한 기본 타입"""
    return type_name.split("<", 1)[0].replace("[]", "").replace("...", "").strip()


def is_importable(qualified: str, package_name: str) -> bool:
    """import 문이 필요한 정규화된 타입인지 여부"""
    if "." not in qualified:
        return False
    owner = qualified.rsplit(".", 1)[0]
    return owner != "java.lang" and owner != package_name


def local_type(type_name: str) -> str:
    return type_name.replace("...", "[]")


def unique_name(name: str, used: Set[str]) -> str:
    """오버로드 메서드로 인한 테스트 이름 중복 방지 (숫자 접미사)"""
    candidate = name
    index = 2
    while candidate in used:
        candidate = f"{name}{index}"
        index += 1
    used.add(candidate)
    return candidate


def strip_literal(value: Optional[str]) -> str:
    """어노테이션 속성 문자열에서 첫 번째 문자열 리터럴 값 추출"""
    if not value:
        return ""
    text = value.strip()
    if text.startswith("{") and text.endswith("}"):
        text = text[1:-1].split(",", 1)[0].strip()
    if len(text) >= 2 and text[0] == '"' and text[-1] == '"':
        return text[1:-1]
    return ""


class TestGenerator:
    """
    테스트 생성기 기본 클래스

    하위 클래스는 supports()와 build_data()를 구현하고 template_name을 지정합니다.
    """

    __test__ = False

    template_name: str = ""
    category: TestCategory = TestCategory.UNIT
    suffix: str = UNIT_TEST_SUFFIX
    framework_imports: Tuple[str, ...] = (JUNIT_TEST,)
    static_imports: Tuple[str, ...] = (ASSERT_THAT,)

    def __init__(self, engine: TemplateEngine, naming: NamingStrategy):
        self.engine = engine
        self.naming = naming

    def supports(self, model: ClassModel) -> bool:
        raise NotImplementedError

    def build_data(self, model: ClassModel) -> Dict[str, Any]:
        raise NotImplementedError

    def generate(self, model: ClassModel) -> str:
        """
        테스트 소스 생성

        Raises:
            ValueError: 지원하지 않는 모델
            TemplateRenderError: 렌더링 실패
        """
        if model is None or not self.supports(model):
            name = model.qualified_name if model is not None else None
            raise ValueError(f"{type(self).__name__} does not support {name}")
        data = self.build_data(model)
        logger.debug(f"Rendering {self.template_name} for {model.qualified_name}")
        return self.engine.render(self.template_name, data)

    def test_class_name(self, model: ClassModel) -> str:
        return model.simple_name + self.suffix

    def base_data(self, model: ClassModel, types: Iterable[str] = ()) -> Dict[str, Any]:
        """모든 템플릿이 공유하는 기본 데이터"""
        return {
            "package_name": model.package_name,
            "class_name": model.simple_name,
            "test_class_name": self.test_class_name(model),
            "instance_name": model.instance_name,
            "imports": self.collect_imports(model, types),
            "static_imports": sorted(set(self.static_imports)),
        }

    def collect_imports(self, model: ClassModel, types: Iterable[str]) -> List[str]:
        """
        테스트에서 사용하는 타입의 import 목록 (정렬, 중복 제거)

        정규화된 이름을 알 수 있는 타입 중 java.lang과 같은 패키지를 제외합니다.
        """
        index = self._qualified_index(model)
        imports = set(self.framework_imports)
        for type_name in types:
            qualified = index.get(base_type(type_name))
            if qualified and is_importable(qualified, model.package_name):
                imports.add(qualified)
        return sorted(imports)

    @staticmethod
    def _qualified_index(model: ClassModel) -> Dict[str, str]:
        index: Dict[str, str] = {}

        def put(written: str, qualified: Optional[str]):
            if written and qualified:
                index.setdefault(base_type(written), base_type(qualified))

        for f in model.fields:
            put(f.type, f.qualified_type)
        for m in model.methods:
            put(m.return_type, m.qualified_return_type)
            for p in m.parameters:
                put(p.type, p.qualified_type)
            for qualified in m.qualified_exceptions:
                put(qualified.rsplit(".", 1)[-1], qualified)
        return index

    def mocks(self, model: ClassModel) -> List[Dict[str, str]]:
        """주입 필드 -> mock 선언 (필드가 없는 생성자 의존성은 타입 이름에서 변수명 유도)"""
        mocks: List[Dict[str, str]] = []
        seen: Set[str] = set()
        for f in model.injected_fields:
            if f.type not in seen:
                seen.add(f.type)
                mocks.append({"type": f.type, "name": f.name})
        for dependency in model.dependencies:
            if dependency not in seen:
                seen.add(dependency)
                simple = base_type(dependency).rsplit(".", 1)[-1]
                mocks.append({"type": dependency, "name": simple[:1].lower() + simple[1:]})
        return mocks

    @staticmethod
    def arguments(method: MethodModel) -> List[Dict[str, str]]:
        return [argument(p) for p in method.parameters]

    @staticmethod
    def testable_methods(model: ClassModel) -> List[MethodModel]:
        """정적/접근자/비공개 메서드를 제외한 테스트 대상 메서드"""
        return [m for m in model.methods
                if not m.is_static and not m.is_getter and not m.is_setter
                and m.access is not AccessLevel.PRIVATE]


def argument(param: ParameterModel) -> Dict[str, str]:
    declared = local_type(param.type)
    return {"type": declared, "name": param.name, "value": java_default_value(declared)}


def call_arguments(method: MethodModel) -> str:
    return ", ".join(p.name for p in method.parameters)


def failure_exception(method: MethodModel) -> Optional[str]:
    """실패 테스트에서 단언할 예외 (선언된 예외 우선)"""
    if method.declared_exceptions:
        return method.declared_exceptions[0].rsplit(".", 1)[-1]
    if method.possible_exceptions:
        return method.possible_exceptions[0]
    return None


class ServiceTestGenerator(TestGenerator):
    """서비스/컴포넌트 단위 테스트 생성기 (Mockito)"""

    template_name = SERVICE_TEST_TEMPLATE
    framework_imports = (
        JUNIT_TEST,
        "org.junit.jupiter.api.extension.ExtendWith",
        "org.mockito.InjectMocks",
        "org.mockito.Mock",
        "org.mockito.junit.jupiter.MockitoExtension",
    )
    static_imports = (ASSERT_THAT, "org.assertj.core.api.Assertions.assertThatThrownBy")

    def __init__(self, engine: TemplateEngine, naming: NamingStrategy, edge_cases: bool = False):
        super().__init__(engine, naming)
        self.edge_cases = edge_cases

    def supports(self, model: ClassModel) -> bool:
        return (model.role in (ArchitecturalRole.SERVICE, ArchitecturalRole.COMPONENT)
                and not model.is_interface)

    def build_data(self, model: ClassModel) -> Dict[str, Any]:
        used: Set[str] = set()
        tests: List[Dict[str, Any]] = []
        types: List[str] = [m["type"] for m in self.mocks(model)]

        for method in self.testable_methods(model):
            outcome = "succeeds" if method.returns_void else "returnsResult"
            common = {
                "method_name": method.name,
                "arguments": self.arguments(method),
                "call_args": call_arguments(method),
                "returns_void": method.returns_void,
                "return_type": method.return_type,
                "assertion": result_assertion(method.return_type),
            }
            types.extend(p.type for p in method.parameters)
            if not method.returns_void:
                types.append(method.return_type)

            tests.append(dict(common, kind="success", name=unique_name(
                self.naming.name(method.name, "validInput", outcome), used)))

            exception = failure_exception(method)
            if exception:
                types.append(exception)
                tests.append(dict(common, kind="failure", exception=exception, name=unique_name(
                    self.naming.name(method.name, "invalidInput", f"throws{exception}"), used)))

            if self.edge_cases:
                tests.extend(self.edge_case_tests(method, common, used))

        if not tests:
            tests.append({"kind": "init", "name": unique_name(
                self.naming.name("initialization", "defaultConstructor", "createsInstance"), used)})

        data = self.base_data(model, types)
        if any(t["kind"] == "edge" and not t["rejects"] for t in tests):
            data["static_imports"] = sorted(set(data["static_imports"]) | {ASSERT_THAT_CODE})
        data.update(mocks=self.mocks(model), tests=tests)
        return data

    def edge_case_tests(self, method: MethodModel, common: Dict[str, Any], used: Set[str]) -> List[Dict[str, Any]]:
        """null/빈 값 인자 테스트 (필수/검증 매개변수는 IllegalArgumentException 기대)"""
        tests = []
        for case in edge_cases_for(method):
            arguments = [dict(a) for a in common["arguments"]]
            arguments[case.parameter_index]["value"] = case.value
            expected = "throwsIllegalArgumentException" if case.rejects else "doesNotThrow"
            tests.append(dict(
                common,
                kind="edge",
                arguments=arguments,
                rejects=case.rejects,
                name=unique_name(self.naming.name(method.name, case.scenario, expected), used),
            ))
        return tests


class ControllerTestGenerator(TestGenerator):
    """웹 컨트롤러 슬라이스 테스트 생성기 (@WebMvcTest, MockMvc)"""

    template_name = CONTROLLER_TEST_TEMPLATE
    framework_imports = (
        JUNIT_TEST,
        AUTOWIRED,
        "org.springframework.boot.test.autoconfigure.web.servlet.WebMvcTest",
        "org.springframework.boot.test.mock.mockito.MockBean",
        "org.springframework.http.MediaType",
        "org.springframework.test.web.servlet.MockMvc",
    )
    static_imports = ("org.springframework.test.web.servlet.result.MockMvcResultMatchers.status",)

    def supports(self, model: ClassModel) -> bool:
        return model.role is ArchitecturalRole.CONTROLLER

    def build_data(self, model: ClassModel) -> Dict[str, Any]:
        used: Set[str] = set()
        verbs: Set[str] = set()
        tests: List[Dict[str, Any]] = []
        base_path = self.class_base_path(model)

        for method in model.web_mapping_methods:
            verb = self.http_verb(method)
            verbs.add(verb)
            path = self.request_path(base_path, method)
            uri_vars = self.uri_variables(path, method)
            has_body = any(p.annotations and any(a.name == "RequestBody" for a in p.annotations)
                           for p in method.parameters)

            tests.append({
                "kind": "success",
                "name": unique_name(self.naming.name(method.name, "validRequest", "returnsOk"), used),
                "request": self.request_builder(verb, path, uri_vars, "{}" if has_body else None),
                "expected_status": "isOk",
            })
            tests.append({
                "kind": "client_error",
                "name": unique_name(self.naming.name(method.name, "invalidRequest", "returnsClientError"), used),
                "request": self.request_builder(verb, path, uri_vars, "invalid" if has_body else None),
                "expected_status": "is4xxClientError",
            })

        data = self.base_data(model, [m["type"] for m in self.mocks(model)])
        data["static_imports"] = sorted(
            set(self.static_imports)
            | {f"org.springframework.test.web.servlet.request.MockMvcRequestBuilders.{v}" for v in verbs})
        data.update(mocks=self.mocks(model), tests=tests)
        return data

    @staticmethod
    def class_base_path(model: ClassModel) -> str:
        mapping = model.find_annotation("RequestMapping")
        if mapping is None:
            return ""
        return strip_literal(mapping.get("value") or mapping.get("path")).rstrip("/")

    @staticmethod
    def http_verb(method: MethodModel) -> str:
        """매핑 어노테이션에서 HTTP 메서드 결정 (기본 GET)"""
        for annotation in method.annotations:
            if annotation.name in HTTP_MAPPING_VERBS:
                return HTTP_MAPPING_VERBS[annotation.name]
            if annotation.name == "RequestMapping":
                declared = annotation.get("method")
                if declared:
                    token = declared.strip("{} ").split(",", 1)[0].strip()
                    return token.rsplit(".", 1)[-1].lower() or "get"
        return "get"

    @staticmethod
    def request_path(base_path: str, method: MethodModel) -> str:
        sub_path = ""
        for annotation in method.annotations:
            if annotation.is_web_mapping:
                sub_path = strip_literal(annotation.get("value") or annotation.get("path"))
                break
        if sub_path and not sub_path.startswith("/"):
            sub_path = "/" + sub_path
        path = base_path + sub_path
        return path or f"/{method.name}"

    @staticmethod
    def uri_variables(path: str, method: MethodModel) -> List[str]:
        """경로 변수 자리에 넣을 기본 값 (@PathVariable 매개변수 타입 기준)"""
        count = len(_PATH_VARIABLE.findall(path))
        path_params = [p for p in method.parameters
                       if any(a.name == "PathVariable" for a in p.annotations)]
        values = []
        for index in range(count):
            value = "1"
            if index < len(path_params):
                default = java_default_value(path_params[index].type)
                value = default if default != "null" else "1"
            values.append(value)
        return values

    @staticmethod
    def request_builder(verb: str, path: str, uri_vars: List[str], body: Optional[str]) -> str:
        args = "".join(f", {v}" for v in uri_vars)
        request = f'{verb}("{path}"{args})'
        if body is not None:
            request += f'.contentType(MediaType.APPLICATION_JSON).content("{body}")'
        return request


class RepositoryTestGenerator(TestGenerator):
    """저장소 슬라이스 테스트 생성기 (@DataJpaTest)"""

    template_name = REPOSITORY_TEST_TEMPLATE
    framework_imports = (
        JUNIT_TEST,
        AUTOWIRED,
        "java.util.Optional",
        "org.springframework.boot.test.autoconfigure.orm.jpa.DataJpaTest",
        "org.springframework.boot.test.autoconfigure.orm.jpa.TestEntityManager",
    )

    def supports(self, model: ClassModel) -> bool:
        return model.role is ArchitecturalRole.REPOSITORY

    def build_data(self, model: ClassModel) -> Dict[str, Any]:
        entity, id_type = self.entity_types(model)
        used: Set[str] = set()
        names = {
            "save": unique_name(self.naming.name("save", "newEntity", "persistsEntity"), used),
            "find_by_id": unique_name(self.naming.name("findById", "existingEntity", "returnsEntity"), used),
            "find_all": unique_name(self.naming.name("findAll", "existingEntities", "returnsAll"), used),
            "delete": unique_name(self.naming.name("delete", "existingEntity", "removesEntity"), used),
        }

        queries: List[Dict[str, Any]] = []
        types: List[str] = []
        for method in self.query_methods(model):
            types.extend(p.type for p in method.parameters)
            if not method.returns_void:
                types.append(method.return_type)
            queries.append({
                "name": unique_name(self.naming.name(method.name, "existingData", "returnsResult"), used),
                "method_name": method.name,
                "arguments": self.arguments(method),
                "call_args": call_arguments(method),
                "returns_void": method.returns_void,
                "return_type": method.return_type,
                "assertion": result_assertion(method.return_type),
            })

        types.extend([entity, id_type])
        data = self.base_data(model, types)
        data.update(
            entity_name=entity,
            entity_var=entity[:1].lower() + entity[1:],
            id_type=id_type,
            names=names,
            queries=queries,
        )
        return data

    @staticmethod
    def entity_types(model: ClassModel) -> Tuple[str, str]:
        """
        저장소의 엔티티/ID 타입 추론

        JpaRepository<User, Long> 같은 제네릭 상위 타입을 우선 사용하고,
        없으면 이름에서 "Repository"를 제거합니다 (UserRepository -> User).
        """
        for parent in model.implemented_interfaces + ((model.superclass,) if model.superclass else ()):
            if "<" in parent and parent.endswith(">"):
                args = [a.strip() for a in parent[parent.index("<") + 1:-1].split(",")]
                if len(args) == 2 and all(args):
                    return args[0], args[1]

        name = model.simple_name
        if name.endswith("Repository") and len(name) > len("Repository"):
            return name[:-len("Repository")], "Long"
        return "Entity", "Long"

    @staticmethod
    def query_methods(model: ClassModel) -> List[MethodModel]:
        return [m for m in model.methods
                if m.name.startswith(QUERY_METHOD_PREFIXES)
                and m.name not in CRUD_METHOD_NAMES and not m.is_static]


class IntegrationTestGenerator(TestGenerator):
    """스프링 컨텍스트 통합 테스트 생성기 (@SpringBootTest)"""

    template_name = INTEGRATION_TEST_TEMPLATE
    category = TestCategory.INTEGRATION
    suffix = INTEGRATION_TEST_SUFFIX
    framework_imports = (
        JUNIT_TEST,
        AUTOWIRED,
        "org.springframework.boot.test.context.SpringBootTest",
    )
    web_imports = (
        "org.springframework.boot.test.web.client.TestRestTemplate",
        "org.springframework.http.HttpMethod",
        "org.springframework.http.ResponseEntity",
    )
    testcontainers_import = "org.testcontainers.junit.jupiter.Testcontainers"

    def __init__(self, engine: TemplateEngine, naming: NamingStrategy, use_testcontainers: bool = False):
        super().__init__(engine, naming)
        self.use_testcontainers = use_testcontainers

    def supports(self, model: ClassModel) -> bool:
        return model.role is not ArchitecturalRole.OTHER and model.is_stereotyped

    def build_data(self, model: ClassModel) -> Dict[str, Any]:
        web = model.role is ArchitecturalRole.CONTROLLER
        used: Set[str] = set()
        context_test = unique_name(self.naming.name("contextLoads"), used)
        tests: List[Dict[str, Any]] = []
        types: List[str] = []

        if web:
            base_path = ControllerTestGenerator.class_base_path(model)
            for method in model.web_mapping_methods:
                path = ControllerTestGenerator.request_path(base_path, method)
                tests.append({
                    "name": unique_name(self.naming.name(method.name, "runningServer", "respondsWithStatus"), used),
                    "path": path,
                    "http_method": ControllerTestGenerator.http_verb(method).upper(),
                    "uri_variables": ControllerTestGenerator.uri_variables(path, method),
                })
        else:
            for method in self.testable_methods(model):
                if method.access is not AccessLevel.PUBLIC or method.is_abstract:
                    continue
                types.extend(p.type for p in method.parameters)
                if not method.returns_void:
                    types.append(method.return_type)
                tests.append({
                    "name": unique_name(self.naming.name(method.name, "applicationContext", "completes"), used),
                    "method_name": method.name,
                    "arguments": self.arguments(method),
                    "call_args": call_arguments(method),
                    "returns_void": method.returns_void,
                    "return_type": method.return_type,
                    "assertion": result_assertion(method.return_type),
                })

        data = self.base_data(model, types)
        extra = set(self.web_imports) if web else set()
        if self.use_testcontainers:
            extra.add(self.testcontainers_import)
        data["imports"] = sorted(set(data["imports"]) | extra)
        data.update(
            web=web,
            testcontainers=self.use_testcontainers,
            context_test=context_test,
            tests=tests,
        )
        return data


def create_generators(engine: TemplateEngine, naming: NamingStrategy,
                      category: TestCategory, use_testcontainers: bool = False,
                      edge_cases: bool = False) -> List[TestGenerator]:
    """선택된 테스트 종류에 해당하는 생성기 목록"""
    generators: List[TestGenerator] = []
    if category.includes(TestCategory.UNIT):
        generators.extend([
            ServiceTestGenerator(engine, naming, edge_cases),
            ControllerTestGenerator(engine, naming),
            RepositoryTestGenerator(engine, naming),
        ])
    if category.includes(TestCategory.INTEGRATION):
        generators.append(IntegrationTestGenerator(engine, naming, use_testcontainers))
    return generators
