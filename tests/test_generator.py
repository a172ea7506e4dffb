"""
Tests for role-specific test generators.

이 모듈은 실제 내장 템플릿으로 렌더링한 테스트 소스의 내용을 검증합니다.
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from springtestgen.analyzer.scanner import ClassScanner
from springtestgen.config import TestCategory
from springtestgen.generator import (
    ControllerTestGenerator, IntegrationTestGenerator, RepositoryTestGenerator,
    ServiceTestGenerator, create_generators, is_importable, strip_literal
)
from springtestgen.naming import NamingConvention, create_naming_strategy
from springtestgen.template.engine import TemplateEngine


USER_SERVICE = """
package com.example;

import com.example.domain.User;
import org.springframework.stereotype.Service;

@Service
public class UserService {

    private final UserRepository userRepository;

    public UserService(UserRepository userRepository) {
        this.userRepository = userRepository;
    }

    public User findById(Long id) throws UserNotFoundException {
        return userRepository.findById(id).orElseThrow(() -> new UserNotFoundException(id));
    }

    public void rename(Long id, String name) {
        Integer.parseInt(name);
    }

    public String getLabel() {
        return "label";
    }

    public static UserService create() {
        return null;
    }
}
"""

USER_CONTROLLER = """
package com.example.web;

import com.example.UserService;

@RestController
@RequestMapping("/users")
public class UserController {

    @Autowired
    private UserService userService;

    @GetMapping("/{id}")
    public User get(@PathVariable Long id) {
        return userService.findById(id);
    }

    @PostMapping
    public User create(@Valid @RequestBody UserDto dto) {
        return null;
    }

    @RequestMapping(value = "/search", method = RequestMethod.PUT)
    public List<User> search(@RequestParam String q) {
        return null;
    }

    public void helper() {}
}
"""

USER_REPOSITORY = """
package com.example;

@Repository
public interface UserRepository extends JpaRepository<User, Long> {

    Optional<User> findByEmail(String email);

    long countByActive(boolean active);

    boolean existsByName(String name);

    void touch();
}
"""


ACCOUNT_SERVICE = """
package com.example;

import com.example.exception.UserNotFoundException;

@Service
public class AccountService {

    public String load(Long id) throws UserNotFoundException {
        return null;
    }

    public String first(Optional<String> value) {
        return value.orElseThrow();
    }
}
"""

SIGNUP_SERVICE = """
package com.example;

@Service
public class SignupService {

    public void register(@NotBlank String email, int age) {
    }

    public void tag(List<String> tags) {
    }
}
"""


@pytest.fixture
def engine():
    """내장 템플릿 엔진"""
    return TemplateEngine()


@pytest.fixture
def naming():
    return create_naming_strategy(NamingConvention.METHOD_SCENARIO_EXPECTED)


def scan(source):
    return ClassScanner().scan_source(source)


class TestServiceTestGenerator:
    """서비스 테스트 생성기 테스트"""

    def test_generates_mockito_test(self, engine, naming):
        """mock 의존성, 테스트 대상 주입, 정상/실패 테스트"""
        content = ServiceTestGenerator(engine, naming).generate(scan(USER_SERVICE))

        assert content.startswith("package com.example;\n")
        assert "class UserServiceTest {" in content
        assert "@Mock\n    private UserRepository userRepository;" in content
        assert "@InjectMocks\n    private UserService userService;" in content
        assert "void testFindById_ValidInput_ReturnsResult()" in content
        assert "User result = userService.findById(id);" in content
        assert "Long id = 1L;" in content
        assert "void testFindById_InvalidInput_ThrowsUserNotFoundException()" in content
        assert ".isInstanceOf(UserNotFoundException.class);" in content

    def test_possible_exception_failure_test(self, engine, naming):
        """선언이 없어도 추정 예외로 실패 테스트 생성"""
        content = ServiceTestGenerator(engine, naming).generate(scan(USER_SERVICE))

        assert "void testRename_ValidInput_Succeeds()" in content
        assert "userService.rename(id, name);" in content
        assert ".isInstanceOf(NumberFormatException.class);" in content

    def test_skips_getters_and_static_methods(self, engine, naming):
        """getter와 정적 메서드 제외"""
        content = ServiceTestGenerator(engine, naming).generate(scan(USER_SERVICE))
        assert "GetLabel" not in content
        assert "testCreate" not in content

    def test_imports(self, engine, naming):
        """다른 패키지 타입만 import, 정렬"""
        data = ServiceTestGenerator(engine, naming).build_data(scan(USER_SERVICE))

        assert "com.example.domain.User" in data["imports"]
        assert "org.mockito.Mock" in data["imports"]
        assert data["imports"] == sorted(data["imports"])
        assert not any(i.startswith("java.lang") for i in data["imports"])

    def test_exception_imports(self, engine, naming):
        """실패 테스트에서 단언하는 예외 타입 import"""
        generator = ServiceTestGenerator(engine, naming)
        model = scan(ACCOUNT_SERVICE)
        data = generator.build_data(model)
        content = generator.generate(model)

        assert "com.example.exception.UserNotFoundException" in data["imports"]
        assert "java.util.NoSuchElementException" in data["imports"]
        assert "import com.example.exception.UserNotFoundException;" in content
        assert ".isInstanceOf(UserNotFoundException.class);" in content
        assert ".isInstanceOf(NoSuchElementException.class);" in content

    def test_type_aware_result_assertion(self, engine, naming):
        """반환 타입별 검증 체인"""
        model = scan("""
            @Service class S {
                public Optional<String> find(Long id) { return null; }
                public boolean active(Long id) { return true; }
                public List<String> names(Long id) { return null; }
            }
        """)
        content = ServiceTestGenerator(engine, naming).generate(model)

        assert "Optional<String> result = s.find(id);\n\n        // Assert\n        assertThat(result).isPresent();" in content
        assert "assertThat(result).isTrue();" in content
        assert "assertThat(result).isNotNull().isNotEmpty();" in content

    def test_edge_cases_disabled_by_default(self, engine, naming):
        """기본 설정에서는 경계 사례 테스트 없음"""
        data = ServiceTestGenerator(engine, naming).build_data(scan(SIGNUP_SERVICE))
        assert [t["kind"] for t in data["tests"]] == ["success", "success"]

    def test_edge_case_tests(self, engine, naming):
        """필수/검증 매개변수는 예외 기대, 나머지는 예외 없음"""
        generator = ServiceTestGenerator(engine, naming, edge_cases=True)
        model = scan(SIGNUP_SERVICE)
        data = generator.build_data(model)
        content = generator.generate(model)

        assert [t["name"] for t in data["tests"] if t["kind"] == "edge"] == [
            "testRegister_NullEmail_ThrowsIllegalArgumentException",
            "testRegister_EmptyEmail_ThrowsIllegalArgumentException",
            "testTag_NullTags_DoesNotThrow",
            "testTag_EmptyTags_DoesNotThrow",
        ]
        assert 'String email = "";' in content
        assert "String email = null;" in content
        assert "List<String> tags = List.of();" in content
        assert "List<String> tags = null;" in content
        assert ".isInstanceOf(IllegalArgumentException.class);" in content
        assert "assertThatCode(() -> signupService.tag(tags))\n                .doesNotThrowAnyException();" in content
        assert "org.assertj.core.api.Assertions.assertThatCode" in data["static_imports"]

    def test_fallback_initialization_test(self, engine, naming):
        """테스트 대상 메서드가 없으면 초기화 테스트"""
        model = scan("@Service class EmptyService { private int x; }")
        content = ServiceTestGenerator(engine, naming).generate(model)

        assert "void testInitialization_DefaultConstructor_CreatesInstance()" in content
        assert "assertThat(emptyService).isNotNull();" in content
        assert "package" not in content.splitlines()[0]

    def test_overloaded_methods_unique_names(self, engine, naming):
        """오버로드 메서드의 테스트 이름 중복 방지"""
        model = scan("@Service class S { public void run() {} public void run(int x) {} }")
        data = ServiceTestGenerator(engine, naming).build_data(model)
        names = [t["name"] for t in data["tests"]]
        assert names == ["testRun_ValidInput_Succeeds", "testRun_ValidInput_Succeeds2"]

    def test_rejects_unsupported_model(self, engine, naming):
        """지원하지 않는 역할 -> ValueError"""
        with pytest.raises(ValueError):
            ServiceTestGenerator(engine, naming).generate(scan(USER_REPOSITORY))

    def test_naming_convention_applied(self, engine):
        """명명 규칙 변경 반영"""
        bdd = create_naming_strategy(NamingConvention.BDD)
        content = ServiceTestGenerator(engine, bdd).generate(scan(USER_SERVICE))
        assert "void shouldReturnsResultWhenValidInputAndFindById()" in content


class TestControllerTestGenerator:
    """컨트롤러 테스트 생성기 테스트"""

    def test_generates_web_mvc_test(self, engine, naming):
        """WebMvcTest, MockBean, 요청 경로/HTTP 메서드"""
        content = ControllerTestGenerator(engine, naming).generate(scan(USER_CONTROLLER))

        assert "@WebMvcTest(UserController.class)" in content
        assert "@MockBean\n    private UserService userService;" in content
        assert 'mockMvc.perform(get("/users/{id}", 1L))' in content
        assert ('mockMvc.perform(post("/users").contentType(MediaType.APPLICATION_JSON)'
                '.content("{}"))') in content
        assert 'put("/users/search")' in content
        assert ".andExpect(status().isOk());" in content
        assert ".andExpect(status().is4xxClientError());" in content
        assert "Helper" not in content

    def test_static_imports_per_verb(self, engine, naming):
        """사용된 HTTP 메서드만 정적 import"""
        data = ControllerTestGenerator(engine, naming).build_data(scan(USER_CONTROLLER))
        verbs = {i.rsplit(".", 1)[-1] for i in data["static_imports"]}
        assert {"get", "post", "put", "status"} == verbs
        assert "com.example.UserService" in data["imports"]

    def test_path_without_mapping_value(self, naming, engine):
        """매핑 경로가 없으면 /메서드명"""
        model = scan("@Controller class C { @GetMapping public String home() { return null; } }")
        data = ControllerTestGenerator(engine, naming).build_data(model)
        assert data["tests"][0]["request"] == 'get("/home")'


class TestRepositoryTestGenerator:
    """저장소 테스트 생성기 테스트"""

    def test_generates_data_jpa_test(self, engine, naming):
        """CRUD 테스트와 커스텀 쿼리 테스트"""
        content = RepositoryTestGenerator(engine, naming).generate(scan(USER_REPOSITORY))

        assert "@DataJpaTest" in content
        assert "private TestEntityManager entityManager;" in content
        assert "private UserRepository userRepository;" in content
        assert "User saved = userRepository.save(user);" in content
        assert "Long id = (Long) entityManager.getId(user);" in content
        assert "Optional<User> found = userRepository.findById(id);" in content
        assert "void testFindByEmail_ExistingData_ReturnsResult()" in content
        assert "long result = userRepository.countByActive(active);" in content
        assert "boolean result = userRepository.existsByName(name);" in content
        assert "Touch" not in content

    def test_entity_inferred_from_name(self, engine, naming):
        """제네릭 상위 타입이 없으면 이름에서 엔티티 추론"""
        model = scan("@Repository class OrderRepository {}")
        assert RepositoryTestGenerator.entity_types(model) == ("Order", "Long")

    def test_entity_fallback(self):
        """추론 불가 -> Entity"""
        assert RepositoryTestGenerator.entity_types(scan("@Repository class Store {}")) == ("Entity", "Long")


class TestIntegrationTestGenerator:
    """통합 테스트 생성기 테스트"""

    def test_service_integration_test(self, engine, naming):
        """웹 환경 없는 SpringBootTest"""
        generator = IntegrationTestGenerator(engine, naming)
        model = scan(USER_SERVICE)
        content = generator.generate(model)

        assert generator.test_class_name(model) == "UserServiceIntegrationTest"
        assert "@SpringBootTest(webEnvironment = SpringBootTest.WebEnvironment.NONE)" in content
        assert "class UserServiceIntegrationTest {" in content
        assert "void testContextLoads()" in content
        assert "TestRestTemplate" not in content

    def test_controller_integration_test(self, engine, naming):
        """컨트롤러는 RANDOM_PORT와 TestRestTemplate"""
        content = IntegrationTestGenerator(engine, naming).generate(scan(USER_CONTROLLER))

        assert "WebEnvironment.RANDOM_PORT" in content
        assert "private TestRestTemplate restTemplate;" in content
        assert '"/users/{id}", HttpMethod.GET, null, String.class, 1L);' in content

    def test_testcontainers(self, engine, naming):
        """Testcontainers 옵션"""
        content = IntegrationTestGenerator(engine, naming, use_testcontainers=True).generate(scan(USER_SERVICE))
        assert "@Testcontainers" in content
        assert "import org.testcontainers.junit.jupiter.Testcontainers;" in content

    def test_rejects_plain_class(self, engine, naming):
        """스테레오타입 없는 클래스 거부"""
        with pytest.raises(ValueError):
            IntegrationTestGenerator(engine, naming).generate(scan("class Plain {}"))


class TestGeneratorHelpers:
    """보조 함수 테스트"""

    def test_create_generators_by_category(self, engine, naming):
        """테스트 종류별 생성기 구성"""
        assert len(create_generators(engine, naming, TestCategory.UNIT)) == 3
        assert len(create_generators(engine, naming, TestCategory.ALL)) == 4
        integration = create_generators(engine, naming, TestCategory.INTEGRATION)
        assert [type(g) for g in integration] == [IntegrationTestGenerator]

    @pytest.mark.parametrize("qualified, package, expected", [
        ("com.example.domain.User", "com.example", True),
        ("com.example.User", "com.example", False),
        ("java.lang.String", "com.example", False),
        ("java.lang.reflect.Method", "com.example", True),
        ("User", "com.example", False),
    ])
    def test_is_importable(self, qualified, package, expected):
        """import 필요 여부"""
        assert is_importable(qualified, package) is expected

    @pytest.mark.parametrize("value, expected", [
        ('"/users"', "/users"),
        ('{"/a", "/b"}', "/a"),
        ("PATH_CONSTANT", ""),
        (None, ""),
    ])
    def test_strip_literal(self, value, expected):
        """어노테이션 문자열 리터럴 추출"""
        assert strip_literal(value) == expected
