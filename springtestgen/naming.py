"""
Test method naming strategies.

(action, scenario, expected) 조합을 테스트 메서드 식별자로 변환합니다.
세 가지 규칙만 제공하며 NamingConvention 열거형으로 선택합니다.
모든 전략은 상태가 없는 순수 함수입니다.
"""

import re
from enum import Enum
from typing import Optional, Union

_WORD = re.compile(r"[^\W_]+")


class NamingConvention(Enum):
    """테스트 메서드 명명 규칙"""
    METHOD_SCENARIO_EXPECTED = "method-scenario"
    GIVEN_WHEN_THEN = "given-when-then"
    BDD = "bdd"

    @classmethod
    def parse(cls, value: Union[str, "NamingConvention"]) -> "NamingConvention":
        """
        CLI 문자열/열거형 이름을 NamingConvention으로 변환 (대소문자 무시)

        Raises:
            ValueError: 알 수 없는 규칙
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower().replace("_", "-")
        if key in _ALIASES:
            return _ALIASES[key]
        raise ValueError(f"Unknown naming convention: {value}")


_ALIASES = {
    "method-scenario": NamingConvention.METHOD_SCENARIO_EXPECTED,
    "method-scenario-expected": NamingConvention.METHOD_SCENARIO_EXPECTED,
    "given-when-then": NamingConvention.GIVEN_WHEN_THEN,
    "given-when": NamingConvention.GIVEN_WHEN_THEN,
    "bdd": NamingConvention.BDD,
}


def to_word(text: str, what: str = "argument") -> str:
    """
    임의 문자열을 식별자 조각으로 변환

    영숫자 구간마다 첫 글자를 대문자로 바꾸고 이어 붙입니다 (나머지 글자 유지).
    영숫자가 전혀 없으면 코드 포인트로 인코딩합니다 (예: "?" -> "U003f").

    Raises:
        ValueError: None, 빈 문자열, 문자열이 아닌 값
    """
    if not isinstance(text, str) or not text.strip():
        raise ValueError(f"Naming {what} cannot be None or blank")

    words = _WORD.findall(text)
    if not words:
        return "".join(f"U{ord(ch):04x}" for ch in text.strip())
    return "".join(w[:1].upper() + w[1:] for w in words)


class NamingStrategy:
    """명명 전략 기본 클래스"""

    convention: NamingConvention

    def name(self, action: str, scenario: Optional[str] = None, expected: Optional[str] = None) -> str:
        """
        테스트 메서드 이름 생성

        Args:
            action: 테스트 대상 동작 (보통 메서드 이름)
            scenario: 입력/상황 설명 (선택)
            expected: 기대 결과 (선택, scenario 필요)

        Raises:
            ValueError: 빈 인자, scenario 없이 expected 지정
        """
        a = to_word(action, "action")
        if scenario is None:
            if expected is not None:
                raise ValueError("Expected outcome requires a scenario")
            return self._one(a)
        s = to_word(scenario, "scenario")
        if expected is None:
            return self._two(a, s)
        return self._three(a, s, to_word(expected, "expected outcome"))

    def _one(self, action: str) -> str:
        raise NotImplementedError

    def _two(self, action: str, scenario: str) -> str:
        raise NotImplementedError

    def _three(self, action: str, scenario: str, expected: str) -> str:
        raise NotImplementedError


class MethodScenarioExpectedStrategy(NamingStrategy):
    """testAction_Scenario_Expected"""

    convention = NamingConvention.METHOD_SCENARIO_EXPECTED

    def _one(self, action):
        return f"test{action}"

    def _two(self, action, scenario):
        return f"test{action}_{scenario}"

    def _three(self, action, scenario, expected):
        return f"test{action}_{scenario}_{expected}"


class GivenWhenThenStrategy(NamingStrategy):
    """givenScenario_whenAction_thenExpected"""

    convention = NamingConvention.GIVEN_WHEN_THEN

    def _one(self, action):
        return f"when{action}"

    def _two(self, action, scenario):
        return f"given{scenario}_when{action}"

    def _three(self, action, scenario, expected):
        return f"given{scenario}_when{action}_then{expected}"


class BddStrategy(NamingStrategy):
    """shouldExpectedWhenScenarioAndAction"""

    convention = NamingConvention.BDD

    def _one(self, action):
        return f"should{action}"

    def _two(self, action, scenario):
        return f"should{action}When{scenario}"

    def _three(self, action, scenario, expected):
        return f"should{expected}When{scenario}And{action}"


_STRATEGIES = {
    NamingConvention.METHOD_SCENARIO_EXPECTED: MethodScenarioExpectedStrategy,
    NamingConvention.GIVEN_WHEN_THEN: GivenWhenThenStrategy,
    NamingConvention.BDD: BddStrategy,
}


def create_naming_strategy(convention: Union[str, NamingConvention]) -> NamingStrategy:
    """규칙(열거형 또는 CLI 별칭)에 해당하는 전략 인스턴스 생성"""
    return _STRATEGIES[NamingConvention.parse(convention)]()
