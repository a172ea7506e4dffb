"""
Edge-case argument selection.

메서드 매개변수마다 null/빈 값 인자 조합을 만듭니다. 필수(@NotNull 등)이거나
검증 어노테이션이 있는 메서드는 IllegalArgumentException을, 그 밖에는
예외 없이 처리되기를 기대합니다.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .assertions import PRIMITIVE_TYPES, STRING_TYPES, simple_type
from .models import MethodModel, ParameterModel

logger = logging.getLogger(__name__)

EMPTY_COLLECTION_VALUES = {
    "List": "List.of()",
    "Collection": "List.of()",
    "Iterable": "List.of()",
    "Set": "Set.of()",
    "Map": "Map.of()",
}


@dataclass(frozen=True)
class EdgeCase:
    """매개변수 하나를 경계 값으로 바꾼 호출"""
    parameter_index: int
    parameter_name: str
    scenario: str
    value: str
    rejects: bool


def empty_value(type_name: str) -> Optional[str]:
    """빈 문자열/컬렉션 리터럴 (해당 없으면 None)"""
    if type_name.endswith("[]") or type_name.endswith("..."):
        return None
    base = simple_type(type_name)
    if base in STRING_TYPES:
        return '""'
    return EMPTY_COLLECTION_VALUES.get(base)


def is_nullable(param: ParameterModel) -> bool:
    return param.type not in PRIMITIVE_TYPES


def edge_cases_for(method: MethodModel) -> List[EdgeCase]:
    """
    메서드의 null/빈 값 경계 사례 목록 (매개변수 선언 순서)

    Returns:
        EdgeCase 목록 (원시 타입 매개변수는 null 사례 제외)
    """
    cases: List[EdgeCase] = []
    for index, param in enumerate(method.parameters):
        rejects = param.required or method.has_validation
        if is_nullable(param):
            cases.append(EdgeCase(index, param.name, f"null {param.name}", "null", rejects))
        empty = empty_value(param.type)
        if empty is not None:
            cases.append(EdgeCase(index, param.name, f"empty {param.name}", empty, rejects))

    logger.debug(f"Edge cases for {method.name}: {len(cases)}")
    return cases
