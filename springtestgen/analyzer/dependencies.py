"""
Dependency injection detection.

필드 주입(@Autowired, @Inject, @Value, @Qualifier)과 생성자 주입 관례를
분석하여 주입 필드와 의존성 타입 목록을 계산합니다.
"""

import logging
from typing import List, Optional, Sequence

from ..models import AnnotationModel
from .annotations import extract_annotations
from .types import type_to_string, modifiers_of

logger = logging.getLogger(__name__)

CONSTRUCTOR_INJECTION_MARKERS = frozenset({"Autowired", "Inject"})
LOMBOK_CONSTRUCTOR_MARKERS = frozenset({"RequiredArgsConstructor", "AllArgsConstructor"})


def find_primary_constructor(constructors: Sequence):
    """
    주입용 기본 생성자 선택

    @Autowired/@Inject 생성자 > 유일한 생성자 > 매개변수가 가장 많은 생성자 순으로 선택합니다.

    Returns:
        javalang ConstructorDeclaration 또는 None
    """
    if not constructors:
        return None

    for ctor in constructors:
        if _has_injection_marker(ctor):
            return ctor

    if len(constructors) == 1:
        return constructors[0]

    # 동일 개수일 경우 먼저 선언된 생성자
    best = constructors[0]
    for ctor in constructors[1:]:
        if len(ctor.parameters or []) > len(best.parameters or []):
            best = ctor
    return best


def _has_injection_marker(ctor) -> bool:
    for annotation in getattr(ctor, "annotations", None) or []:
        if annotation.name.rsplit(".", 1)[-1] in CONSTRUCTOR_INJECTION_MARKERS:
            return True
    return False


class DependencyDetector:
    """
    클래스 단위 의존성 분석기

    생성 시점에 생성자/클래스 어노테이션을 한 번 분석하고,
    필드별 주입 여부 판단과 전체 의존성 목록을 제공합니다.
    """

    def __init__(self, class_decl, resolver=None):
        self.class_decl = class_decl
        self.resolver = resolver
        self.constructor = find_primary_constructor(getattr(class_decl, "constructors", None) or [])
        self.constructor_types = [type_to_string(p.type)
                                  for p in (self.constructor.parameters or [])] if self.constructor else []
        self.lombok_constructor = any(
            a.name.rsplit(".", 1)[-1] in LOMBOK_CONSTRUCTOR_MARKERS
            for a in getattr(class_decl, "annotations", None) or []
        )

    def is_injected_field(self, field_decl, annotations: Optional[List[AnnotationModel]] = None) -> bool:
        """
        필드 주입 여부

        Args:
            field_decl: javalang FieldDeclaration
            annotations: 이미 추출된 필드 어노테이션 (없으면 새로 추출)
        """
        if annotations is None:
            annotations = extract_annotations(field_decl.annotations, self.resolver)
        if any(a.is_injection for a in annotations):
            return True

        mods = modifiers_of(field_decl)
        if "static" in mods:
            return False

        field_type = type_to_string(field_decl.type)
        if self.constructor is not None:
            if field_type in self.constructor_types:
                return True

        return self.lombok_constructor and "final" in mods

    def extract_dependencies(self) -> List[str]:
        """
        주입 필드 타입 + 생성자 매개변수 타입 (중복 제거, 최초 등장 순서)
        """
        dependencies: List[str] = []

        for field_decl in getattr(self.class_decl, "fields", None) or []:
            if self.is_injected_field(field_decl):
                field_type = type_to_string(field_decl.type)
                if field_type not in dependencies:
                    dependencies.append(field_type)
                    logger.debug(f"Found injected field dependency: {field_type}")

        for param_type in self.constructor_types:
            if param_type not in dependencies:
                dependencies.append(param_type)
                logger.debug(f"Found constructor dependency: {param_type}")

        return dependencies
