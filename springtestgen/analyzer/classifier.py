"""
Architectural role classification.

스테레오타입 어노테이션의 정규화된 이름으로 역할을 결정합니다.
여러 스테레오타입이 동시에 붙어 있으면 소스 선언 순서와 무관하게
고정된 우선순위 테이블의 앞쪽 역할을 선택합니다.
"""

import logging
from typing import Iterable, Tuple

from ..models import AnnotationModel, ArchitecturalRole

logger = logging.getLogger(__name__)

# (역할, 해당 역할로 매핑되는 정규화된 이름들) - 우선순위 순서
ROLE_PRIORITY: Tuple[Tuple[ArchitecturalRole, frozenset], ...] = (
    (ArchitecturalRole.SERVICE, frozenset({
        "org.springframework.stereotype.Service",
    })),
    (ArchitecturalRole.CONTROLLER, frozenset({
        "org.springframework.stereotype.Controller",
        "org.springframework.web.bind.annotation.RestController",
    })),
    (ArchitecturalRole.REPOSITORY, frozenset({
        "org.springframework.stereotype.Repository",
    })),
    (ArchitecturalRole.COMPONENT, frozenset({
        "org.springframework.stereotype.Component",
    })),
    (ArchitecturalRole.CONFIGURATION, frozenset({
        "org.springframework.context.annotation.Configuration",
    })),
)


def classify(annotations: Iterable[AnnotationModel]) -> ArchitecturalRole:
    """
    어노테이션 목록으로 아키텍처 역할 결정

    Args:
        annotations: 클래스 선언 어노테이션

    Returns:
        ArchitecturalRole (매칭되는 스테레오타입이 없으면 OTHER)
    """
    present = {a.qualified_name for a in annotations or ()}
    for role, names in ROLE_PRIORITY:
        if present & names:
            logger.debug(f"Classified as {role.name}")
            return role
    return ArchitecturalRole.OTHER


class ClassClassifier:
    """ClassModel 역할 분류기"""

    def classify(self, annotations: Iterable[AnnotationModel]) -> ArchitecturalRole:
        return classify(annotations)

    def classify_model(self, model) -> ArchitecturalRole:
        return classify(model.annotations)
