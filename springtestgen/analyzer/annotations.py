"""
Annotation metadata extraction.

이 모듈은 javalang 어노테이션 노드를 (단순 이름, 정규화된 이름, 속성 맵)으로
정규화합니다. 심볼 해석이 실패하면 정적 대체 테이블을 사용하고, 테이블에도
없으면 단순 이름을 그대로 사용합니다. 추출 과정은 예외를 던지지 않습니다.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional

import javalang  # type: ignore

from ..models import AnnotationModel
from .types import expression_to_string

logger = logging.getLogger(__name__)


# 단순 이름 -> 정규화된 이름 (심볼 해석 실패 시 사용)
FALLBACK_QUALIFIED_NAMES: Mapping[str, str] = MappingProxyType({
    # Spring stereotypes
    "Service": "org.springframework.stereotype.Service",
    "Controller": "org.springframework.stereotype.Controller",
    "RestController": "org.springframework.web.bind.annotation.RestController",
    "Repository": "org.springframework.stereotype.Repository",
    "Component": "org.springframework.stereotype.Component",
    "Configuration": "org.springframework.context.annotation.Configuration",
    # Injection
    "Autowired": "org.springframework.beans.factory.annotation.Autowired",
    "Value": "org.springframework.beans.factory.annotation.Value",
    "Qualifier": "org.springframework.beans.factory.annotation.Qualifier",
    "Inject": "jakarta.inject.Inject",
    # Web mapping / request binding
    "RequestMapping": "org.springframework.web.bind.annotation.RequestMapping",
    "GetMapping": "org.springframework.web.bind.annotation.GetMapping",
    "PostMapping": "org.springframework.web.bind.annotation.PostMapping",
    "PutMapping": "org.springframework.web.bind.annotation.PutMapping",
    "DeleteMapping": "org.springframework.web.bind.annotation.DeleteMapping",
    "PatchMapping": "org.springframework.web.bind.annotation.PatchMapping",
    "RequestBody": "org.springframework.web.bind.annotation.RequestBody",
    "RequestParam": "org.springframework.web.bind.annotation.RequestParam",
    "PathVariable": "org.springframework.web.bind.annotation.PathVariable",
    # Validation
    "NotNull": "jakarta.validation.constraints.NotNull",
    "NotBlank": "jakarta.validation.constraints.NotBlank",
    "NotEmpty": "jakarta.validation.constraints.NotEmpty",
    "Size": "jakarta.validation.constraints.Size",
    "Min": "jakarta.validation.constraints.Min",
    "Max": "jakarta.validation.constraints.Max",
    "Pattern": "jakarta.validation.constraints.Pattern",
    "Email": "jakarta.validation.constraints.Email",
    "Valid": "jakarta.validation.Valid",
    "Validated": "org.springframework.validation.annotation.Validated",
})


class NullSymbolResolver:
    """항상 해석 실패를 반환하는 리졸버"""

    def resolve_qualified_name(self, name: str) -> Optional[str]:
        return None


class ImportSymbolResolver:
    """
    컴파일 단위의 import 선언 기반 리졸버 (단일 파일 범위)

    `import a.b.C;` 형태의 단일 타입 import만 해석합니다.
    와일드카드/static import는 해석하지 않습니다.
    """

    def __init__(self, imports: Optional[Dict[str, str]] = None):
        self.imports: Dict[str, str] = dict(imports or {})

    @classmethod
    def from_compilation_unit(cls, tree) -> "ImportSymbolResolver":
        imports: Dict[str, str] = {}
        for imp in getattr(tree, "imports", None) or []:
            if imp.static or imp.wildcard:
                continue
            simple = imp.path.rsplit(".", 1)[-1]
            imports.setdefault(simple, imp.path)
        return cls(imports)

    def resolve_qualified_name(self, name: str) -> Optional[str]:
        if not name:
            return None
        head, _, rest = name.partition(".")
        qualified = self.imports.get(head)
        if qualified is None:
            return None
        return f"{qualified}.{rest}" if rest else qualified


def infer_qualified_name(simple_name: str) -> str:
    """대체 테이블 조회, 없으면 단순 이름 그대로 반환"""
    return FALLBACK_QUALIFIED_NAMES.get(simple_name, simple_name)


def resolve_qualified_name(name: str, resolver=None) -> str:
    """
    어노테이션 이름을 정규화된 이름으로 해석

    Args:
        name: 소스에 작성된 이름 (단순 또는 정규화)
        resolver: resolve_qualified_name(name) -> Optional[str] 를 제공하는 객체

    Returns:
        정규화된 이름 (해석 불가 시 대체 테이블 또는 단순 이름)
    """
    if "." in name:
        return name
    if resolver is not None:
        try:
            resolved = resolver.resolve_qualified_name(name)
        except Exception as e:
            logger.debug(f"Symbol resolution failed for {name}: {e}")
            resolved = None
        if resolved:
            return resolved
    return infer_qualified_name(name)


def extract_annotation(node, resolver=None) -> AnnotationModel:
    """단일 어노테이션 노드 추출"""
    written = node.name
    simple_name = written.rsplit(".", 1)[-1]
    qualified_name = resolve_qualified_name(written, resolver)
    attributes = _extract_attributes(node)

    logger.debug(f"Extracted annotation: {simple_name} (qualified: {qualified_name})")
    return AnnotationModel(simple_name, qualified_name, attributes)


def extract_annotations(nodes: Iterable, resolver=None) -> List[AnnotationModel]:
    """어노테이션 목록 추출 (선언 순서 유지)"""
    return [extract_annotation(node, resolver) for node in (nodes or [])]


def _extract_attributes(node) -> Dict[str, str]:
    element = getattr(node, "element", None)
    if element is None:
        return {}

    if isinstance(element, list) and all(
            isinstance(e, javalang.tree.ElementValuePair) for e in element):
        return {pair.name: expression_to_string(pair.value) for pair in element}

    return {"value": expression_to_string(element)}
