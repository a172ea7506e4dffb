"""
Method declaration analysis.

javalang MethodDeclaration을 MethodModel로 변환합니다. 선언된 throws 절은
그대로 복사하고, 메서드 본문에서 발생 가능한 예외를 휴리스틱으로 추정합니다.
추정은 완전하지 않으며 누락(false negative)이 있을 수 있습니다.
"""

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

import javalang  # type: ignore

from ..models import AccessLevel, MethodModel, ParameterModel
from .annotations import extract_annotations
from .types import (
    base_type_name, iter_nodes, modifiers_of, qualified_type_string, type_to_string
)

logger = logging.getLogger(__name__)

VALIDATION_ANNOTATION_NAMES = frozenset({
    "NotNull", "NotBlank", "NotEmpty", "Size", "Min", "Max",
    "Pattern", "Email", "Valid", "Validated", "Positive", "Negative",
    "PositiveOrZero", "NegativeOrZero", "Past", "Future",
    "PastOrPresent", "FutureOrPresent", "DecimalMin", "DecimalMax",
    "Digits", "AssertTrue", "AssertFalse",
})

REQUIRED_ANNOTATION_NAMES = frozenset({"NotNull", "NotBlank", "NotEmpty"})

# 호출 메서드 이름 -> 발생 가능한 비검사 예외
CALL_EXCEPTION_HINTS: Mapping[str, str] = MappingProxyType({
    "parseInt": "NumberFormatException",
    "parseLong": "NumberFormatException",
    "parseDouble": "NumberFormatException",
    "parseFloat": "NumberFormatException",
    "parseShort": "NumberFormatException",
    "parseByte": "NumberFormatException",
    "requireNonNull": "NullPointerException",
})

EXCEPTION_SUFFIXES = ("Exception", "Error")

# java.lang 밖에 있어 import가 필요한 JDK 예외
JDK_EXCEPTION_NAMES: Mapping[str, str] = MappingProxyType({
    "NoSuchElementException": "java.util.NoSuchElementException",
    "ConcurrentModificationException": "java.util.ConcurrentModificationException",
    "EmptyStackException": "java.util.EmptyStackException",
    "IOException": "java.io.IOException",
    "UncheckedIOException": "java.io.UncheckedIOException",
    "FileNotFoundException": "java.io.FileNotFoundException",
    "DateTimeParseException": "java.time.format.DateTimeParseException",
    "TimeoutException": "java.util.concurrent.TimeoutException",
    "ExecutionException": "java.util.concurrent.ExecutionException",
})


def access_level(modifiers, in_interface: bool = False) -> AccessLevel:
    if "public" in modifiers:
        return AccessLevel.PUBLIC
    if "protected" in modifiers:
        return AccessLevel.PROTECTED
    if "private" in modifiers:
        return AccessLevel.PRIVATE
    return AccessLevel.PUBLIC if in_interface else AccessLevel.PACKAGE_PRIVATE


def analyze_parameter(param, resolver=None) -> ParameterModel:
    """단일 매개변수 분석"""
    declared = type_to_string(param.type)
    if getattr(param, "varargs", False):
        declared += "..."
    annotations = extract_annotations(param.annotations, resolver)
    required = any(a.name in REQUIRED_ANNOTATION_NAMES for a in annotations)
    generic_type = declared if "<" in declared and ">" in declared else None

    return ParameterModel(
        name=param.name,
        type=declared,
        qualified_type=qualified_type_string(param.type, resolver),
        annotations=annotations,
        required=required,
        generic_type=generic_type,
    )


def has_validation(params: List[ParameterModel]) -> bool:
    return any(a.name in VALIDATION_ANNOTATION_NAMES
               for p in params for a in p.annotations)


def declared_exceptions(method) -> List[str]:
    return list(method.throws or [])


def qualify_exceptions(names: List[str], resolver=None) -> List[str]:
    """
    예외 이름 정규화 (import 선언 > JDK 예외 테이블 > 작성된 이름)

    예: import com.example.exception.UserNotFoundException 이 있으면
        "UserNotFoundException" -> "com.example.exception.UserNotFoundException"
    """
    qualified: List[str] = []
    for name in names:
        resolved = resolver.resolve_qualified_name(name) if resolver is not None else None
        resolved = resolved or JDK_EXCEPTION_NAMES.get(name, name)
        if resolved not in qualified:
            qualified.append(resolved)
    return qualified


def detect_possible_exceptions(method) -> List[str]:
    """
    메서드 본문에서 발생 가능한 예외 타입 추정

    - throw new X(...) 문
    - throw e (catch 매개변수/지역 변수/메서드 매개변수 타입으로 해석)
    - orElseThrow(...) 내부의 예외 생성자, 인자 없는 orElseThrow()
    - 알려진 호출 패턴 (parseInt 등), 배열 인덱싱
    """
    found: List[str] = []

    def add(name: Optional[str]):
        if name and name not in found:
            found.append(name)

    body = getattr(method, "body", None)
    if not body:
        return found

    variable_types = _collect_variable_types(method)
    tree = javalang.tree

    for node in iter_nodes(body):
        if isinstance(node, tree.ThrowStatement):
            for name in _thrown_types(node.expression, variable_types):
                add(name)
        elif isinstance(node, tree.MethodInvocation):
            if node.member == "orElseThrow":
                if not node.arguments:
                    add("NoSuchElementException")
                for inner in iter_nodes(node.arguments):
                    if isinstance(inner, tree.ClassCreator):
                        name = base_type_name(inner.type)
                        if name.endswith(EXCEPTION_SUFFIXES):
                            add(name)
            else:
                add(CALL_EXCEPTION_HINTS.get(node.member))
        elif isinstance(node, tree.ArraySelector):
            add("ArrayIndexOutOfBoundsException")

    if found:
        logger.debug(f"Possible exceptions for {method.name}: {found}")
    return found


def _thrown_types(expression, variable_types: Dict[str, List[str]]) -> List[str]:
    tree = javalang.tree
    if isinstance(expression, tree.ClassCreator):
        return [base_type_name(expression.type)]
    if isinstance(expression, tree.MemberReference) and not expression.qualifier:
        return variable_types.get(expression.member, [])
    return []


def _collect_variable_types(method) -> Dict[str, List[str]]:
    tree = javalang.tree
    variables: Dict[str, List[str]] = {}
    for param in getattr(method, "parameters", None) or []:
        variables[param.name] = [base_type_name(param.type)]
    for node in iter_nodes(method.body):
        if isinstance(node, tree.CatchClauseParameter):
            variables[node.name] = [t.rsplit(".", 1)[-1] for t in node.types or []]
        elif isinstance(node, tree.LocalVariableDeclaration):
            for decl in node.declarators:
                variables[decl.name] = [base_type_name(node.type)]
    return variables


def analyze_method(method, resolver=None, in_interface: bool = False) -> MethodModel:
    """
    메서드 선언 분석

    Args:
        method: javalang MethodDeclaration
        resolver: 심볼 리졸버 (선택)
        in_interface: 인터페이스 멤버 여부 (기본 접근 제한자가 public)

    Returns:
        MethodModel
    """
    mods = modifiers_of(method)
    params = [analyze_parameter(p, resolver) for p in method.parameters or []]
    annotations = extract_annotations(method.annotations, resolver)

    is_abstract = "abstract" in mods or (
        in_interface and method.body is None and not ({"default", "static"} & mods))

    declared = declared_exceptions(method)
    possible = detect_possible_exceptions(method)

    model = MethodModel(
        name=method.name,
        return_type=type_to_string(method.return_type),
        qualified_return_type=qualified_type_string(method.return_type, resolver),
        parameters=params,
        annotations=annotations,
        declared_exceptions=declared,
        possible_exceptions=possible,
        qualified_exceptions=qualify_exceptions(declared + list(possible), resolver),
        has_validation=has_validation(params),
        access=access_level(mods, in_interface),
        is_static="static" in mods,
        is_abstract=is_abstract,
    )
    logger.debug(f"Analyzed method: {model.name} with {len(params)} parameters")
    return model


def analyze_methods(methods, resolver=None, in_interface: bool = False) -> List[MethodModel]:
    return [analyze_method(m, resolver, in_interface) for m in methods or []]
