"""
Helpers for rendering javalang nodes back to Java source text.

javalang 트리에는 원본 소스 문자열이 보존되지 않으므로 타입/표현식 노드를
사람이 작성한 형태와 가까운 문자열로 다시 조립합니다 (최선의 노력).
"""

from typing import Iterable, Optional, Set

import javalang  # type: ignore


def type_to_string(t) -> str:
    """
    javalang Type 노드를 Java 타입 문자열로 변환

    Args:
        t: BasicType / ReferenceType 노드 (None이면 void)

    Returns:
        예: "List<User>", "Map.Entry<K, V>", "int[]"
    """
    if t is None:
        return "void"

    text = getattr(t, "name", None) or "Object"
    args = getattr(t, "arguments", None)
    if args:
        text += "<" + ", ".join(_type_argument_to_string(a) for a in args) + ">"

    sub_type = getattr(t, "sub_type", None)
    if sub_type is not None:
        text += "." + type_to_string(sub_type)

    dims = getattr(t, "dimensions", None) or []
    text += "[]" * len(dims)
    return text


def _type_argument_to_string(arg) -> str:
    inner = getattr(arg, "type", None)
    pattern = getattr(arg, "pattern_type", None)
    if pattern in ("extends", "super"):
        return f"? {pattern} {type_to_string(inner)}"
    if inner is None:
        return "?"
    return type_to_string(inner)


def base_type_name(t) -> str:
    """제네릭 인자와 배열 차원을 제외한 기본 타입 이름"""
    if t is None:
        return "void"
    return getattr(t, "name", None) or "Object"


def qualified_type_string(t, resolver=None) -> str:
    """
    타입 문자열의 기본 이름을 리졸버로 정규화 (실패 시 선언된 문자열 그대로)

    예: import java.util.List 가 있으면 "List<User>" -> "java.util.List<User>"
    """
    text = type_to_string(t)
    if resolver is None or t is None or isinstance(t, javalang.tree.BasicType):
        return text
    base = base_type_name(t)
    resolved = resolver.resolve_qualified_name(base)
    if not resolved:
        return text
    return resolved + text[len(base):]


def modifiers_of(node) -> Set[str]:
    return set(getattr(node, "modifiers", None) or ())


def expression_to_string(node) -> str:
    """
    어노테이션 값/throw 대상 등 표현식 노드를 소스 형태 문자열로 변환

    지원하지 않는 노드는 클래스 이름으로 대체됩니다.
    """
    if node is None:
        return ""
    if isinstance(node, str):
        return node
    if isinstance(node, (list, tuple)):
        return "{" + ", ".join(expression_to_string(n) for n in node) + "}"

    tree = javalang.tree
    if isinstance(node, tree.Literal):
        text = node.value
    elif isinstance(node, tree.MemberReference):
        text = f"{node.qualifier}.{node.member}" if node.qualifier else node.member
    elif isinstance(node, tree.ElementArrayValue):
        text = "{" + ", ".join(expression_to_string(v) for v in (node.values or [])) + "}"
    elif isinstance(node, tree.ClassReference):
        text = f"{type_to_string(node.type)}.class"
    elif isinstance(node, tree.Annotation):
        text = "@" + node.name
    elif isinstance(node, tree.BinaryOperation):
        text = (f"{expression_to_string(node.operandl)} {node.operator} "
                f"{expression_to_string(node.operandr)}")
    elif isinstance(node, tree.ClassCreator):
        args = ", ".join(expression_to_string(a) for a in (node.arguments or []))
        text = f"new {type_to_string(node.type)}({args})"
    elif isinstance(node, tree.MethodInvocation):
        args = ", ".join(expression_to_string(a) for a in (node.arguments or []))
        prefix = f"{node.qualifier}." if node.qualifier else ""
        text = f"{prefix}{node.member}({args})"
    else:
        return type(node).__name__

    prefix = "".join(getattr(node, "prefix_operators", None) or ())
    return prefix + text


def iter_nodes(node) -> Iterable:
    """노드 하위 트리를 전위 순회 (소스 순서 유지)"""
    if node is None:
        return
    if isinstance(node, (list, tuple)):
        for item in node:
            yield from iter_nodes(item)
        return
    if not isinstance(node, javalang.ast.Node):
        return
    yield node
    for child in node.children:
        if isinstance(child, (list, tuple, javalang.ast.Node)):
            yield from iter_nodes(child)


def find_first(node, node_type) -> Optional[object]:
    for child in iter_nodes(node):
        if isinstance(child, node_type):
            return child
    return None
