"""
Type-aware AssertJ assertions.

반환 타입에 맞는 assertThat(...) 검증 체인을 선택합니다.
Optional은 값 존재, 컬렉션/문자열은 비어 있지 않음, 숫자는 양수,
boolean은 참을 기대하며 그 밖의 타입은 null 여부만 확인합니다.
"""

from typing import Optional

PRIMITIVE_TYPES = frozenset({"int", "long", "double", "float", "short", "byte", "char", "boolean"})

BOOLEAN_TYPES = frozenset({"boolean", "Boolean"})
STRING_TYPES = frozenset({"String", "CharSequence"})
NUMERIC_TYPES = frozenset({
    "int", "Integer", "long", "Long", "double", "Double", "float", "Float",
    "short", "Short", "byte", "Byte", "BigDecimal", "BigInteger",
})
COLLECTION_TYPES = frozenset({
    "List", "Set", "Collection", "Map", "Iterable", "Queue", "Deque",
    "SortedSet", "SortedMap", "ArrayList", "HashSet", "HashMap", "LinkedList",
})
OPTIONAL_TYPES = frozenset({"Optional"})

DEFAULT_ASSERTION = "isNotNull()"


def simple_type(type_name: str) -> str:
    """제네릭 인자와 패키지를 제거한 타입 이름 (예: java.util.List<User> -> List)"""
    return type_name.split("<", 1)[0].strip().rsplit(".", 1)[-1]


def result_assertion(return_type: Optional[str]) -> str:
    """
    assertThat(result) 뒤에 붙일 검증 체인

    Args:
        return_type: 메서드 반환 타입 (선언된 문자열)

    Returns:
        예: "isPresent()", "isNotNull().isNotEmpty()" (void 또는 빈 값이면 "")
    """
    if not return_type or return_type == "void":
        return ""
    if return_type.endswith("[]"):
        return "isNotNull().isNotEmpty()"

    base = simple_type(return_type)
    if base in OPTIONAL_TYPES:
        return "isPresent()"
    if base in BOOLEAN_TYPES:
        return "isTrue()"
    if base in STRING_TYPES or base in COLLECTION_TYPES:
        return "isNotNull().isNotEmpty()"
    if base in NUMERIC_TYPES:
        return "isNotNull().isPositive()"
    return DEFAULT_ASSERTION
