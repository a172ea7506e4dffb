"""
Jinja2-based template engine.

TemplateLoader가 제공하는 템플릿에 데이터 맵을 바인딩하여 테스트 소스를 렌더링합니다.
정의되지 않은 변수 참조는 오류로 처리되며(StrictUndefined), 모든 렌더링 실패는
템플릿 이름이 포함된 TemplateRenderError로 변환됩니다.
"""

import logging
from typing import Any, Mapping, Optional

from jinja2 import Environment, FunctionLoader, StrictUndefined, TemplateError, TemplateNotFound

from ..errors import TemplateLoadError, TemplateRenderError
from .loader import TemplateLoader

logger = logging.getLogger(__name__)

# Java 타입별 기본 인자 값
JAVA_DEFAULT_VALUES = {
    "String": '"test"',
    "int": "1",
    "Integer": "1",
    "long": "1L",
    "Long": "1L",
    "double": "1.0",
    "Double": "1.0",
    "float": "1.0f",
    "Float": "1.0f",
    "boolean": "true",
    "Boolean": "true",
    "char": "'a'",
    "short": "(short) 1",
    "byte": "(byte) 1",
    "List": "List.of()",
    "Set": "Set.of()",
    "Map": "Map.of()",
}


class TemplateEngine:
    """템플릿 렌더링 엔진"""

    def __init__(self, loader: Optional[TemplateLoader] = None):
        """
        초기화

        Args:
            loader: 템플릿 로더 (기본: 내장 템플릿 디렉토리)
        """
        self.loader = loader or TemplateLoader()

        # Jinja2 환경 설정
        self.env = Environment(
            loader=FunctionLoader(self._load),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            autoescape=False,
        )

        # 커스텀 필터 등록
        self.env.filters['lower_first'] = self._lower_first
        self.env.filters['upper_first'] = self._upper_first
        self.env.filters['java_default'] = self._java_default

    def _load(self, name: str):
        # FunctionLoader는 None을 반환하면 TemplateNotFound를 발생시킴
        try:
            return self.loader.load_template(name)
        except TemplateLoadError as e:
            logger.debug(f"{e}")
            return None

    def render(self, template_name: str, data: Mapping[str, Any]) -> str:
        """
        템플릿 렌더링

        Args:
            template_name: 템플릿 논리 이름
            data: 템플릿 데이터 맵

        Returns:
            렌더링된 소스 텍스트

        Raises:
            ValueError: 빈 템플릿 이름, None 데이터
            TemplateRenderError: 템플릿 누락 또는 렌더링 오류
        """
        if not isinstance(template_name, str) or not template_name.strip():
            raise ValueError("Template name cannot be None or blank")
        if data is None:
            raise ValueError("Template data cannot be None")

        try:
            template = self.env.get_template(template_name)
            return template.render(**dict(data))
        except TemplateNotFound as e:
            message = f"Template not found: {self.loader.template_path(template_name)}"
            logger.error(f"템플릿을 찾을 수 없음: {template_name}")
            raise TemplateRenderError(template_name, message) from e
        except TemplateError as e:
            message = e.message or str(e) or type(e).__name__
            logger.error(f"템플릿 렌더링 실패: {template_name} ({message})")
            raise TemplateRenderError(template_name, message) from e
        except Exception as e:
            # 사용자 템플릿의 표현식/필터에서 발생한 예외
            message = f"{type(e).__name__}: {e}"
            logger.error(f"템플릿 렌더링 실패: {template_name} ({message})")
            raise TemplateRenderError(template_name, message) from e

    def clear_cache(self):
        """로더 캐시와 컴파일된 템플릿 캐시 모두 비움"""
        self.loader.clear_cache()
        if self.env.cache is not None:
            self.env.cache.clear()

    @staticmethod
    def _lower_first(text: str) -> str:
        """첫 글자 소문자 필터"""
        return text[:1].lower() + text[1:] if text else text

    @staticmethod
    def _upper_first(text: str) -> str:
        """첫 글자 대문자 필터"""
        return text[:1].upper() + text[1:] if text else text

    @staticmethod
    def _java_default(type_name: str) -> str:
        """매개변수 타입의 기본 인자 값 필터"""
        return java_default_value(type_name)


def java_default_value(type_name: Optional[str]) -> str:
    """
    Java 타입 기본값 (제네릭 인자는 무시, 알 수 없는 타입은 null)

    예: "List<User>" -> "List.of()", "Long" -> "1L", "User" -> "null"
    """
    if not type_name:
        return "null"
    base = type_name.split("<", 1)[0].strip()
    base = base.rsplit(".", 1)[-1]
    return JAVA_DEFAULT_VALUES.get(base, "null")
