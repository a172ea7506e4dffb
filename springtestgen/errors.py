"""
Exception types for the test generation system.

템플릿 로드/렌더링 및 파일 쓰기 실패를 호출자에게 전달하기 위한 예외 계층입니다.
잘못된 인자(빈 이름, None 내용 등)는 ValueError로 즉시 보고합니다.
"""

from pathlib import Path
from typing import Optional, Union


class SpringTestGenError(Exception):
    """모든 생성기 예외의 기본 클래스"""


class TemplateLoadError(SpringTestGenError):
    """템플릿 리소스를 찾거나 읽을 수 없음"""

    def __init__(self, template_name: str, path: Union[str, Path], reason: Optional[str] = None):
        self.template_name = template_name
        self.path = Path(path)
        message = f"Template not found: {self.path}"
        if reason:
            message = f"Failed to load template {self.path}: {reason}"
        super().__init__(message)


class TemplateRenderError(SpringTestGenError):
    """템플릿 렌더링 실패 (누락된 템플릿 또는 바인딩 오류)"""

    def __init__(self, template_name: str, message: str):
        self.template_name = template_name
        super().__init__(f"Failed to process template {template_name}: {message}")


class TestFileWriteError(SpringTestGenError):
    """테스트 파일 또는 디렉토리 생성 실패"""

    __test__ = False

    def __init__(self, path: Union[str, Path], message: str):
        self.path = Path(path)
        super().__init__(f"Failed to write test file {self.path}: {message}")
