"""
Template resource loader.

고정된 템플릿 루트에서 이름으로 템플릿 본문을 읽고, 이름을 키로 캐시합니다.
캐시는 잠금으로 보호되므로 여러 워커 스레드에서 공유할 수 있습니다.
"""

import logging
import threading
from pathlib import Path
from typing import Dict, Optional, Union

from ..errors import TemplateLoadError

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"
TEMPLATE_ENCODING = "utf-8"

SERVICE_TEST_TEMPLATE = "service-test.java.j2"
CONTROLLER_TEST_TEMPLATE = "controller-test.java.j2"
REPOSITORY_TEST_TEMPLATE = "repository-test.java.j2"
INTEGRATION_TEST_TEMPLATE = "integration-test.java.j2"


class TemplateLoader:
    """템플릿 로더 (이름 단위 캐시)"""

    def __init__(self, template_dir: Optional[Union[str, Path]] = None):
        """
        초기화

        Args:
            template_dir: 템플릿 루트 디렉토리 (기본: 패키지 내장 templates/)
        """
        self.template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
        self._cache: Dict[str, str] = {}
        self._lock = threading.Lock()

    def load_template(self, name: str) -> str:
        """
        템플릿 본문 로드 (캐시 우선)

        Args:
            name: 템플릿 논리 이름 (예: "service-test.java.j2")

        Returns:
            템플릿 원문

        Raises:
            ValueError: 빈 이름
            TemplateLoadError: 템플릿 파일이 없거나 읽을 수 없음
        """
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Template name cannot be None or blank")

        with self._lock:
            cached = self._cache.get(name)
            if cached is not None:
                return cached

            path = self.template_path(name)
            if not path.is_file():
                raise TemplateLoadError(name, path)
            try:
                body = path.read_text(encoding=TEMPLATE_ENCODING)
            except (OSError, UnicodeDecodeError) as e:
                raise TemplateLoadError(name, path, str(e)) from e

            self._cache[name] = body
            logger.debug(f"Loaded template {name} from {path}")
            return body

    def template_path(self, name: str) -> Path:
        return self.template_dir / name

    def is_cached(self, name: str) -> bool:
        with self._lock:
            return name in self._cache

    def clear_cache(self):
        with self._lock:
            self._cache.clear()
        logger.debug("Template cache cleared")

    def load_service_template(self) -> str:
        return self.load_template(SERVICE_TEST_TEMPLATE)

    def load_controller_template(self) -> str:
        return self.load_template(CONTROLLER_TEST_TEMPLATE)

    def load_repository_template(self) -> str:
        return self.load_template(REPOSITORY_TEST_TEMPLATE)

    def load_integration_template(self) -> str:
        return self.load_template(INTEGRATION_TEST_TEMPLATE)
