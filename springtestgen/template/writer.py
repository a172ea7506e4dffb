"""
Test source file writer.

패키지 이름을 중첩 디렉토리로 변환하여 출력 루트 아래에 테스트 파일을 씁니다.
같은 경로의 기존 파일은 덮어쓰므로 재실행 시 동일한 결과가 나옵니다.
"""

import logging
from pathlib import Path
from typing import Union

from ..errors import TestFileWriteError

logger = logging.getLogger(__name__)

UNIT_TEST_SUFFIX = "Test"
INTEGRATION_TEST_SUFFIX = "IntegrationTest"

# 출력 루트 밖으로 벗어날 수 있는 문자
PATH_SEPARATORS = ("/", "\\", "\0")


class TestFileWriter:
    """테스트 파일 작성기"""

    __test__ = False

    def __init__(self, output_dir: Union[str, Path], create_directories: bool = True,
                 extension: str = ".java"):
        """
        초기화

        Args:
            output_dir: 출력 루트 디렉토리
            create_directories: 중간 디렉토리 자동 생성 여부
            extension: 파일 확장자
        """
        if output_dir is None:
            raise ValueError("Output directory cannot be None")
        self.output_dir = Path(output_dir)
        self.create_directories = create_directories
        self.extension = extension

    def resolve_path(self, package_name: str, class_name: str) -> Path:
        """
        출력 경로 계산: output_dir/<패키지 세그먼트>/<클래스명><확장자>

        Raises:
            ValueError: None 패키지, 빈 클래스 이름, 경로 구분자가 포함된 이름
        """
        if package_name is None:
            raise ValueError("Package name cannot be None")
        if not isinstance(class_name, str) or not class_name.strip():
            raise ValueError("Class name cannot be None or blank")

        segments = [s for s in package_name.split(".") if s]
        for name in segments + [class_name]:
            if any(sep in name for sep in PATH_SEPARATORS) or name.startswith(".."):
                raise ValueError(f"Invalid name for output path: {name!r}")

        directory = self.output_dir.joinpath(*segments)
        return directory / f"{class_name}{self.extension}"

    def write_test_file(self, package_name: str, class_name: str, content: str) -> Path:
        """
        테스트 파일 작성 (기존 파일은 덮어씀)

        Returns:
            작성된 파일 경로

        Raises:
            ValueError: 잘못된 인자
            TestFileWriteError: 디렉토리 생성 또는 파일 쓰기 실패
        """
        if content is None:
            raise ValueError("Content cannot be None")
        path = self.resolve_path(package_name, class_name)

        try:
            if self.create_directories:
                path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise TestFileWriteError(path, str(e)) from e

        logger.debug(f"Wrote test file: {path}")
        return path

    def write_unit_test(self, package_name: str, class_name: str, content: str) -> Path:
        return self.write_test_file(package_name, class_name + UNIT_TEST_SUFFIX, content)

    def write_integration_test(self, package_name: str, class_name: str, content: str) -> Path:
        return self.write_test_file(package_name, class_name + INTEGRATION_TEST_SUFFIX, content)

    def exists(self, package_name: str, class_name: str) -> bool:
        return self.resolve_path(package_name, class_name).is_file()

    def delete_test_file(self, package_name: str, class_name: str) -> bool:
        """
        테스트 파일 삭제

        Returns:
            삭제했으면 True, 파일이 없었으면 False
        """
        path = self.resolve_path(package_name, class_name)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise TestFileWriteError(path, str(e)) from e
        logger.debug(f"Deleted test file: {path}")
        return True
