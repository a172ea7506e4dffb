"""
Project-level analysis.

소스 루트(파일 또는 디렉토리)를 순회하며 .java 파일마다 ClassScanner를 호출하고
결과를 집계합니다. 파일 단위 실패는 기록만 하고 나머지 파일 분석을 계속합니다.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..models import ArchitecturalRole, ClassModel
from .scanner import ClassScanner, read_source

logger = logging.getLogger(__name__)

JAVA_SUFFIX = ".java"

# 타입 선언이 없는 Java 메타데이터 파일
SKIPPED_FILE_NAMES = frozenset({"package-info.java", "module-info.java"})


@dataclass
class AnalysisError:
    """파일 단위 분석 실패"""
    path: str
    message: str


@dataclass
class AnalysisResult:
    """프로젝트 분석 결과"""
    source_root: str
    classes: List[ClassModel] = field(default_factory=list)
    errors: List[AnalysisError] = field(default_factory=list)
    scanned_files: int = 0

    @property
    def success(self) -> bool:
        return not self.errors

    def by_role(self) -> Dict[ArchitecturalRole, List[ClassModel]]:
        grouped: Dict[ArchitecturalRole, List[ClassModel]] = {}
        for model in self.classes:
            grouped.setdefault(model.role, []).append(model)
        return grouped

    def summary(self) -> str:
        lines = [f"Analyzed {self.scanned_files} files from {self.source_root}: "
                 f"{len(self.classes)} classes, {len(self.errors)} errors"]
        for role, models in sorted(self.by_role().items(), key=lambda item: item[0].name):
            lines.append(f"  {role.name}: {len(models)}")
        for error in self.errors:
            lines.append(f"  ! {error.path}: {error.message}")
        return "\n".join(lines)


class ProjectAnalyzer:
    """소스 트리 분석기"""

    def __init__(self, scanner: Optional[ClassScanner] = None):
        self.scanner = scanner or ClassScanner()

    def analyze_file(self, path: Union[str, Path]) -> Optional[ClassModel]:
        """
        단일 파일 분석

        Raises:
            FileNotFoundError: 파일이 존재하지 않음
            ValueError: .java 파일이 아님
        """
        path = Path(path)
        return self.scanner.scan_source(self._read(path), source_path=path)

    @staticmethod
    def _read(path: Path) -> str:
        if not path.is_file():
            raise FileNotFoundError(f"Source file not found: {path}")
        if path.suffix != JAVA_SUFFIX:
            raise ValueError(f"Not a Java source file: {path}")
        return read_source(path)

    def analyze_source(self, source: str, source_path: Optional[Union[str, Path]] = None) -> Optional[ClassModel]:
        return self.scanner.scan_source(source, source_path)

    def analyze_project(self, source_root: Union[str, Path]) -> AnalysisResult:
        """
        소스 루트 전체 분석

        Args:
            source_root: .java 파일 또는 디렉토리

        Returns:
            AnalysisResult (파일 경로 정렬 순서로 분석)

        Raises:
            FileNotFoundError: 소스 루트가 존재하지 않음
        """
        root = Path(source_root)
        if not root.exists():
            raise FileNotFoundError(f"Source root not found: {root}")

        result = AnalysisResult(source_root=str(root))
        files = [root] if root.is_file() else sorted(p for p in root.rglob(f"*{JAVA_SUFFIX}")
                                                 if p.name not in SKIPPED_FILE_NAMES)
        logger.info(f"{len(files)}개의 Java 파일 발견: {root}")

        for path in files:
            result.scanned_files += 1
            try:
                source = self._read(path)
            except (OSError, UnicodeDecodeError, ValueError) as e:
                logger.warning(f"파일 분석 실패: {path} ({e})")
                result.errors.append(AnalysisError(str(path), str(e)))
                continue

            # 구문 오류만 진단으로 기록, 선언이 없는 파일(enum 등)은 결과 없음
            unit = self.scanner.parse(source, str(path))
            if unit is None:
                result.errors.append(AnalysisError(str(path), "Unable to parse source"))
                continue

            model = self.scanner.scan_unit(unit, path)
            if model is not None:
                result.classes.append(model)

        logger.info(f"분석 완료: {len(result.classes)}개 클래스, {len(result.errors)}개 오류")
        return result
