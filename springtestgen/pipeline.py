"""
Batch test generation pipeline.

소스 루트 분석 -> 역할/패턴 필터링 -> 생성기별 렌더링 -> 파일 작성 순서로
전체 배치를 실행합니다. 파일/클래스 단위 실패는 보고서에 기록하고 나머지
작업을 계속합니다.
"""

import logging
import re
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .analyzer.project import ProjectAnalyzer
from .config import GenerationConfig, TestCategory
from .errors import SpringTestGenError
from .generator import TestGenerator, create_generators
from .models import ArchitecturalRole, ClassModel
from .naming import create_naming_strategy
from .template.engine import TemplateEngine
from .template.loader import TemplateLoader
from .template.writer import TestFileWriter

logger = logging.getLogger(__name__)


@dataclass
class GenerationFailure:
    """생성 실패 (클래스의 정규화된 이름 또는 파일 경로 + 진단 메시지)"""
    subject: str
    message: str


@dataclass
class GenerationReport:
    """배치 실행 결과"""
    generated_files: List[Path] = field(default_factory=list)
    failures: List[GenerationFailure] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    aborted: bool = False

    @property
    def generated_count(self) -> int:
        return len(self.generated_files)

    @property
    def success(self) -> bool:
        return self.generated_count > 0 or not self.failures

    def summary(self) -> str:
        lines = [f"Generated {self.generated_count} test files, {len(self.failures)} failures"]
        if self.aborted:
            lines.append("  (aborted before completion)")
        for path in self.generated_files:
            lines.append(f"  + {path}")
        for failure in self.failures:
            lines.append(f"  ! {failure.subject}: {failure.message}")
        return "\n".join(lines)


def compile_pattern(pattern: str) -> "re.Pattern":
    """`*` 와일드카드 패턴 -> 정규식 (전체 일치)"""
    parts = [re.escape(part) for part in pattern.split("*")]
    return re.compile(".*".join(parts))


def matches_filters(qualified_name: str, includes: Sequence[str], excludes: Sequence[str]) -> bool:
    """
    포함/제외 패턴 필터

    포함 패턴이 있으면 하나 이상 일치해야 하고, 제외 패턴은 하나라도 일치하면 제외합니다
    (두 패턴 모두 일치하면 제외가 우선).
    """
    if any(compile_pattern(p).fullmatch(qualified_name) for p in excludes):
        return False
    if includes:
        return any(compile_pattern(p).fullmatch(qualified_name) for p in includes)
    return True


class TestGenerationPipeline:
    """테스트 생성 배치 파이프라인"""

    __test__ = False

    def __init__(self, config: GenerationConfig, analyzer: Optional[ProjectAnalyzer] = None,
                 engine: Optional[TemplateEngine] = None, writer: Optional[TestFileWriter] = None):
        """
        초기화

        Args:
            config: 실행 설정
            analyzer: 프로젝트 분석기 (기본 생성)
            engine: 템플릿 엔진 (기본: config.template_dir 또는 내장 템플릿)
            writer: 파일 작성기 (기본: config.output_root)
        """
        self.config = config
        self.analyzer = analyzer or ProjectAnalyzer()
        self.engine = engine or TemplateEngine(TemplateLoader(config.template_dir))
        self.writer = writer or TestFileWriter(config.output_root, config.create_directories)
        self.naming = create_naming_strategy(config.naming_convention)
        self.generators: List[TestGenerator] = create_generators(
            self.engine, self.naming, config.test_category, config.use_testcontainers, config.edge_cases)
        self._abort = threading.Event()

    def abort(self):
        """진행 중인 배치를 다음 클래스 경계에서 중단"""
        logger.info("배치 중단 요청")
        self._abort.set()

    @property
    def aborted(self) -> bool:
        return self._abort.is_set()

    def run(self) -> GenerationReport:
        """
        배치 실행

        Returns:
            GenerationReport

        Raises:
            FileNotFoundError: 소스 루트가 존재하지 않음
        """
        logger.info(f"테스트 생성 시작: {self.config.source_root} -> {self.config.output_root}")
        report = GenerationReport()

        analysis = self.analyzer.analyze_project(self.config.source_root)
        for error in analysis.errors:
            report.failures.append(GenerationFailure(error.path, error.message))

        targets = self.select_targets(analysis.classes, report)
        if self.config.workers > 1 and len(targets) > 1:
            results = self._run_parallel(targets)
        else:
            results = self._run_sequential(targets)

        for files, failures in results:
            report.generated_files.extend(files)
            report.failures.extend(failures)
        report.aborted = self.aborted

        logger.info(f"테스트 생성 완료: {report.generated_count}개 파일, {len(report.failures)}개 실패")
        return report

    def select_targets(self, models: Sequence[ClassModel], report: Optional[GenerationReport] = None) -> List[ClassModel]:
        """역할이 없는 클래스와 패턴에 맞지 않는 클래스 제외 (정규화된 이름 순 정렬)"""
        targets = []
        for model in models:
            if model.role is ArchitecturalRole.OTHER:
                logger.debug(f"Skipping {model.qualified_name}: no stereotype")
                continue
            if not matches_filters(model.qualified_name, self.config.includes, self.config.excludes):
                logger.debug(f"Skipping {model.qualified_name}: filtered out")
                if report is not None:
                    report.skipped.append(model.qualified_name)
                continue
            targets.append(model)
        return sorted(targets, key=lambda m: m.qualified_name)

    def _run_sequential(self, targets: Sequence[ClassModel]) -> List[Tuple[List[Path], List[GenerationFailure]]]:
        results = []
        for model in targets:
            if self.aborted:
                break
            results.append(self.generate_for(model))
        return results

    def _run_parallel(self, targets: Sequence[ClassModel]) -> List[Tuple[List[Path], List[GenerationFailure]]]:
        with ThreadPoolExecutor(max_workers=self.config.workers) as executor:
            futures = [executor.submit(self._generate_unless_aborted, model) for model in targets]
            # 제출 순서(정규화된 이름 순)로 수집하여 보고서 순서를 고정
            return [f.result() for f in futures]

    def _generate_unless_aborted(self, model: ClassModel):
        if self.aborted:
            return [], []
        return self.generate_for(model)

    def generate_for(self, model: ClassModel) -> Tuple[List[Path], List[GenerationFailure]]:
        """
        단일 클래스의 테스트 생성 및 작성

        템플릿/입출력 오류는 실패로 기록하고, 계약 위반(ValueError)은 그대로 전파합니다.
        """
        files: List[Path] = []
        failures: List[GenerationFailure] = []
        unit_done = False

        for generator in self.generators:
            if not generator.supports(model):
                continue
            # 단위 테스트는 역할별 생성기 하나만 사용
            if generator.category is TestCategory.UNIT:
                if unit_done:
                    continue
                unit_done = True

            try:
                content = generator.generate(model)
                path = self.writer.write_test_file(
                    model.package_name, generator.test_class_name(model), content)
            except SpringTestGenError as e:
                logger.error(f"테스트 생성 실패: {model.qualified_name} ({e})")
                failures.append(GenerationFailure(model.qualified_name, str(e)))
                continue

            logger.info(f"생성됨: {path}")
            files.append(path)

        return files, failures
