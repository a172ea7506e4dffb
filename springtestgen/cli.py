#!/usr/bin/env python3
"""
Command line entry point for test scaffold generation.

이 스크립트는 전체 테스트 생성 파이프라인을 실행합니다:
1. Java 소스 분석
2. 역할별 테스트 소스 렌더링
3. 출력 디렉토리에 테스트 파일 작성
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .analyzer.project import ProjectAnalyzer
from .config import GenerationConfig, TestCategory
from .naming import NamingConvention
from .pipeline import TestGenerationPipeline

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="springtestgen",
        description="Spring 소스 트리에서 JUnit 5 테스트 스캐폴드 생성"
    )
    parser.add_argument(
        "source",
        help="Java 소스 루트 (디렉토리 또는 .java 파일)"
    )
    parser.add_argument(
        "-o", "--output",
        default="src/test/java",
        help="출력 디렉토리 (기본값: src/test/java)"
    )
    parser.add_argument(
        "-t", "--type",
        default=TestCategory.UNIT.value,
        choices=[c.value for c in TestCategory],
        help="생성할 테스트 종류 (기본값: unit)"
    )
    parser.add_argument(
        "-n", "--naming",
        default=NamingConvention.METHOD_SCENARIO_EXPECTED.value,
        choices=["method-scenario", "given-when-then", "given-when", "bdd"],
        help="테스트 메서드 명명 규칙 (기본값: method-scenario)"
    )
    parser.add_argument(
        "--include",
        action="append",
        metavar="PATTERN",
        help="포함할 클래스 패턴 (정규화된 이름, * 와일드카드, 반복 가능)"
    )
    parser.add_argument(
        "--exclude",
        action="append",
        metavar="PATTERN",
        help="제외할 클래스 패턴 (포함 패턴보다 우선)"
    )
    parser.add_argument(
        "--template-dir",
        help="사용자 템플릿 디렉토리"
    )
    parser.add_argument(
        "--testcontainers",
        action="store_true",
        help="통합 테스트에 @Testcontainers 추가"
    )
    parser.add_argument(
        "--edge-cases",
        action="store_true",
        help="서비스 테스트에 null/빈 값 인자 테스트 추가"
    )
    parser.add_argument(
        "--no-create-dirs",
        action="store_true",
        help="출력 하위 디렉토리를 자동 생성하지 않음"
    )
    parser.add_argument(
        "-j", "--workers",
        type=int,
        default=1,
        help="병렬 생성 워커 수 (기본값: 1)"
    )
    parser.add_argument(
        "--analyze-only",
        action="store_true",
        help="분석 결과만 출력하고 파일을 생성하지 않음"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="디버그 로그 출력"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """메인 함수"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    source_root = Path(args.source)
    if not source_root.exists():
        logger.error(f"소스 경로를 찾을 수 없음: {source_root}")
        return 1

    if args.analyze_only:
        result = ProjectAnalyzer().analyze_project(source_root)
        print(result.summary())
        return 0 if result.classes or not result.errors else 1

    try:
        config = GenerationConfig.from_args(args)
    except ValueError as e:
        logger.error(f"잘못된 설정: {e}")
        return 1

    pipeline = TestGenerationPipeline(config)
    report = pipeline.run()

    print(report.summary())
    return 0 if report.success else 1


if __name__ == "__main__":
    sys.exit(main())
