"""
Generation configuration.

CLI 인자(argparse Namespace) 또는 코드에서 직접 생성하는 실행 설정입니다.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from .naming import NamingConvention


class TestCategory(Enum):
    """생성할 테스트 종류"""
    UNIT = "unit"
    INTEGRATION = "integration"
    ALL = "all"

    __test__ = False

    @classmethod
    def parse(cls, value: Union[str, "TestCategory"]) -> "TestCategory":
        """
        문자열을 TestCategory로 변환 (대소문자 무시)

        Raises:
            ValueError: 알 수 없는 종류
        """
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        for category in cls:
            if category.value == key:
                return category
        raise ValueError(f"Unknown test category: {value}")

    def includes(self, other: "TestCategory") -> bool:
        return self is TestCategory.ALL or self is other


@dataclass
class GenerationConfig:
    """테스트 생성 실행 설정"""
    source_root: Path
    output_root: Path
    test_category: TestCategory = TestCategory.UNIT
    naming_convention: NamingConvention = NamingConvention.METHOD_SCENARIO_EXPECTED
    includes: List[str] = field(default_factory=list)
    excludes: List[str] = field(default_factory=list)
    create_directories: bool = True
    template_dir: Optional[Path] = None
    use_testcontainers: bool = False
    edge_cases: bool = False
    workers: int = 1

    def __post_init__(self):
        if self.source_root is None or self.output_root is None:
            raise ValueError("Source root and output root are required")
        self.source_root = Path(self.source_root)
        self.output_root = Path(self.output_root)
        if self.template_dir is not None:
            self.template_dir = Path(self.template_dir)
        self.test_category = TestCategory.parse(self.test_category)
        self.naming_convention = NamingConvention.parse(self.naming_convention)
        self.includes = list(self.includes or [])
        self.excludes = list(self.excludes or [])
        if self.workers < 1:
            raise ValueError(f"Worker count must be at least 1: {self.workers}")

    @classmethod
    def from_args(cls, args) -> "GenerationConfig":
        """argparse Namespace로부터 설정 생성"""
        return cls(
            source_root=args.source,
            output_root=args.output,
            test_category=args.type,
            naming_convention=args.naming,
            includes=args.include or [],
            excludes=args.exclude or [],
            create_directories=not getattr(args, "no_create_dirs", False),
            template_dir=getattr(args, "template_dir", None),
            use_testcontainers=getattr(args, "testcontainers", False),
            edge_cases=getattr(args, "edge_cases", False),
            workers=getattr(args, "workers", 1) or 1,
        )
