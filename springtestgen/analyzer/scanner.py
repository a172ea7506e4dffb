"""
Java source scanner.

이 모듈은 Java 소스 파일(또는 문자열)을 javalang으로 파싱하고, 분석 대상
선언을 하나 선택하여 ClassModel을 조립합니다. 구문 오류가 있는 파일은
경고를 남기고 None을 반환하므로 호출자는 다음 파일로 계속 진행할 수 있습니다.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import javalang  # type: ignore

from ..models import AccessLevel, ClassModel, ClassModelBuilder, FieldModel
from .annotations import ImportSymbolResolver, extract_annotations
from .classifier import classify
from .dependencies import DependencyDetector
from .methods import access_level, analyze_methods
from .types import iter_nodes, modifiers_of, qualified_type_string, type_to_string

logger = logging.getLogger(__name__)

SELECTABLE_DECLARATIONS = (javalang.tree.ClassDeclaration, javalang.tree.InterfaceDeclaration)


def read_source(path: Path) -> str:
    """소스 파일을 UTF-8로 읽음"""
    return path.read_text(encoding="utf-8")


class ClassScanner:
    """Java 소스 -> ClassModel 스캐너"""

    def __init__(self, resolver_factory=None):
        """
        초기화

        Args:
            resolver_factory: CompilationUnit을 받아 심볼 리졸버를 반환하는 함수
                              (기본: import 선언 기반 리졸버)
        """
        self.resolver_factory = resolver_factory or ImportSymbolResolver.from_compilation_unit

    def scan_file(self, path: Union[str, Path]) -> Optional[ClassModel]:
        """
        단일 소스 파일 분석

        Args:
            path: .java 파일 경로

        Returns:
            ClassModel 또는 None (파싱 실패, 클래스/인터페이스 없음)

        Raises:
            FileNotFoundError: 파일이 존재하지 않음
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Source file not found: {path}")

        return self.scan_source(read_source(path), source_path=path)

    def scan_source(self, source: str, source_path: Optional[Union[str, Path]] = None) -> Optional[ClassModel]:
        """
        소스 문자열 분석

        Args:
            source: Java 소스 코드
            source_path: 원본 파일 경로 (기본 선언 선택 및 진단 메시지용)
        """
        if source is None:
            raise ValueError("Source cannot be None")

        label = str(source_path) if source_path else "<string>"
        unit = self.parse(source, label)
        if unit is None:
            return None
        return self.scan_unit(unit, source_path)

    def scan_unit(self, unit, source_path: Optional[Union[str, Path]] = None) -> Optional[ClassModel]:
        """
        파싱된 CompilationUnit 분석

        Returns:
            ClassModel 또는 None (enum/어노테이션 타입만 있는 파일 등 선택할 선언 없음)
        """
        label = str(source_path) if source_path else "<string>"
        stem = Path(source_path).stem if source_path else None
        declaration = self.select_declaration(unit, stem)
        if declaration is None:
            logger.debug(f"No class or interface declaration in {label}")
            return None

        resolver = self.resolver_factory(unit)
        model = self._build_model(unit, declaration, resolver, source_path)
        logger.debug(f"Scanned {model.qualified_name}: {len(model.fields)} fields, "
                     f"{len(model.methods)} methods, role={model.role.name}")
        return model

    def parse(self, source: str, label: str = "<string>"):
        """
        javalang 파싱 (실패 시 경고 후 None)
        """
        try:
            return javalang.parse.parse(source)
        except javalang.parser.JavaSyntaxError as e:
            logger.warning(f"구문 오류로 건너뜀: {label} ({e.description or 'syntax error'})")
        except javalang.tokenizer.LexerError as e:
            logger.warning(f"토큰화 오류로 건너뜀: {label} ({e})")
        except Exception as e:
            logger.warning(f"파싱 실패로 건너뜀: {label} ({e})")
        return None

    @staticmethod
    def select_declaration(unit, stem: Optional[str] = None):
        """
        분석 대상 선언 선택

        1. 파일 이름과 같은 최상위 클래스/인터페이스 (기본 선언)
        2. 없으면 전위 순회 순서상 첫 번째 클래스/인터페이스
        3. 둘 다 없으면 None
        """
        top_level = unit.types or []
        if stem:
            for decl in top_level:
                if isinstance(decl, SELECTABLE_DECLARATIONS) and decl.name == stem:
                    return decl

        for node in iter_nodes(top_level):
            if isinstance(node, SELECTABLE_DECLARATIONS):
                return node
        return None

    def _build_model(self, unit, decl, resolver, source_path) -> ClassModel:
        package_name = unit.package.name if unit.package else ""
        qualified_name = f"{package_name}.{decl.name}" if package_name else decl.name
        is_interface = isinstance(decl, javalang.tree.InterfaceDeclaration)

        builder = ClassModelBuilder(decl.name, qualified_name)
        builder.package_name = package_name
        builder.source_path = str(source_path) if source_path else None
        builder.is_interface = is_interface
        builder.is_abstract = "abstract" in modifiers_of(decl)

        for annotation in extract_annotations(decl.annotations, resolver):
            builder.add_annotation(annotation)
        builder.role = classify(builder.annotations)

        if is_interface:
            for parent in decl.extends or []:
                builder.add_interface(type_to_string(parent))
        else:
            if decl.extends is not None:
                builder.superclass = type_to_string(decl.extends)
            for iface in decl.implements or []:
                builder.add_interface(type_to_string(iface))

        detector = DependencyDetector(decl, resolver)
        for field_decl in decl.fields:
            for field_model in self._build_fields(field_decl, detector, resolver, is_interface):
                builder.add_field(field_model)

        for method in analyze_methods(decl.methods, resolver, in_interface=is_interface):
            builder.add_method(method)

        for dependency in detector.extract_dependencies():
            builder.add_dependency(dependency)

        return builder.build()

    @staticmethod
    def _build_fields(field_decl, detector: DependencyDetector, resolver, in_interface: bool):
        mods = modifiers_of(field_decl)
        annotations = extract_annotations(field_decl.annotations, resolver)
        injected = detector.is_injected_field(field_decl, annotations)
        access = AccessLevel.PUBLIC if in_interface else access_level(mods)

        for declarator in field_decl.declarators:
            dims = len(getattr(declarator, "dimensions", None) or [])
            declared = type_to_string(field_decl.type) + "[]" * dims
            yield FieldModel(
                name=declarator.name,
                type=declared,
                qualified_type=qualified_type_string(field_decl.type, resolver) + "[]" * dims,
                annotations=annotations,
                injected=injected,
                access=access,
                is_final="final" in mods,
            )
