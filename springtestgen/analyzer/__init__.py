"""
Java source analysis: scanning, annotation/dependency/method extraction, classification.
"""

from .annotations import ImportSymbolResolver, NullSymbolResolver, extract_annotation, extract_annotations
from .classifier import ClassClassifier, classify
from .dependencies import DependencyDetector
from .methods import analyze_method
from .project import AnalysisError, AnalysisResult, ProjectAnalyzer
from .scanner import ClassScanner

__all__ = [
    "AnalysisError",
    "AnalysisResult",
    "ClassClassifier",
    "ClassScanner",
    "DependencyDetector",
    "ImportSymbolResolver",
    "NullSymbolResolver",
    "ProjectAnalyzer",
    "analyze_method",
    "classify",
    "extract_annotation",
    "extract_annotations",
]
