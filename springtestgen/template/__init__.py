"""
Template loading, rendering and test file output.
"""

from .engine import TemplateEngine, java_default_value
from .loader import TemplateLoader
from .writer import TestFileWriter

__all__ = ["TemplateEngine", "TemplateLoader", "TestFileWriter", "java_default_value"]
