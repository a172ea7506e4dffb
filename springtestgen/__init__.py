"""
springtestgen - scaffold JUnit 5 test generator for Spring Java code bases.
"""

__version__ = "0.1.0"
