"""Test discovery - configuration reading and static class scanning."""

from .config import ConfigError, SuiteConfig, TestConfig, find_config_file, load_config
from .discoverer import TestDiscoverer, discover
from .models import ClassDecl, MethodDecl, Suite, TestCatalog, TestMethod
from .scanner import extract_classes, strip_code

__all__ = [
    "discover",
    "TestDiscoverer",
    "TestCatalog",
    "Suite",
    "TestMethod",
    "ClassDecl",
    "MethodDecl",
    "extract_classes",
    "strip_code",
    "find_config_file",
    "load_config",
    "TestConfig",
    "SuiteConfig",
    "ConfigError",
]
