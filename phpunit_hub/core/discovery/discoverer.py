"""Test discovery - build a TestCatalog from the configuration and a static scan."""

from __future__ import annotations

import logging
from pathlib import Path

from ...constants import TEST_CASE_BASES, TEST_FILE_SUFFIX, TEST_METHOD_PREFIX
from .config import ConfigError, TestConfig, find_config_file, load_config
from .models import ClassDecl, Suite, TestCatalog, TestMethod
from .scanner import extract_classes

logger = logging.getLogger(__name__)


class TestDiscoverer:
    """
    Discover test case classes for a project.

    Discovery never raises: a missing configuration yields an empty catalog,
    a malformed configuration or an unreadable directory is logged and also
    yields an empty catalog, an unreadable file is logged and skipped.
    """

    __test__ = False

    def __init__(self, project_root: str | Path):
        self.project_root = Path(project_root)
        self.config_file = find_config_file(self.project_root)

    def discover(self) -> TestCatalog:
        """Scan the configured suite directories and return the catalog."""
        config = self._load()
        if config is None:
            return TestCatalog()

        try:
            directories = self._test_directories(config)
            suites = self._find_suites(directories) if directories else []
        except OSError as e:
            logger.warning(f"Test discovery failed, returning an empty catalog: {e}")
            return TestCatalog()

        return TestCatalog(suites=suites, available_suites=config.suite_names)

    def discover_suites(self) -> list[str]:
        """Names of the <testsuite> blocks declared in the configuration."""
        config = self._load()
        return config.suite_names if config else []

    def _load(self) -> TestConfig | None:
        if self.config_file is None:
            return None
        try:
            return load_config(self.config_file)
        except ConfigError as e:
            logger.warning(str(e))
            return None

    def _test_directories(self, config: TestConfig) -> list[Path]:
        directories = []
        for suite in config.suites:
            for directory in suite.directories:
                path = (self.project_root / directory).resolve()
                if path.is_dir() and path not in directories:
                    directories.append(path)
        return directories

    def _find_suites(self, directories: list[Path]) -> list[Suite]:
        index: dict[str, ClassDecl] = {}
        candidates: list[ClassDecl] = []
        seen_files: set[Path] = set()

        # Every PHP file feeds the inheritance index; only *Test.php files become suites
        for directory in directories:
            for path in sorted(directory.rglob("*.php")):
                if path in seen_files or not path.is_file():
                    continue
                seen_files.add(path)

                for decl in self._scan(path):
                    index.setdefault(decl.fqcn, decl)
                    if path.name.endswith(TEST_FILE_SUFFIX):
                        candidates.append(decl)

        suites: dict[str, Suite] = {}
        for decl in candidates:
            if decl.is_abstract or decl.fqcn in suites:
                continue
            if not is_test_case(decl, index):
                continue

            methods = collect_test_methods(decl, index)
            if methods:
                suites[decl.fqcn] = Suite(
                    id=decl.fqcn,
                    name=decl.name,
                    namespace=decl.namespace,
                    file=decl.file,
                    methods=methods,
                )

        return list(suites.values())

    def _scan(self, path: Path) -> list[ClassDecl]:
        try:
            source = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.warning(f"Skipping unreadable test file {path}: {e}")
            return []
        return extract_classes(source, file=self._relative(path))

    def _relative(self, path: Path) -> str:
        try:
            return path.relative_to(self.project_root.resolve()).as_posix()
        except ValueError:
            return path.as_posix()


def is_test_case(decl: ClassDecl, index: dict[str, ClassDecl]) -> bool:
    """True when the extends chain reaches a recognized test case base class."""
    seen = {decl.fqcn}
    parent = decl.parent

    while parent:
        if parent in TEST_CASE_BASES:
            return True

        known = index.get(parent)
        if known is None:
            # Base classes outside the scanned directories are trusted by short name
            return parent.rsplit("\\", 1)[-1] == "TestCase"

        if parent in seen:
            return False
        seen.add(parent)
        parent = known.parent

    return False


def collect_test_methods(decl: ClassDecl, index: dict[str, ClassDecl]) -> list[TestMethod]:
    """Public test* methods: own ones in declaration order, then inherited ones."""
    methods = []
    seen_names: set[str] = set()
    visited: set[str] = set()
    current: ClassDecl | None = decl

    while current is not None and current.fqcn not in visited:
        visited.add(current.fqcn)

        for method in current.methods:
            key = method.name.lower()
            if key in seen_names:
                continue
            # Method names are case-insensitive; the nearest declaration wins
            seen_names.add(key)
            if method.is_public and method.name.startswith(TEST_METHOD_PREFIX):
                methods.append(TestMethod(
                    id=f"{decl.fqcn}::{method.name}",
                    name=method.name,
                    declaring_class=current.fqcn,
                    file=current.file,
                    line=method.line,
                ))

        current = index.get(current.parent) if current.parent else None

    return methods


def discover(root_path: str | Path) -> TestCatalog:
    """Convenience wrapper around TestDiscoverer."""
    return TestDiscoverer(root_path).discover()
