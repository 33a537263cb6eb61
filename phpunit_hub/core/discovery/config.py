"""Read the test configuration (phpunit.xml / phpunit.xml.dist)."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path

from ...constants import CONFIG_FILE_NAMES, DEFAULT_SOURCE_DIRS


class ConfigError(Exception):
    """The configuration file exists but cannot be read or parsed."""


@dataclass
class SuiteConfig:
    """One <testsuite> block."""
    name: str
    directories: list[str] = field(default_factory=list)


@dataclass
class TestConfig:
    """The parts of the configuration the hub needs."""
    __test__ = False

    path: Path
    suites: list[SuiteConfig] = field(default_factory=list)
    source_dirs: list[str] = field(default_factory=lambda: list(DEFAULT_SOURCE_DIRS))

    @property
    def suite_names(self) -> list[str]:
        return [s.name for s in self.suites if s.name]


def find_config_file(project_root: str | Path) -> Path | None:
    """Return the first existing configuration file (.dist wins), or None."""
    root = Path(project_root)
    for name in CONFIG_FILE_NAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_config(path: str | Path) -> TestConfig:
    """
    Parse a configuration file.

    Raises:
        ConfigError: If the file cannot be read or is not well-formed XML
    """
    path = Path(path)
    try:
        # Bytes, so the XML declaration decides the encoding
        root = ET.fromstring(path.read_bytes())
    except OSError as e:
        raise ConfigError(f"Could not read config file: {path} ({e})") from e
    except (ET.ParseError, ValueError, LookupError) as e:
        raise ConfigError(f"Malformed config file: {path} ({e})") from e

    suites = [
        SuiteConfig(
            name=suite.get("name", ""),
            directories=_texts(suite.findall("directory")),
        )
        for suite in root.iter("testsuite")
    ]

    return TestConfig(path=path, suites=suites, source_dirs=_source_dirs(root))


def _source_dirs(root: ET.Element) -> list[str]:
    # PHPUnit 10+ <source>, 9.x <coverage>, older <filter><whitelist>
    for xpath in ("source/include/directory", "coverage/include/directory", "filter/whitelist/directory"):
        directories = _texts(root.findall(xpath))
        if directories:
            return directories
    return list(DEFAULT_SOURCE_DIRS)


def _texts(elements: list[ET.Element]) -> list[str]:
    return [e.text.strip() for e in elements if e.text and e.text.strip()]
