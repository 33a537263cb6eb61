"""
Shared constants used across the project.
"""

from typing import Final

# Project layout (PHP side)
CONFIG_FILE_NAMES: Final[tuple[str, ...]] = ("phpunit.xml.dist", "phpunit.xml")
COMPOSER_FILE: Final[str] = "composer.json"
INSTALL_MARKER: Final[str] = "vendor/autoload.php"
DEFAULT_BIN_DIR: Final[str] = "vendor/bin"
RUNNER_BINARY: Final[str] = "phpunit"
INSTALLED_PACKAGES_FILE: Final[str] = "vendor/composer/installed.json"
RUNNER_PACKAGE: Final[str] = "phpunit/phpunit"

# Discovery
TEST_FILE_SUFFIX: Final[str] = "Test.php"
TEST_METHOD_PREFIX: Final[str] = "test"
TEST_CASE_BASES: Final[frozenset[str]] = frozenset({
    "PHPUnit\\Framework\\TestCase",
    "PHPUnit_Framework_TestCase",
})
DEFAULT_SOURCE_DIRS: Final[tuple[str, ...]] = ("src",)

# Runner
LOG_FILE_PREFIX: Final[str] = "phpunit-hub-"

# Live channel
STATUS_PATH: Final[str] = "/ws/status"
DEFAULT_HOST: Final[str] = "127.0.0.1"
DEFAULT_PORT: Final[int] = 8080

# Process output is read in chunks of this size
READ_CHUNK_SIZE: Final[int] = 4096

# A viewer further behind than this many messages is disconnected
MAX_PENDING_MESSAGES: Final[int] = 1000
