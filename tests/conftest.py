"""Shared fixtures: a small PHP project on disk and a fake phpunit binary."""

import stat
from pathlib import Path

import pytest


PHPUNIT_XML = """\
<?xml version="1.0" encoding="UTF-8"?>
<phpunit bootstrap="vendor/autoload.php">
    <testsuites>
        <testsuite name="Unit">
            <directory>tests/Unit</directory>
        </testsuite>
        <testsuite name="Feature">
            <directory>tests/Feature</directory>
        </testsuite>
    </testsuites>
    <source>
        <include>
            <directory>src</directory>
        </include>
    </source>
</phpunit>
"""

CALC_TEST = r"""<?php
namespace App\Tests\Unit;

use PHPUnit\Framework\TestCase;

// class CommentedOutTest extends TestCase {}

class CalcTest extends TestCase
{
    public function testAdd(): void
    {
        $this->assertSame(2, 1 + 1);
    }

    public function testSub(): void
    {
        $callback = function () { return "}"; };
        $this->assertSame(0, 1 - 1);
    }

    protected function helper(): void {}

    private function testPrivateIsIgnored(): void {}

    public function notATest(): void {}
}
"""

# A JUnit log for CalcTest where testSub fails; written when no --filter is given
FULL_LOG = r"""<?xml version="1.0" encoding="UTF-8"?>
<testsuites>
  <testsuite name="Unit" tests="2" assertions="2" errors="0" failures="1" time="0.02">
    <testsuite name="CalcTest" file="tests/Unit/CalcTest.php" tests="2" assertions="2" errors="0" failures="1" time="0.02">
      <testcase name="testAdd" class="CalcTest" file="tests/Unit/CalcTest.php" line="10" assertions="1" time="0.01"/>
      <testcase name="testSub" class="CalcTest" file="tests/Unit/CalcTest.php" line="15" assertions="1" time="0.01">
        <failure type="PHPUnit\Framework\ExpectationFailedException">Failed asserting that 1 is identical to 0.</failure>
      </testcase>
    </testsuite>
  </testsuite>
</testsuites>
"""

# Written when a --filter is given: only testSub runs, and passes
FILTERED_LOG = r"""<?xml version="1.0" encoding="UTF-8"?>
<testsuites>
  <testsuite name="CalcTest" tests="1" assertions="1" errors="0" failures="0" time="0.01">
    <testcase name="testSub" class="CalcTest" file="tests/Unit/CalcTest.php" line="15" assertions="1" time="0.01"/>
  </testsuite>
</testsuites>
"""

FAKE_PHPUNIT = """\
#!/bin/sh
log=""
filter=""
for arg in "$@"; do
    case "$arg" in
        --log-junit=*) log="${{arg#--log-junit=}}" ;;
        --filter=*) filter="${{arg#--filter=}}" ;;
    esac
done
echo "PHPUnit 10.5.0 by Sebastian Bergmann and contributors."
echo '{{"event":"test.started","data":{{"test":"CalcTest::testAdd"}}}}' 1>&2
echo 'not an event' 1>&2
if [ -n "$filter" ]; then
    cat > "$log" <<'XML'
{filtered}
XML
    exit 0
fi
cat > "$log" <<'XML'
{full}
XML
exit 1
"""

SLOW_PHPUNIT = """\
#!/bin/sh
exec sleep 30
"""


def write_executable(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def php_project(tmp_path):
    """A project root with phpunit.xml, one test class and a fake runner."""
    root = tmp_path / "project"
    (root / "vendor").mkdir(parents=True)
    (root / "vendor" / "autoload.php").write_text("<?php\n")
    (root / "phpunit.xml").write_text(PHPUNIT_XML)

    unit = root / "tests" / "Unit"
    unit.mkdir(parents=True)
    (unit / "CalcTest.php").write_text(CALC_TEST)
    (root / "tests" / "Feature").mkdir()
    (root / "src").mkdir()

    write_executable(
        root / "vendor" / "bin" / "phpunit",
        FAKE_PHPUNIT.format(full=FULL_LOG.strip(), filtered=FILTERED_LOG.strip()),
    )
    return root


@pytest.fixture
def slow_project(php_project):
    """Same project, but the runner never finishes on its own."""
    write_executable(php_project / "vendor" / "bin" / "phpunit", SLOW_PHPUNIT)
    return php_project


@pytest.fixture
def install_runner(php_project):
    """Replace the project's runner with the given shell script."""

    def install(script: str) -> Path:
        write_executable(php_project / "vendor" / "bin" / "phpunit", script)
        return php_project

    return install


@pytest.fixture
def latin1_project(php_project):
    """Same project, with its configuration saved as ISO-8859-1."""
    config = PHPUNIT_XML.replace('encoding="UTF-8"', 'encoding="ISO-8859-1"')
    config = config.replace("<testsuites>", "<!-- résumé des suites -->\n    <testsuites>")
    (php_project / "phpunit.xml").write_bytes(config.encode("latin-1"))
    return php_project


@pytest.fixture
def temp_dir(tmp_path):
    path = tmp_path / "tmp"
    path.mkdir()
    return path


class RecordingConnection:
    """In-memory viewer that records what it was sent."""

    def __init__(self, fail_on_send: bool = False):
        self.sent = []
        self.closed = False
        self.fail_on_send = fail_on_send

    async def send(self, message):
        if self.fail_on_send:
            raise ConnectionResetError("viewer went away")
        self.sent.append(message)

    async def close(self):
        self.closed = True


@pytest.fixture
def recording_connection():
    return RecordingConnection

