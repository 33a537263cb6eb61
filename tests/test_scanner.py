"""Tests for the static PHP scanner."""

from phpunit_hub.core.discovery import extract_classes, strip_code
from phpunit_hub.core.discovery.scanner import resolve_name


SOURCE = r"""<?php
declare(strict_types=1);

namespace App\Tests;

use PHPUnit\Framework\TestCase as Base;
use App\Support\{Helper, Other};

/**
 * class NotAClass extends Base {
 */
abstract class AbstractCase extends Base
{
    use SomeTrait;

    public function testInherited() {}
}

final class FooTest extends AbstractCase implements \Countable
{
    public function testOne(): void
    {
        $s = 'class Nope { public function testNope() {} }';
        $fn = function () {
            return new class {
                public function testAnonymous() {}
            };
        };
    }

    public static function provider(): array { return []; }

    protected function testProtected() {}

    function testImplicitPublic() {}

    public function count(): int { return 0; }
}
"""


class TestStripCode:
    """Tests for strip_code."""

    def test_preserves_offsets_and_lines(self):
        code = strip_code(SOURCE)

        assert len(code) == len(SOURCE)
        assert code.count("\n") == SOURCE.count("\n")

    def test_blanks_comments_and_strings(self):
        code = strip_code(SOURCE)

        assert "NotAClass" not in code
        assert "Nope" not in code
        assert "class FooTest" in code


class TestExtractClasses:
    """Tests for extract_classes."""

    def test_named_classes_only(self):
        classes = extract_classes(SOURCE, file="tests/FooTest.php")

        assert [c.name for c in classes] == ["AbstractCase", "FooTest"]
        assert all(c.file == "tests/FooTest.php" for c in classes)

    def test_namespace_and_parent_resolution(self):
        abstract_case, foo = extract_classes(SOURCE)

        assert foo.namespace == "App\\Tests"
        assert foo.fqcn == "App\\Tests\\FooTest"
        assert foo.parent == "App\\Tests\\AbstractCase"
        assert abstract_case.parent == "PHPUnit\\Framework\\TestCase"

    def test_abstract_flag(self):
        abstract_case, foo = extract_classes(SOURCE)

        assert abstract_case.is_abstract is True
        assert foo.is_abstract is False

    def test_methods_at_class_level(self):
        foo = extract_classes(SOURCE)[1]

        assert [m.name for m in foo.methods] == [
            "testOne", "provider", "testProtected", "testImplicitPublic", "count",
        ]
        visibility = {m.name: m.is_public for m in foo.methods}
        assert visibility["testProtected"] is False
        assert visibility["testImplicitPublic"] is True

    def test_line_numbers(self):
        foo = extract_classes(SOURCE)[1]

        assert foo.line == SOURCE.splitlines().index(
            "final class FooTest extends AbstractCase implements \\Countable"
        ) + 1
        assert foo.methods[0].line == foo.line + 2

    def test_global_namespace(self):
        classes = extract_classes("<?php\nclass PlainTest extends TestCase {}\n")

        assert classes[0].fqcn == "PlainTest"
        assert classes[0].parent == "TestCase"


class TestResolveName:
    """Tests for resolve_name."""

    def test_fully_qualified(self):
        assert resolve_name("\\PHPUnit\\Framework\\TestCase", "App", {}) == "PHPUnit\\Framework\\TestCase"

    def test_imported_alias(self):
        imports = {"base": "PHPUnit\\Framework\\TestCase"}

        assert resolve_name("Base", "App", imports) == "PHPUnit\\Framework\\TestCase"

    def test_imported_namespace_prefix(self):
        imports = {"framework": "PHPUnit\\Framework"}

        assert resolve_name("Framework\\TestCase", "App", imports) == "PHPUnit\\Framework\\TestCase"

    def test_relative_to_namespace(self):
        assert resolve_name("BaseCase", "App\\Tests", {}) == "App\\Tests\\BaseCase"
