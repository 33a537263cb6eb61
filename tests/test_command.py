"""Tests for runner command construction and run requests."""

import re

import pytest

from phpunit_hub.core.runner import RunRequest, build_command, filter_pattern, to_kebab_case


class TestBuildCommand:
    """Tests for build_command."""

    def test_minimal(self):
        argv = build_command("/p/vendor/bin/phpunit", "/tmp/log.xml")

        assert argv == ["/p/vendor/bin/phpunit", "--log-junit=/tmp/log.xml"]

    def test_full(self):
        argv = build_command(
            "phpunit",
            "/tmp/log.xml",
            filters=["testAdd", "App\\CalcTest::testSub"],
            group="slow",
            suites=["Unit", "Feature"],
            options={"stopOnFailure": True, "verbose": False},
            coverage_file="/tmp/clover.xml",
        )

        assert argv == [
            "phpunit",
            "--log-junit=/tmp/log.xml",
            "--testsuite=Unit",
            "--testsuite=Feature",
            "--filter=testAdd|App\\\\CalcTest::testSub",
            "--group=slow",
            "--stop-on-failure",
            "--coverage-clover=/tmp/clover.xml",
        ]

    def test_false_options_are_omitted(self):
        argv = build_command("phpunit", "/tmp/log.xml", options={"verbose": False, "debug": True})

        assert "--verbose" not in argv
        assert "--debug" in argv

    def test_shell_metacharacters_stay_in_one_argument(self):
        argv = build_command("phpunit", "/tmp/log.xml", filters=["a; rm -rf / #"], group="$(id)")

        assert argv[2] == "--filter=" + filter_pattern(["a; rm -rf / #"])
        assert argv[3] == "--group=$(id)"
        assert len(argv) == 4

    @pytest.mark.parametrize("kwargs", [
        {"filters": ["testA\n--bootstrap=evil.php"]},
        {"group": "a\rb"},
        {"suites": ["Unit\0"]},
    ])
    def test_rejects_control_characters(self, kwargs):
        with pytest.raises(ValueError):
            build_command("phpunit", "/tmp/log.xml", **kwargs)

    @pytest.mark.parametrize("name", ["stop-on-failure", "--bootstrap", "a b", ""])
    def test_rejects_bad_option_names(self, name):
        with pytest.raises(ValueError, match="Invalid option name"):
            build_command("phpunit", "/tmp/log.xml", options={name: True})


class TestHelpers:
    """Tests for filter_pattern and to_kebab_case."""

    def test_filter_alternation_escapes_each_value(self):
        assert filter_pattern(["a.b", "c"]) == "a\\.b|c"

    def test_two_filters_match_either_name_exactly(self):
        pattern = filter_pattern(["testFoo", "testBar"])

        assert pattern == "testFoo|testBar"
        assert re.fullmatch(pattern, "testFoo")
        assert re.fullmatch(pattern, "testBar")
        assert not re.fullmatch(pattern, "testBaz")

    def test_empty_filters(self):
        assert filter_pattern([]) == ""
        assert filter_pattern(["", ""]) == ""

    @pytest.mark.parametrize("name, expected", [
        ("stopOnFailure", "stop-on-failure"),
        ("debug", "debug"),
        ("failOnRisky", "fail-on-risky"),
        ("displayHTMLReport", "display-html-report"),
        ("testdox", "testdox"),
    ])
    def test_kebab_case(self, name, expected):
        assert to_kebab_case(name) == expected


class TestRunRequest:
    """Tests for RunRequest."""

    def test_dedupes_filters_and_suites(self):
        request = RunRequest(filters=["a", "b", "a", ""], suites=["Unit", "Unit"], group="  g ")

        assert request.filters == ["a", "b"]
        assert request.suites == ["Unit"]
        assert request.group == "g"

    def test_from_dict(self):
        request = RunRequest.from_dict({
            "filters": ["testAdd"],
            "options": {"stopOnFailure": True},
            "coverage": True,
        })

        assert request.to_dict() == {
            "filters": ["testAdd"],
            "group": "",
            "suites": [],
            "options": {"stopOnFailure": True},
            "coverage": True,
        }

    @pytest.mark.parametrize("payload", [
        {"filters": "testAdd"},
        {"filters": [1]},
        {"suites": "Unit"},
        {"options": {"stopOnFailure": "yes"}},
        {"group": 3},
    ])
    def test_from_dict_rejects_bad_shapes(self, payload):
        with pytest.raises(ValueError):
            RunRequest.from_dict(payload)
