"""JUnit XML log parser - turns the runner's --log-junit output into a RunResult."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from .errors import ParseError
from .models import Problem, RunResult, Summary, SuiteResult, TestCaseResult


def parse_junit(xml_text: str | bytes) -> RunResult:
    """
    Parse a JUnit XML document.

    Only leaf suites (testsuite elements with at least one direct testcase
    child) are reported, whatever their nesting depth, so aggregation
    wrappers are flattened away and every leaf is counted once. Suite
    counters are taken as declared in the document. Bytes are decoded
    according to the XML declaration.

    Raises:
        ParseError: If the input is blank or not well-formed XML
    """
    if xml_text is None or not xml_text.strip():
        raise ParseError("Cannot parse empty XML content")

    root = _load(xml_text)

    suites = [
        _parse_suite(element)
        for element in root.iter("testsuite")
        if element.find("testcase") is not None
    ]

    return RunResult(suites=suites, summary=_summarize(suites))


def _load(xml_text: str | bytes) -> ET.Element:
    try:
        return ET.fromstring(xml_text)
    except (ET.ParseError, ValueError, LookupError) as e:
        raise ParseError("Failed to parse XML", [str(e)]) from e


def _parse_suite(element: ET.Element) -> SuiteResult:
    return SuiteResult(
        name=element.get("name", ""),
        tests=to_int(element.get("tests")),
        assertions=to_int(element.get("assertions")),
        failures=to_int(element.get("failures")),
        errors=to_int(element.get("errors")),
        time=to_float(element.get("time")),
        testcases=[_parse_case(case) for case in element.findall("testcase")],
    )


def _parse_case(element: ET.Element) -> TestCaseResult:
    case = TestCaseResult(
        name=element.get("name", ""),
        class_name=element.get("class", element.get("classname", "")),
        file=element.get("file", ""),
        line=to_int(element.get("line")),
        assertions=to_int(element.get("assertions")),
        time=to_float(element.get("time")),
    )

    # Order matters: an error overrides a failure on the same case
    failure = element.find("failure")
    if failure is not None:
        case.status = "failed"
        case.failure = _problem(failure)

    error = element.find("error")
    if error is not None:
        case.status = "error"
        case.error = _problem(error)

    return case


def _problem(element: ET.Element) -> Problem:
    return Problem(
        type=element.get("type", ""),
        message=(element.text or "").strip(),
    )


def _summarize(suites: list[SuiteResult]) -> Summary:
    return Summary(
        tests=sum(s.tests for s in suites),
        assertions=sum(s.assertions for s in suites),
        failures=sum(s.failures for s in suites),
        errors=sum(s.errors for s in suites),
        time=sum(s.time for s in suites),
    )


def to_int(value: str | None) -> int:
    """Lenient attribute coercion: missing or non-numeric values count as 0."""
    if not value:
        return 0
    try:
        return int(value)
    except ValueError:
        try:
            return int(float(value))
        except (ValueError, OverflowError):
            return 0


def to_float(value: str | None) -> float:
    """Lenient attribute coercion: missing or non-numeric values count as 0.0."""
    if not value:
        return 0.0
    try:
        return float(value)
    except ValueError:
        return 0.0
