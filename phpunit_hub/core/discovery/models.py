"""Data models for test discovery."""

from dataclasses import dataclass, field


@dataclass
class TestMethod:
    """A test method as declared in source."""
    __test__ = False

    id: str
    name: str
    declaring_class: str
    file: str = ""
    line: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "declaringClass": self.declaring_class,
            "file": self.file,
            "line": self.line,
        }


@dataclass
class Suite:
    """A test case class and its test methods, in declaration order."""
    id: str
    name: str
    namespace: str = ""
    file: str = ""
    methods: list[TestMethod] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "namespace": self.namespace,
            "file": self.file,
            "methods": [m.to_dict() for m in self.methods],
        }


@dataclass
class TestCatalog:
    """Every discovered suite plus the suite names the configuration declares."""
    __test__ = False

    suites: list[Suite] = field(default_factory=list)
    available_suites: list[str] = field(default_factory=list)

    @property
    def total_methods(self) -> int:
        return sum(len(s.methods) for s in self.suites)

    def to_dict(self) -> dict:
        return {
            "suites": [s.to_dict() for s in self.suites],
            "availableSuites": list(self.available_suites),
        }


@dataclass
class MethodDecl:
    """A method found by the static scanner."""
    name: str
    line: int
    is_public: bool = True


@dataclass
class ClassDecl:
    """A class declaration found by the static scanner."""
    name: str
    namespace: str = ""
    parent: str | None = None
    is_abstract: bool = False
    line: int = 0
    file: str = ""
    methods: list[MethodDecl] = field(default_factory=list)

    @property
    def fqcn(self) -> str:
        return f"{self.namespace}\\{self.name}" if self.namespace else self.name
