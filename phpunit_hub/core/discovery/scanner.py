"""Static scanner - extract class and method declarations from PHP source text.

Nothing here loads or executes project code. Comments and string literals are
blanked out first (keeping offsets and line numbers intact) so that braces and
keywords inside them cannot confuse the declaration patterns.
"""

from __future__ import annotations

import re

from .models import ClassDecl, MethodDecl

_NOISE = re.compile(
    r"""
      /\*.*?\*/                                      # block comment
    | //[^\n]*                                       # line comment
    | \#(?!\[)[^\n]*                                 # hash comment, not an attribute
    | <<<[ \t]*(['"]?)([A-Za-z_]\w*)\1\n.*?\n[ \t]*\2\b   # heredoc / nowdoc
    | '(?:\\.|[^'\\])*'                              # single-quoted string
    | "(?:\\.|[^"\\])*"                              # double-quoted string
    """,
    re.S | re.X,
)

_NAMESPACE = re.compile(r"^[ \t]*namespace\s+([\w\\]+)\s*[;{]", re.M)

_USE = re.compile(r"^[ \t]*use\s+([^;{}]+?)\s*;", re.M)

_CLASS = re.compile(
    r"(?<![\w$:>])((?:(?:abstract|final|readonly)\s+)*)class\s+(\w+)"
    r"(?:\s+extends\s+([\w\\]+))?"
    r"(?:\s+implements\s+[\w\\,\s]+?)?\s*\{"
)

_METHOD = re.compile(
    r"((?:(?:public|protected|private|static|final|abstract)\s+)*)function\s+&?\s*(\w+)\s*\("
)

_NOT_CLASS_NAMES = frozenset({"extends", "implements"})


def strip_code(source: str) -> str:
    """Blank out comments and string literals, preserving newlines and offsets."""
    return _NOISE.sub(lambda m: re.sub(r"[^\n]", " ", m.group()), source)


def extract_classes(source: str, file: str = "") -> list[ClassDecl]:
    """Extract every named class declared in a PHP file, in source order."""
    code = strip_code(source)
    namespaces = [(m.start(), m.group(1).strip("\\")) for m in _NAMESPACE.finditer(code)]

    spans = []
    found = []
    for match in _CLASS.finditer(code):
        name = match.group(2)
        if name in _NOT_CLASS_NAMES:
            continue

        body_start = match.end()
        body_end = _matching_brace(code, body_start - 1)
        spans.append((body_start, body_end))
        found.append((match, body_start, body_end))

    imports = _collect_imports(code, spans)

    classes = []
    for match, body_start, body_end in found:
        namespace = _namespace_at(namespaces, match.start())
        parent = match.group(3)
        classes.append(ClassDecl(
            name=match.group(2),
            namespace=namespace,
            parent=resolve_name(parent, namespace, imports) if parent else None,
            is_abstract="abstract" in match.group(1).split(),
            line=_line_of(code, match.start(2)),
            file=file,
            methods=_extract_methods(code, body_start, body_end),
        ))

    return classes


def resolve_name(name: str, namespace: str, imports: dict[str, str]) -> str:
    """
    Resolve a class reference to its fully-qualified name.

    Leading backslash means already qualified; otherwise the first segment
    is looked up in the file's imports, else the current namespace applies.
    """
    if name.startswith("\\"):
        return name.lstrip("\\")

    first, _, rest = name.partition("\\")
    imported = imports.get(first.lower())
    if imported:
        return f"{imported}\\{rest}" if rest else imported

    return f"{namespace}\\{name}" if namespace else name


def _extract_methods(code: str, body_start: int, body_end: int) -> list[MethodDecl]:
    methods = []
    depth = 0
    cursor = body_start

    for match in _METHOD.finditer(code, body_start, body_end):
        segment = code[cursor:match.start()]
        depth += segment.count("{") - segment.count("}")
        cursor = match.start()

        # Closures inside method bodies sit deeper than the class body
        if depth != 0:
            continue

        modifiers = match.group(1).split()
        methods.append(MethodDecl(
            name=match.group(2),
            line=_line_of(code, match.start(2)),
            is_public="private" not in modifiers and "protected" not in modifiers,
        ))

    return methods


def _collect_imports(code: str, class_spans: list[tuple[int, int]]) -> dict[str, str]:
    """Map lowercased alias -> fully-qualified name for top-level use statements."""
    imports = {}

    for match in _USE.finditer(code):
        # Trait imports live inside class bodies
        if any(start <= match.start() < end for start, end in class_spans):
            continue

        clause = match.group(1).strip()
        if clause.startswith(("function ", "const ")):
            continue

        for part in clause.split(","):
            target, _, alias = part.strip().partition(" as ")
            target = target.strip().lstrip("\\")
            if not target:
                continue
            alias = alias.strip() or target.rsplit("\\", 1)[-1]
            imports[alias.lower()] = target

    return imports


def _matching_brace(code: str, open_pos: int) -> int:
    depth = 0
    for index in range(open_pos, len(code)):
        char = code[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return index
    return len(code)


def _namespace_at(namespaces: list[tuple[int, str]], position: int) -> str:
    current = ""
    for start, name in namespaces:
        if start > position:
            break
        current = name
    return current


def _line_of(code: str, position: int) -> int:
    return code.count("\n", 0, position) + 1
