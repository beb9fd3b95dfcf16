"""
Per-language lexical templates.

Each language family owns an ordered battery of small extraction closures
(imports, exports, import bindings, function, variable and class declarations) and
the body-isolation style used for complexity scoring. Nothing here parses a
grammar: every template is a regular expression over raw text, so comments
and string literals can produce matches too.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Callable, Iterable, Literal, Optional

ECMASCRIPT = "ecmascript"
PYTHON = "python"
JAVA = "java"
PHP = "php"

BodyStyle = Literal["braces", "indent"]

TextTemplate = Callable[[str], Iterable[str]]
LineTemplate = Callable[[str], Iterable[str]]

_ALIASES: dict[str, str] = {
    "js": ECMASCRIPT, "jsx": ECMASCRIPT, "mjs": ECMASCRIPT, "cjs": ECMASCRIPT,
    "ts": ECMASCRIPT, "tsx": ECMASCRIPT, "mts": ECMASCRIPT, "cts": ECMASCRIPT,
    "javascript": ECMASCRIPT, "typescript": ECMASCRIPT, "ecmascript": ECMASCRIPT,
    "py": PYTHON, "pyw": PYTHON, "python": PYTHON,
    "java": JAVA,
    "php": PHP,
}

_IDENT = r"[A-Za-z_$][\w$]*"


def language_family(tag: str | None) -> str:
    """Map a free-form language tag (``ts``, ``Python``, ``.php``) to its family, or ``""``."""
    if not tag:
        return ""
    return _ALIASES.get(tag.strip().lower().lstrip("."), "")


# ---------- template factories ----------

def _text(pattern: str, flags: int = 0, fmt: str = "{}") -> TextTemplate:
    rx = re.compile(pattern, flags)

    def extract(text: str) -> Iterable[str]:
        for m in rx.finditer(text):
            value = m.group(1)
            if value:
                yield fmt.format(value.strip())
    return extract


def _line(pattern: str, reject: Optional[Callable[[re.Match, str], bool]] = None, group: int = 1) -> LineTemplate:
    rx = re.compile(pattern)

    def extract(line: str) -> Iterable[str]:
        m = rx.search(line)
        if m and m.group(group) and not (reject and reject(m, line)):
            yield m.group(group)
    return extract


def _split_names(chunk: str) -> list[str]:
    return [p.strip() for p in chunk.strip().strip("()").split(",") if p.strip()]


def _local_name(item: str, first_component: bool = False) -> str:
    parts = item.split()
    if len(parts) >= 3 and parts[-2] == "as":
        return parts[-1]
    name = parts[0] if parts else ""
    if first_component:
        name = name.split(".")[0]
    return name


# ---------- ECMAScript ----------

_ES_IMPORT_LINE = re.compile(r"^\s*import\s+(?:type\s+)?(.+?)\s+from\s+['\"]")
_ES_BRACES = re.compile(r"\{([^}]*)\}")
_ES_NAMESPACE = re.compile(r"\*\s*as\s+(" + _IDENT + r")")
_ES_LOCAL_EXPORTS = re.compile(r"\bexport\s*\{([^}]*)\}(?!\s*from)")


def _es_bindings(line: str) -> Iterable[str]:
    m = _ES_IMPORT_LINE.match(line)
    if not m:
        return
    clause = m.group(1)
    braces = _ES_BRACES.search(clause)
    if braces:
        for item in _split_names(braces.group(1)):
            name = _local_name(item.replace("type ", "", 1) if item.startswith("type ") else item)
            if re.fullmatch(_IDENT, name):
                yield name
        clause = clause[:braces.start()] + clause[braces.end():]
    ns = _ES_NAMESPACE.search(clause)
    if ns:
        yield ns.group(1)
        clause = clause[:ns.start()] + clause[ns.end():]
    default = clause.strip().strip(",").strip()
    if re.fullmatch(_IDENT, default):
        yield default


def _es_local_exports(text: str) -> Iterable[str]:
    for m in _ES_LOCAL_EXPORTS.finditer(text):
        for item in _split_names(m.group(1)):
            name = _local_name(item)
            if re.fullmatch(_IDENT, name):
                yield name


# ---------- Python ----------

_PY_FROM_LINE = re.compile(r"^\s*from\s+\S+\s+import\s+(.+)$")
_PY_IMPORT_LINE = re.compile(r"^\s*import\s+(.+)$")
_PY_IMPORT_LIST = re.compile(
    r"^[ \t]*import[ \t]+([\w.]+(?:[ \t]+as[ \t]+\w+)?(?:[ \t]*,[ \t]*[\w.]+(?:[ \t]+as[ \t]+\w+)?)*)",
    re.MULTILINE,
)


def _py_import_modules(text: str) -> Iterable[str]:
    for m in _PY_IMPORT_LIST.finditer(text):
        for item in _split_names(m.group(1)):
            yield item.split()[0]


def _py_bindings(line: str) -> Iterable[str]:
    stripped = line.split("#", 1)[0]
    m = _PY_FROM_LINE.match(stripped)
    if m:
        for item in _split_names(m.group(1)):
            name = _local_name(item)
            if name.isidentifier():
                yield name
        return
    m = _PY_IMPORT_LINE.match(stripped)
    if m:
        for item in _split_names(m.group(1)):
            name = _local_name(item, first_component=True)
            if name.isidentifier():
                yield name


# ---------- Java ----------

_JAVA_MODIFIERS = r"(?:(?:public|private|protected|static|final|abstract|synchronized|native|default)\s+)*"
_JAVA_NOT_TYPES = {"return", "new", "else", "throw", "case", "await", "yield", "package", "import"}
_JAVA_KEYWORDS = {"if", "for", "while", "switch", "catch", "return", "new", "synchronized", "try", "do", "else"}
_JAVA_DECLARATIONS = ("class ", "interface ", "enum ", "record ")


def _java_method_reject(m: re.Match, line: str) -> bool:
    type_token = m.group(1).split()[-1] if m.group(1).split() else ""
    if type_token in _JAVA_NOT_TYPES or m.group(2) in _JAVA_KEYWORDS:
        return True
    if any(d in line for d in _JAVA_DECLARATIONS):
        return True
    return line.rstrip().endswith(";")


def _java_variable_reject(m: re.Match, line: str) -> bool:
    return m.group(1).split()[-1] in _JAVA_NOT_TYPES if m.group(1).split() else True


def _java_binding(line: str) -> Iterable[str]:
    m = re.match(r"^\s*import\s+(?:static\s+)?([\w.]+)\s*;", line)
    if m:
        yield m.group(1).rsplit(".", 1)[-1]


# ---------- PHP ----------

def _php_binding(line: str) -> Iterable[str]:
    m = re.match(r"^\s*use\s+([\w\\]+)(?:\s+as\s+(\w+))?", line)
    if m:
        yield m.group(2) or m.group(1).rsplit("\\", 1)[-1]


_PY_KEYWORDS = {"if", "elif", "else", "for", "while", "return", "def", "class", "with", "import", "from", "lambda"}


@dataclass(frozen=True)
class LanguageRules:
    family: str
    imports: tuple[TextTemplate, ...]
    exports: tuple[TextTemplate, ...] = ()
    bindings: tuple[LineTemplate, ...] = ()
    functions: tuple[LineTemplate, ...] = ()
    variables: tuple[LineTemplate, ...] = ()
    classes: tuple[LineTemplate, ...] = ()
    body_style: BodyStyle = "braces"


REGISTRY: dict[str, LanguageRules] = {
    ECMASCRIPT: LanguageRules(
        family=ECMASCRIPT,
        imports=(
            _text(r"\bimport\s+(?:[\w$*\s{},]*\s+from\s+)?['\"]([^'\"\n]+)['\"]"),
            _text(r"\bimport\s*\(\s*['\"]([^'\"\n]+)['\"]\s*\)"),
            _text(r"\brequire\s*\(\s*['\"]([^'\"\n]+)['\"]\s*\)"),
        ),
        exports=(
            _text(r"\bexport\s+(?:default\s+)?(?:declare\s+)?(?:abstract\s+)?(?:async\s+)?"
                  r"(?:const|let|var|function\s*\*?|class|interface|type|enum)\s+(" + _IDENT + r")"),
            _es_local_exports,
            _text(r"\bexport\s+(default)\b"),
            _text(r"\bexport\s+[^\n]*?\s*from\s+['\"]([^'\"\n]+)['\"]", fmt="re-export:{}"),
        ),
        bindings=(_es_bindings,),
        functions=(
            _line(r"\bfunction\s*\*?\s*(" + _IDENT + r")\s*\("),
            _line(r"\b(?:const|let|var)\s+(" + _IDENT + r")\s*(?::[^=]+)?=\s*(?:async\s+)?"
                  r"(?:\([^)]*\)|" + _IDENT + r")\s*(?::\s*[^=]+)?=>"),
        ),
        variables=(
            _line(r"\b(?:const|let|var)\s+(" + _IDENT + r")\s*(?::[^=]+)?=(?![=>])"),
        ),
        classes=(_line(r"\bclass\s+(" + _IDENT + r")"),),
    ),
    PYTHON: LanguageRules(
        family=PYTHON,
        imports=(
            _text(r"^[ \t]*from[ \t]+(\.+[\w.]*|[\w.]+)[ \t]+import\b", re.MULTILINE),
            _py_import_modules,
        ),
        bindings=(_py_bindings,),
        functions=(_line(r"^\s*(?:async\s+)?def\s+(\w+)\s*\("),),
        variables=(
            _line(r"^\s*([A-Za-z_]\w*)\s*(?::\s*[^=]+)?=(?!=)",
                  reject=lambda m, line: m.group(1) in _PY_KEYWORDS),
        ),
        classes=(_line(r"^\s*class\s+(\w+)\b"),),
        body_style="indent",
    ),
    JAVA: LanguageRules(
        family=JAVA,
        imports=(_text(r"^[ \t]*import[ \t]+(?:static[ \t]+)?([\w.]+(?:\.\*)?)[ \t]*;", re.MULTILINE),),
        bindings=(_java_binding,),
        functions=(
            _line(r"^\s*" + _JAVA_MODIFIERS + r"([\w<>\[\]?,. ]+?)\s+(\w+)\s*\(",
                  reject=_java_method_reject, group=2),
        ),
        variables=(
            _line(r"^\s*" + _JAVA_MODIFIERS + r"([\w<>\[\]?,.]+(?:\s*<[^=]*>)?)\s+(\w+)\s*=(?!=)",
                  reject=_java_variable_reject, group=2),
        ),
        classes=(_line(r"\bclass\s+(\w+)", reject=lambda m, line: "public " in line),),
    ),
    PHP: LanguageRules(
        family=PHP,
        imports=(
            _text(r"^[ \t]*use[ \t]+([\w\\]+)", re.MULTILINE),
            _text(r"\b(?:require|include)(?:_once)?\s*\(?\s*['\"]([^'\"\n]+)['\"]"),
        ),
        bindings=(_php_binding,),
        functions=(_line(r"\bfunction\s+&?\s*(\w+)\s*\("),),
        variables=(_line(r"\$(\w+)\s*=(?![=>])", reject=lambda m, line: m.group(1) == "this"),),
        classes=(_line(r"^\s*(?:abstract\s+|final\s+)?class\s+(\w+)"),),
    ),
}


def rules_for(tag: str | None) -> Optional[LanguageRules]:
    return REGISTRY.get(language_family(tag))
