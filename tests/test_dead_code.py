"""Dead-code heuristics: token counts, not symbol resolution."""

from crossfile.analysis.detectors.dead_code import detect_dead_code
from crossfile.parsing.functions import extract_import_bindings, identifier_counts
from crossfile.parsing.ir import SourceFile


def _summary(findings):
    return [(f.type, f.name, f.line) for f in findings]


ES_SOURCE = "\n".join([
    "import { used, unused } from './lib'",
    "import Default from './def'",
    "import * as ns from './ns'",
    "const helper = () => used()",
    "function orphan() { return 1 }",
    "export function shipped() { return ns.value }",
    "let counter = 0",
    "const total = counter + 1",
    "console.log(total)",
])


def test_identifier_counts_ignore_dollar_prefix():
    counts = identifier_counts(["$user = $user + user_id", "x1 = 2"])
    assert counts["user"] == 2
    assert counts["user_id"] == 1
    assert counts["x1"] == 1


def test_import_bindings_per_language():
    assert [b.name for b in extract_import_bindings(ES_SOURCE, "ts")] == ["used", "unused", "Default", "ns"]
    py = "import os.path\nimport json as j\nfrom x import a, b as c\n"
    assert [b.name for b in extract_import_bindings(py, "py")] == ["os", "j", "a", "c"]
    assert [b.name for b in extract_import_bindings("import java.util.List;", "java")] == ["List"]
    php = "use App\\Models\\User;\nuse App\\Str as S;\nrequire 'x.php';"
    assert [b.name for b in extract_import_bindings(php, "php")] == ["User", "S"]


def test_ecmascript_dead_code():
    f = SourceFile("src/mod.ts", ES_SOURCE, "ts")
    assert _summary(detect_dead_code(f, exports=["shipped"])) == [
        ("import", "unused", 1),
        ("import", "Default", 2),
        ("function", "helper", 4),
        ("function", "orphan", 5),
    ]


def test_exported_functions_are_kept_only_when_exported():
    f = SourceFile("src/mod.ts", ES_SOURCE, "ts")
    names = [x.name for x in detect_dead_code(f) if x.type == "function"]
    assert "shipped" in names


def test_python_dead_code():
    src = "\n".join([
        "import os",
        "import json as j",
        "from typing import List, Dict as D",
        "from .models import Thing",
        "",
        "",
        "class Unused:",
        "    pass",
        "",
        "",
        "class Used:",
        "    def __init__(self):",
        "        self.items: List = []",
        "",
        "    def _private(self):",
        "        return Thing()",
        "",
        "",
        "def main():",
        "    value = Used()",
        "    leftover = 3",
        "    return os.getcwd(), value",
    ])
    findings = detect_dead_code(SourceFile("pkg/service.py", src, "py"))
    assert _summary(findings) == [
        ("import", "j", 2),
        ("import", "D", 3),
        ("function", "_private", 15),
        ("function", "main", 19),
        ("variable", "leftover", 21),
        ("class", "Unused", 7),
    ]
    assert findings[-1].reason == "Class is never referenced or exported"


def test_java_dead_code():
    src = "\n".join([
        "import java.util.List;",
        "import java.util.Map;",
        "",
        "public class Service {",
        "    private int count = 0;",
        "    public List<String> names() {",
        "        int unusedLocal = 5;",
        "        return null;",
        "    }",
        "    private void helper() {",
        "        count++;",
        "    }",
        "}",
        "class Internal {}",
    ])
    assert _summary(detect_dead_code(SourceFile("Service.java", src, "java"))) == [
        ("import", "Map", 2),
        ("function", "names", 6),
        ("function", "helper", 10),
        ("variable", "unusedLocal", 7),
        ("class", "Internal", 14),
    ]


def test_php_dead_code():
    src = "\n".join([
        "<?php",
        "use App\\Models\\User;",
        "use App\\Support\\Str as S;",
        "require 'boot.php';",
        "",
        "function render($user) {",
        '    $title = "x";',
        "    $unused = 1;",
        "    return $title . $user;",
        "}",
        "",
        "function unusedFn() {}",
        "$user = new User();",
        "render($user);",
    ])
    assert _summary(detect_dead_code(SourceFile("index.php", src, "php"))) == [
        ("import", "S", 3),
        ("function", "unusedFn", 12),
        ("variable", "unused", 8),
    ]


def test_mentions_in_comments_count_as_usage():
    # accepted false negative of the token scan
    src = "import { gone } from './x'\n// gone is kept for later\n"
    assert detect_dead_code(SourceFile("a.ts", src, "ts")) == []


def test_unknown_language_has_no_findings():
    assert detect_dead_code(SourceFile("a.rb", "x = 1\ndef foo; end", "ruby")) == []
