from crossfile.analysis.resolver import candidates, is_external, normalize_path, resolve


def test_bare_names_are_external():
    assert is_external("react")
    assert is_external("@scope/pkg")
    assert not is_external("./a")
    assert not is_external("/abs")
    res = resolve("react", "src/a.ts", {"src/react.ts"})
    assert res.kind == "external" and res.path is None


def test_relative_specifier_resolves_with_extension():
    res = resolve("./b", "src/a.ts", {"src/a.ts", "src/b.ts"})
    assert res.kind == "resolved"
    assert res.path == "src/b.ts"


def test_candidate_order_is_the_tie_break():
    assert resolve("./b", "src/a.ts", {"src/b.ts", "src/b.js"}).path == "src/b.js"
    assert resolve("./b", "src/a.ts", {"src/b", "src/b.ts"}).path == "src/b"
    assert resolve("./b", "src/a.ts", {"src/b.py", "src/b/index.js"}).path == "src/b.py"


def test_candidates_list():
    assert candidates("src/b") == [
        "src/b",
        "src/b.js", "src/b.jsx", "src/b.ts", "src/b.tsx", "src/b.py", "src/b.java", "src/b.php",
        "src/b/index.js", "src/b/index.ts", "src/b/index.tsx", "src/b/index.py",
        "src/b/__init__.py",
    ]


def test_directory_index_and_parent_segments():
    files = {"src/components/index.tsx", "src/lib/util.ts"}
    assert resolve("./components", "src/a.ts", files).path == "src/components/index.tsx"
    assert resolve("../lib/util", "src/app/page.tsx", files).path == "src/lib/util.ts"


def test_normalize_never_climbs_above_root():
    assert normalize_path("", "../../../x") == "x"
    assert normalize_path("src/app", "./x/../y") == "src/app/y"
    assert normalize_path("src/app", "/lib/util") == "lib/util"
    assert resolve("../../../x", "a.ts", {"x.ts"}).path == "x.ts"


def test_root_relative_specifier():
    assert resolve("/lib/util", "src/deep/a.ts", {"lib/util.ts"}).path == "lib/util.ts"


def test_unmatched_relative_specifier_is_unresolved():
    res = resolve("./missing", "c.ts", {"c.ts"})
    assert res.kind == "unresolved"
    assert res.path is None


def test_python_relative_modules():
    assert resolve(".sibling", "pkg/mod.py", {"pkg/sibling.py"}, "py").path == "pkg/sibling.py"
    assert resolve("..core.base", "pkg/sub/mod.py", {"pkg/core/base.py"}, "python").path == "pkg/core/base.py"
    assert resolve(".", "pkg/mod.py", {"pkg/__init__.py"}, "py").path == "pkg/__init__.py"
    assert resolve("os.path", "pkg/mod.py", {"os/path.py"}, "py").kind == "external"


def test_python_dots_are_literal_for_other_languages():
    # ".sibling" is a relative path for a JS importer, not a module path
    assert resolve(".sibling", "pkg/mod.js", {"pkg/sibling.py"}, "js").kind == "unresolved"


def test_backslash_importer_path():
    assert resolve("./b", "src\\a.ts", {"src/b.ts"}).path == "src/b.ts"
