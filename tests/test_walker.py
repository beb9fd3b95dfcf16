from crossfile.ingestion.walker import detect_language, walk_repo


def _write(root, rel, text=""):
    p = root / rel
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


def test_walker_loads_source_files(tmp_path):
    _write(tmp_path, "index.ts", "import './lib/util'\n")
    _write(tmp_path, "lib/util.ts", "export const x = 1\n")
    _write(tmp_path, "pkg/mod.py", "import os\n")
    _write(tmp_path, "src/Main.java", "class Main {}\n")
    _write(tmp_path, "web/index.php", "<?php\n")
    _write(tmp_path, "README.md", "# docs\n")
    _write(tmp_path, "node_modules/dep/index.js", "module.exports = 1\n")

    files = walk_repo(tmp_path)
    assert [f.path for f in files] == ["index.ts", "lib/util.ts", "pkg/mod.py", "src/Main.java", "web/index.php"]
    by_path = {f.path: f for f in files}
    assert by_path["pkg/mod.py"].language == "py"
    assert by_path["index.ts"].content == "import './lib/util'\n"


def test_gitignore_and_excludes(tmp_path):
    _write(tmp_path, ".gitignore", "generated/\n*.gen.ts\n")
    _write(tmp_path, "generated/out.ts", "")
    _write(tmp_path, "a.gen.ts", "")
    _write(tmp_path, "keep.ts", "")
    _write(tmp_path, "types.d.ts", "")
    _write(tmp_path, "skip/me.ts", "")

    assert [f.path for f in walk_repo(tmp_path)] == ["keep.ts", "skip/me.ts"]
    assert [f.path for f in walk_repo(tmp_path, exclude=["skip/"])] == ["keep.ts", "types.d.ts"]


def test_size_cap_and_include(tmp_path):
    _write(tmp_path, "big.ts", "x" * 100)
    _write(tmp_path, "small.ts", "x")
    _write(tmp_path, "a.py", "")
    assert [f.path for f in walk_repo(tmp_path, max_bytes=10)] == ["a.py", "small.ts"]
    assert [f.path for f in walk_repo(tmp_path, include=["*.py"])] == ["a.py"]


def test_detect_language(tmp_path):
    assert detect_language(tmp_path / "x.TSX") == "tsx"
    assert detect_language(tmp_path / "Makefile") == ""
