import json

from crossfile.analysis.dependency_graph import DependencyGraph
from crossfile.analysis.detectors.complexity import ComplexityFinding
from crossfile.analysis.detectors.redundancy import RedundantFinding
from crossfile.analysis.quality import QualityReport
from crossfile.analysis.runner import run_analysis
from crossfile.reporting.assembler import assemble_issues
from crossfile.reporting.digest import build_digest, entry_points
from crossfile.reporting.exporters import export_dependency_graph, export_json_report
from crossfile.reporting.markdown import write_report
from crossfile.reporting.schema import to_payload


def test_issues_are_ordered_by_severity(small_project):
    result = run_analysis(small_project)
    assert [i.category for i in result.issues] == [
        "missing", "unused", "dead_code", "dead_code", "dead_code", "redundant",
    ]
    assert [i.severity for i in result.issues] == [
        "error", "warning", "warning", "warning", "warning", "info",
    ]
    dead = result.issues[2]
    assert dead.files == ("src/index.ts",)
    assert dead.line == 2
    assert "unusedThing" in dead.message
    assert result.issues[-1].suggestion == "Remove console statements before production deployment"


def test_complexity_severity_follows_error_at():
    quality = QualityReport(
        redundant=[RedundantFinding("unused_code", "a.ts", 3, "Console statement found", "Remove it")],
        complexity=[
            ComplexityFinding(file="a.ts", function="big", line=1, complexity=25),
            ComplexityFinding(file="a.ts", function="mid", line=9, complexity=12),
        ],
    )
    issues = assemble_issues(DependencyGraph(), quality, rules={"complexity": {"error_at": 20}})
    assert [(i.category, i.severity, i.line) for i in issues] == [
        ("complexity", "error", 1),
        ("complexity", "warning", 9),
        ("redundant", "info", 3),
    ]
    assert 'Function "big" in a.ts has cyclomatic complexity 25' == issues[0].message


def test_explicit_zero_error_at_is_honoured():
    quality = QualityReport(complexity=[ComplexityFinding(file="a.ts", function="f", line=1, complexity=3)])
    issues = assemble_issues(DependencyGraph(), quality, rules={"complexity": {"error_at": 0}})
    assert [i.severity for i in issues] == ["error"]


def test_digest_structure(small_project):
    result = run_analysis(small_project)
    assert entry_points(result.graph) == ["src/index.ts", "src/orphan.ts"]
    digest = result.digest
    lines = digest.split("\n")
    assert lines[:4] == [
        "PROJECT STRUCTURE:",
        "Total Files: 4",
        "Total Lines: 13",
        "Entry Points: src/index.ts, src/orphan.ts",
    ]
    assert "  - src/index.ts (imports: 2)" in lines
    assert "  - src/greet.ts (used by: 1)" in lines
    assert "  - src/orphan.ts" in lines
    assert "- MISSING: Missing dependency \"./missing\" in src/helpers.ts" in lines
    assert "DEAD CODE (3 instances):" in lines
    assert "REDUNDANT CODE (1 instances):" in lines
    assert "HIGH COMPLEXITY (0 functions):" in lines


def test_route_handlers_are_digest_entry_points(files_of):
    graph = run_analysis(files_of({
        "lib/client.ts": "import '../app/api/users/route'",
        "app/api/users/route.ts": "",
    })).graph
    assert graph.nodes["app/api/users/route.ts"].dependents == ["lib/client.ts"]
    assert entry_points(graph) == ["lib/client.ts", "app/api/users/route.ts"]


def test_digest_caps_listings(files_of):
    files = files_of({f"m{i}.ts": f"const unused{i} = {i}\n" for i in range(4)})
    result = run_analysis(files, rules={"digest": {"max_dead_code": 2}})
    digest_lines = result.digest.split("\n")
    assert "DEAD CODE (4 instances):" in digest_lines
    assert sum(1 for line in digest_lines if line.startswith("- variable")) == 2


def test_digest_without_quality(cycle_pair):
    from crossfile.analysis.graph_analyzer import build_dependency_graph, dependency_issues

    graph = build_dependency_graph(cycle_pair)
    digest = build_digest(cycle_pair, graph, None, dependency_issues(graph))
    assert "CODE QUALITY ISSUES DETECTED:" not in digest
    assert "- CIRCULAR: Circular dependency detected: a.ts -> b.ts -> a.ts" in digest


def test_payload_uses_camel_case(small_project):
    payload = to_payload(run_analysis(small_project))
    assert payload["summary"]["filesAnalyzed"] == 4
    assert payload["summary"]["bySeverity"] == {"error": 1, "warning": 4, "info": 1}
    assert payload["dependencyGraph"]["missing"] == [
        {"file": "src/helpers.ts", "missingSpecifier": "./missing"},
    ]
    assert payload["dependencyGraph"]["unused"] == ["src/orphan.ts"]
    nodes = payload["dependencyGraph"]["nodes"]
    assert list(nodes) == ["src/index.ts", "src/greet.ts", "src/helpers.ts", "src/orphan.ts"]
    assert nodes["src/greet.ts"]["dependents"] == ["src/index.ts"]
    assert nodes["src/helpers.ts"]["missing"] == ["./missing"]
    assert set(payload["quality"]) == {"duplicates", "deadCode", "redundantCode", "complexityIssues", "truncated"}
    assert payload["budgetEvents"] == []
    assert payload["truncated"] is False
    json.dumps(payload)


def test_exported_artifacts(small_project, tmp_path):
    result = run_analysis(small_project)
    report_json = export_json_report(result, tmp_path)
    data = json.loads(report_json.read_text(encoding="utf-8"))
    assert data["summary"]["totalIssues"] == 6
    assert data["digest"] == result.digest

    dep = json.loads(export_dependency_graph(result.graph, tmp_path).read_text(encoding="utf-8"))
    assert len(dep["nodes"]) == 4 and len(dep["edges"]) == 2

    md = write_report(result, tmp_path).read_text(encoding="utf-8")
    assert md.startswith("# Cross-file Analysis Report")
    assert "- Errors: 1  |  Warnings: 4  |  Info: 1" in md
    assert "### Dead code (3)" in md
    assert "- Missing dependencies: 1" in md
