from crossfile.analysis.detectors.duplication import code_blocks, detect_duplicates, normalize, similarity
from crossfile.core.config import AnalysisBudget
from crossfile.parsing.ir import SourceFile


def test_normalize_strips_comments_then_collapses_whitespace():
    text = "a  // comment\n/* block\n comment */ b\n  # hash\nc"
    assert normalize(text) == "a b c"


def test_similarity_is_positional_and_symmetric():
    assert similarity("abcd", "abcd") == 1.0
    assert similarity("abcd", "abce") == 0.75
    assert similarity("abcd", "abcdefgh") == 0.5
    assert similarity("abcdefgh", "abcd") == similarity("abcd", "abcdefgh")
    assert similarity("", "") == 1.0


def test_windows_cover_every_offset(duplicated_block):
    f = SourceFile("a.js", duplicated_block + "\n" + duplicated_block, "js")
    blocks = code_blocks(f, window=5, min_chars=10)
    assert [b.start_line for b in blocks] == list(range(1, 7))
    assert blocks[-1].end_line == 10


def test_short_windows_are_discarded():
    f = SourceFile("a.js", "a\nb\nc\nd\ne\n", "js")
    assert code_blocks(f, window=5, min_chars=50) == []
    assert code_blocks(SourceFile("b.js", "x\ny", "js"), window=5) == []


def test_cross_file_duplicate_reported(duplicated_block):
    files = [SourceFile("a.js", duplicated_block, "js"), SourceFile("b.ts", duplicated_block, "ts")]
    result = detect_duplicates(files)
    assert len(result.findings) == 1
    finding = result.findings[0]
    assert finding.similarity == 1.0
    assert finding.lines == 5
    assert [b.file for b in finding.blocks] == ["a.js", "b.ts"]
    assert (finding.blocks[0].start_line, finding.blocks[0].end_line) == (1, 5)
    assert not result.truncated


def test_swapping_files_keeps_the_score(duplicated_block):
    other = duplicated_block.replace("computeTotals", "computeAmount").replace("price", "costs")
    a = SourceFile("a.js", duplicated_block, "js")
    b = SourceFile("b.js", other, "js")
    forward = detect_duplicates([a, b]).findings
    backward = detect_duplicates([b, a]).findings
    assert len(forward) == len(backward) == 1
    assert forward[0].similarity == backward[0].similarity
    assert 0.8 < forward[0].similarity < 1.0


def test_same_file_repeats_are_not_reported(duplicated_block):
    f = SourceFile("a.js", duplicated_block + "\n" + duplicated_block, "js")
    assert detect_duplicates([f]).findings == []


def test_threshold_is_strict(duplicated_block):
    files = [SourceFile("a.js", duplicated_block, "js"), SourceFile("b.js", duplicated_block, "js")]
    assert detect_duplicates(files, threshold=1.0).findings == []


def test_length_ratio_pruning_skips_comparisons(duplicated_block):
    long_block = duplicated_block.replace("item.quantity", "item.quantity * item.discount * item.taxRate * 100")
    files = [SourceFile("a.js", duplicated_block, "js"), SourceFile("b.js", long_block, "js")]
    result = detect_duplicates(files, threshold=0.9)
    assert result.comparisons == 0
    assert result.findings == []


def test_duplicate_cap_truncates(duplicated_block):
    files = [SourceFile(f"f{i}.js", duplicated_block, "js") for i in range(3)]
    result = detect_duplicates(files, budget=AnalysisBudget(max_duplicates=1))
    assert len(result.findings) == 1
    assert result.truncated
    assert "duplicate cap" in result.reasons[0]


def test_comparison_and_time_budgets(duplicated_block):
    files = [SourceFile(f"f{i}.js", duplicated_block, "js") for i in range(2)]
    capped = detect_duplicates(files, budget=AnalysisBudget(max_comparisons=0))
    assert capped.truncated and capped.findings == []
    assert "comparison budget" in capped.reasons[0]

    timed = detect_duplicates(files, budget=AnalysisBudget(time_budget_s=-1))
    assert timed.truncated
    assert "time budget" in timed.reasons[0]


def test_window_cap_per_file(duplicated_block):
    body = "\n".join([duplicated_block] * 4)
    files = [SourceFile("a.js", body, "js"), SourceFile("b.js", duplicated_block, "js")]
    result = detect_duplicates(files, budget=AnalysisBudget(max_windows_per_file=2))
    assert result.truncated
    assert result.reasons[0].startswith("a.js:")
    assert all(f.blocks[0].start_line <= 2 for f in result.findings)
