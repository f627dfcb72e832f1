import json
from pathlib import Path

from proofreader.pipeline import (
    final_path,
    proofread_path,
    proofread_text,
    run_apply,
    run_proofread,
)
from proofreader.resolve import ALL, resolve_suggestions


class StubChecker:
    """Returns canned findings keyed by chunk start line."""
    name = "stub"

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def check(self, text, level, start_line):
        self.calls.append((start_line, level))
        resp = self.responses.get(start_line, [])
        if isinstance(resp, Exception):
            raise resp
        return resp


def _doc(n=12, width=40):
    return "\n".join(f"Line {i:02d} " + "z" * width for i in range(1, n + 1))


def test_zero_findings_is_byte_identical():
    text = "# Title\r\n\r\nSome  text.\n\ttabbed\n"
    out = proofread_text(text, StubChecker({}), level=2)
    assert out.text == text
    assert out.suggestions == []


def test_ids_follow_chunk_order():
    text = _doc()
    # 48-char lines, 12 tokens each; a 30-token limit gives 2 lines per chunk
    responses = {
        1: [{"line": 2, "type": "suggestion", "reason": "a"},
            {"line": 1, "type": "suggestion", "reason": "b"}],
        5: [{"line": 6, "type": "suggestion", "reason": "c"}],
        11: [{"line": 11, "type": "suggestion", "reason": "d"}],
    }
    for _ in range(2):
        checker = StubChecker(responses)
        out = proofread_text(text, checker, level=3, max_chunk_tokens=30)
        assert [c[0] for c in checker.calls] == [1, 3, 5, 7, 9, 11]
        assert [(s.id, s.line, s.text) for s in out.suggestions] == [
            ("S1", 2, "a"), ("S2", 1, "b"), ("S3", 6, "c"), ("S4", 11, "d"),
        ]


def test_failed_chunk_does_not_abort_run():
    text = _doc()
    responses = {
        1: [{"line": 1, "type": "suggestion", "reason": "kept"}],
        3: RuntimeError("api down"),
        5: [{"line": 5, "type": "auto-correction", "from": "Line", "to": "Row"}],
    }
    out = proofread_text(text, StubChecker(responses), level=2, max_chunk_tokens=30)
    assert out.failed_chunks == [1]
    assert out.total_chunks == 6
    assert [s.id for s in out.suggestions] == ["S1"]
    assert out.text.split("\n")[4].startswith("Row 05")


def test_full_round_trip_keeps_untouched_lines(tmp_path):
    original = "# Notes\nTeh first line.\nUntouched line.\nA long winded sentence here.\n"
    src = tmp_path / "notes.md"
    src.write_text(original, encoding="utf-8")

    checker = StubChecker({1: [
        {"line": 2, "type": "auto-correction", "from": "Teh", "to": "The", "kind": "spelling"},
        {"line": 4, "type": "suggestion", "from": "long winded", "to": "long-winded", "reason": "Hyphenate"},
        {"line": 4, "type": "suggestion", "reason": "Consider shortening"},
        {"line": 99, "type": "suggestion", "reason": "nowhere"},
    ]})
    result = run_proofread(str(src), checker, level=2)

    mid = tmp_path / "notes.proofread.md"
    assert result.corrected_file == "notes.proofread.md"
    mid_lines = mid.read_text(encoding="utf-8").split("\n")
    assert mid_lines[1] == "The first line."
    assert mid_lines[3] == ('A long winded sentence here. <!-- [S1] REVIEW: Hyphenate Suggested: "long-winded" -->'
                            ' <!-- [S2] REVIEW: Consider shortening -->')

    payload = result.to_dict()
    assert payload["autoApplied"]["count"] == 1
    assert payload["autoApplied"]["changes"][0]["from"] == "Teh"
    # the line-99 suggestion points past the end and never gets an id
    assert [s["id"] for s in payload["suggestions"]] == ["S1", "S2"]
    json.dumps(payload)

    applied = run_apply(str(mid), {"S2"})
    assert applied.final_file == "notes.final.md"
    assert applied.applied == ["S2"]
    assert applied.removed == ["S1"]

    final_lines = (tmp_path / "notes.final.md").read_text(encoding="utf-8").split("\n")
    orig_lines = original.split("\n")
    for i in (0, 2, 4):
        assert orig_lines[i] == mid_lines[i] == final_lines[i]
    assert final_lines[3] == "A long winded sentence here."


def test_apply_all(tmp_path):
    mid = tmp_path / "x.proofread.md"
    mid.write_text("a <!-- [S1] REVIEW: one -->\nb <!-- [S2] REVIEW: two -->", encoding="utf-8")
    result = run_apply(str(mid), ALL)
    assert result.to_dict() == {"file": "x.proofread.md", "finalFile": "x.final.md",
                                "applied": ["S1", "S2"], "removed": []}


def test_spellcheck_engine_reports_level_one(tmp_path):
    src = tmp_path / "a.md"
    src.write_text("hello", encoding="utf-8")
    checker = StubChecker({})
    checker.name = "spellcheck"
    result = run_proofread(str(src), checker, level=3)
    assert result.level == 1
    assert checker.calls == [(1, 1)]


def test_output_naming():
    assert proofread_path("docs/chapter.md") == Path("docs/chapter.proofread.md")
    assert proofread_path("notes.txt") == Path("notes.proofread.txt")
    assert proofread_path("README") == Path("README.proofread")
    assert final_path("docs/chapter.proofread.md") == Path("docs/chapter.final.md")
    assert final_path("chapter.md") == Path("chapter.final.md")


def test_duplicate_suggestions_collapse_before_ids():
    text = _doc()
    dup = {"line": 1, "type": "suggestion", "to": "Row", "reason": "Rename"}
    responses = {
        1: [dup, dict(dup), {"line": 2, "type": "suggestion", "reason": "other"}],
        3: [{"line": 3, "type": "suggestion", "reason": "later"}],
    }
    out = proofread_text(text, StubChecker(responses), level=2, max_chunk_tokens=30)
    assert [(s.id, s.line, s.text) for s in out.suggestions] == [
        ("S1", 1, "Rename"), ("S2", 2, "other"), ("S3", 3, "later"),
    ]
    assert out.text.split("\n")[0].count("<!-- [S") == 1


def test_stray_comment_opener_round_trip():
    text = "Use `<!--` to start a HTML coment.\nNext line."
    checker = StubChecker({1: [
        {"line": 1, "type": "suggestion", "from": "coment", "to": "comment", "reason": "Typo"},
    ]})
    out = proofread_text(text, checker, level=2)
    assert [s.id for s in out.suggestions] == ["S1"]

    resolved = resolve_suggestions(out.text, ALL)
    assert resolved.text == text
    assert resolved.applied == ["S1"]
    assert resolved.removed == []
