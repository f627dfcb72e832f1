import pytest

from proofreader.adapters import aspell_adapter
from proofreader.adapters.aspell_adapter import (
    AspellChecker,
    AspellConfig,
    clean_line,
    find_aspell,
    is_likely_typo,
    parse_aspell_output,
    should_skip,
)
from proofreader.config import ConfigError

ASPELL_OUTPUT = """@(#) International Ispell Version 3.1.20 (but really Aspell 0.60.8)
*
*

*
& recieve 3 2: receive, relieve, recede
*
*
& recieve 3 16: receive, relieve, recede
*

& NASA 1 1: NAS
*

"""


def test_parse_groups_by_input_line():
    groups = parse_aspell_output(ASPELL_OUTPUT, 3)
    assert groups[0] == []
    assert groups[1] == [("recieve", ["receive", "relieve", "recede"])] * 2
    assert groups[2] == [("NASA", ["NAS"])]


@pytest.mark.parametrize("word,suggestion,expected", [
    ("recieve", "receive", True),
    ("NASA", "NAS", False),          # acronym
    ("Smith", "Smite", False),       # proper noun
    ("ab", "an", False),             # too short
    ("h2o", "ho", False),            # digits
    ("occured", "occurred", True),
    ("zxqv", "apple", False),        # not similar
])
def test_typo_heuristics(word, suggestion, expected):
    assert is_likely_typo(word, suggestion) is expected


def test_line_filters():
    assert should_skip("```python")
    assert should_skip("Energy is $E = mc^2$")
    assert should_skip("- [ ] task")
    assert not should_skip("Plain prose here.")
    assert clean_line("See [the docs](https://x.y/z) and `code` **now**").split() == ["See", "the", "docs", "and", "now"]


def test_missing_binary_is_config_error(monkeypatch):
    monkeypatch.setattr(aspell_adapter.shutil, "which", lambda name: None)
    with pytest.raises(ConfigError):
        find_aspell("aspell")


def test_check_emits_spelling_suggestions(monkeypatch):
    checker = AspellChecker(AspellConfig(), binary_path="/usr/bin/aspell")
    sent = []

    def fake_run(lines):
        sent.append(lines)
        return ASPELL_OUTPUT

    monkeypatch.setattr(checker, "_run", fake_run)
    text = "Fine line\nI recieve it, I recieve it\n```\nNASA rocks"
    findings = checker.check(text, level=1, start_line=10)

    assert sent == [["Fine line", "I recieve it, I recieve it", "NASA rocks"]]
    assert findings == [{
        "line": 11,
        "type": "suggestion",
        "kind": "spelling",
        "from": "recieve",
        "to": "receive",
        "reason": 'Possible misspelling: "recieve"',
        "context": "Suggestion: receive, relieve, recede",
    }]
