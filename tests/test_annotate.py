from proofreader.annotate import insert_suggestions
from proofreader.ir import Suggestion


def test_marker_appended_after_single_space():
    text = "# Title\nThe results was clear.\nEnd."
    s = Suggestion(id="S1", line=2, kind="clarity", text="Agreement", suggested="The results were clear.")
    out = insert_suggestions(text, [s])
    assert out.split("\n") == [
        "# Title",
        'The results was clear. <!-- [S1] REVIEW: Agreement Suggested: "The results were clear." -->',
        "End.",
    ]


def test_same_line_markers_keep_insertion_order():
    text = "One line."
    out = insert_suggestions(text, [
        Suggestion(id="S2", line=1, kind="style", text="second"),
        Suggestion(id="S1", line=1, kind="style", text="first"),
    ])
    assert out == "One line. <!-- [S2] REVIEW: second --> <!-- [S1] REVIEW: first -->"


def test_out_of_range_and_unencodable_are_dropped():
    text = "a\nb"
    out = insert_suggestions(text, [
        Suggestion(id="S1", line=3, kind="style", text="beyond the end"),
        Suggestion(id="S2", line=0, kind="style", text="before the start"),
        Suggestion(id="S3", line=1, kind="style", text="bad --> text"),
    ])
    assert out == text


def test_no_suggestions_is_identity():
    text = "x\r\ny\n"
    assert insert_suggestions(text, []) == text


def test_crlf_line_keeps_ending():
    out = insert_suggestions("a\r\nb", [Suggestion(id="S1", line=1, kind="style", text="t")])
    assert out == "a <!-- [S1] REVIEW: t -->\r\nb"
