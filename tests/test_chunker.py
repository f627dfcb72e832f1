import pytest

from proofreader.chunker import chunk_document, estimate_tokens, iter_chunks


def test_small_document_is_one_chunk():
    text = "# Title\n\nShort paragraph."
    chunks = chunk_document(text, max_tokens=100)
    assert len(chunks) == 1
    assert chunks[0].start_line == 1
    assert chunks[0].text == text


def test_large_document_splits_on_line_boundaries():
    lines = [f"Line {i:03d} " + "x" * 30 for i in range(40)]
    text = "\n".join(lines)
    chunks = chunk_document(text, max_tokens=50)

    assert len(chunks) >= 2
    assert "\n".join(c.text for c in chunks) == text
    for c in chunks:
        assert c.lines == lines[c.start_line - 1:c.start_line - 1 + len(c.lines)]
        # the bound is on summed line estimates; joined text also carries the newlines
        assert sum(estimate_tokens(l) for l in c.lines) <= 50
    assert [c.index for c in chunks] == list(range(len(chunks)))


def test_start_lines_are_contiguous():
    text = "\n".join("word " * 10 for _ in range(20))
    chunks = chunk_document(text, max_tokens=30)
    expected = 1
    for c in chunks:
        assert c.start_line == expected
        expected = c.end_line + 1
    assert expected - 1 == 20


def test_oversized_line_is_emitted_alone():
    big = "y" * 400
    text = "\n".join(["a", big, "b"])
    chunks = chunk_document(text, max_tokens=20)
    assert [c.lines for c in chunks] == [["a"], [big], ["b"]]
    assert [c.start_line for c in chunks] == [1, 2, 3]


def test_iter_chunks_is_lazy():
    gen = iter_chunks("a\nb", max_tokens=10)
    assert next(gen).text == "a\nb"
    with pytest.raises(StopIteration):
        next(gen)


def test_rejects_non_positive_limit():
    with pytest.raises(ValueError):
        chunk_document("text", max_tokens=0)
