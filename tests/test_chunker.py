"""Tests for paragraph-aligned chunking."""

import pytest

from ragfolio.service.chunker import semantic_chunk, split_paragraphs


def _paragraphs(chunks: list[str]) -> list[str]:
    return [para for chunk in chunks for para in split_paragraphs(chunk)]


class TestSplitParagraphs:
    """Tests for split_paragraphs."""

    def test_splits_on_blank_lines(self):
        assert split_paragraphs("one\n\ntwo\n\n\n\nthree") == ["one", "two", "three"]

    def test_single_newline_stays_in_paragraph(self):
        assert split_paragraphs("line one\nline two") == ["line one\nline two"]

    def test_drops_whitespace_only_paragraphs(self):
        assert split_paragraphs("one\n\n   \n\ntwo") == ["one", "two"]


class TestSemanticChunk:
    """Tests for semantic_chunk."""

    def test_small_paragraphs_share_a_chunk(self):
        """Short paragraphs are packed together with a blank line between them."""
        chunks = semantic_chunk("Alpha\n\nBeta", 500)
        assert chunks == ["Alpha\n\nBeta"]

    def test_flushes_when_limit_would_be_exceeded(self):
        text = "a" * 40 + "\n\n" + "b" * 40 + "\n\n" + "c" * 40
        chunks = semantic_chunk(text, 90)
        assert chunks == ["a" * 40 + "\n\n" + "b" * 40, "c" * 40]

    def test_oversize_paragraph_becomes_its_own_chunk(self):
        long_para = "x" * 300
        chunks = semantic_chunk(f"short\n\n{long_para}\n\ntail", 100)
        assert chunks == ["short", long_para, "tail"]

    def test_only_single_paragraph_chunks_exceed_limit(self):
        text = "\n\n".join(["p" * n for n in (10, 80, 150, 20, 30, 200, 5)])
        for chunk in semantic_chunk(text, 100):
            if len(chunk) > 100:
                assert len(split_paragraphs(chunk)) == 1

    def test_no_empty_chunks(self):
        chunks = semantic_chunk("\n\n\n  \n\nfirst\n\n\n\n   \n\nsecond\n\n", 10)
        assert chunks
        assert all(chunk.strip() for chunk in chunks)

    def test_reconstruction_preserves_paragraph_order(self):
        paragraphs = [f"Paragraph number {i} with some words." for i in range(20)]
        text = "\n\n".join(paragraphs)
        chunks = semantic_chunk(text, 120)
        assert _paragraphs(chunks) == paragraphs

    def test_empty_text_gives_no_chunks(self):
        assert semantic_chunk("", 100) == []
        assert semantic_chunk("   \n\n  ", 100) == []

    @pytest.mark.parametrize("size", [0, -5])
    def test_rejects_non_positive_size(self, size):
        with pytest.raises(ValueError, match="max_chunk_size"):
            semantic_chunk("text", size)
