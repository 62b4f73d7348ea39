"""
Test suite for sliding-window chunking.

Verifies window size and overlap, per-page attribution, the minimum length
filter and the step constraint.

System role: Verification of second ingestion stage
"""

import pytest

from ragchat.core.document_processing.models import PageText
from ragchat.core.document_processing.tasks.chunking_task import ChunkingTask


class TestChunkingTask:
    """Test suite for ChunkingTask.chunk()."""

    def test_chunk_should_slide_windows_with_overlap(self) -> None:
        """1200 chars with size 500 / overlap 50 produce windows at 0, 450, 900."""
        # Arrange
        text = "".join(chr(ord("a") + i % 26) for i in range(1200))
        task = ChunkingTask(chunk_size=500, chunk_overlap=50, min_chunk_length=50)

        # Act
        chunks = task.chunk([PageText(text=text, page_number=1)], "notes.pdf")

        # Assert
        assert [c.text for c in chunks] == [text[0:500], text[450:950], text[900:1200]]
        assert chunks[0].text[-50:] == chunks[1].text[:50]
        assert all(c.page_number == 1 for c in chunks)
        assert all(c.source_file_name == "notes.pdf" for c in chunks)

    def test_chunk_should_drop_short_trailing_window(self) -> None:
        """A final window of 40 characters is not longer than 50 and is dropped."""
        # Arrange
        text = "x" * 490
        task = ChunkingTask(chunk_size=500, chunk_overlap=50, min_chunk_length=50)

        # Act
        chunks = task.chunk([PageText(text=text, page_number=3)], "a.pdf")

        # Assert
        assert len(chunks) == 1
        assert chunks[0].text == text

    def test_chunk_should_measure_length_after_trimming(self) -> None:
        """Whitespace-padded windows are judged by their trimmed length."""
        # Arrange
        text = " " * 100 + "y" * 50 + " " * 100
        task = ChunkingTask(chunk_size=500, chunk_overlap=50, min_chunk_length=50)

        # Act
        chunks = task.chunk([PageText(text=text, page_number=1)], "a.pdf")

        # Assert
        assert chunks == []

    def test_chunk_should_never_span_pages(self) -> None:
        """Each page is windowed on its own and keeps its page number."""
        # Arrange
        pages = [
            PageText(text="p" * 120, page_number=1),
            PageText(text="", page_number=2),
            PageText(text="q" * 120, page_number=3),
        ]
        task = ChunkingTask(chunk_size=100, chunk_overlap=10, min_chunk_length=5)

        # Act
        chunks = task.chunk(pages, "book.pdf")

        # Assert
        assert [(c.page_number, set(c.text)) for c in chunks] == [
            (1, {"p"}),
            (1, {"p"}),
            (3, {"q"}),
            (3, {"q"}),
        ]

    def test_chunk_should_return_empty_for_no_pages(self) -> None:
        """No pages, no chunks."""
        assert ChunkingTask().chunk([], "empty.pdf") == []

    def test_init_should_reject_overlap_not_smaller_than_size(self) -> None:
        """The window must advance by at least one character."""
        with pytest.raises(ValueError):
            ChunkingTask(chunk_size=100, chunk_overlap=100)
