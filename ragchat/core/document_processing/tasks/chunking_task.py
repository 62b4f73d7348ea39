"""
Sliding-window text chunking task.

Splits each page independently into overlapping fixed-size windows so every
chunk keeps an exact page attribution.

Dependencies: None
System role: Second stage of document ingestion pipeline
"""

from ..models import ChunkDraft, PageText


class ChunkingTask:
    """Split page texts into overlapping fixed-size windows."""

    def __init__(
        self,
        chunk_size: int = 500,
        chunk_overlap: int = 50,
        min_chunk_length: int = 50,
    ) -> None:
        """
        Initialize chunking task with window configuration.

        Args:
            chunk_size: Window size in characters
            chunk_overlap: Characters shared by consecutive windows
            min_chunk_length: Windows with trimmed length <= this are dropped

        Raises:
            ValueError: When the overlap does not leave a positive step
        """
        if chunk_overlap >= chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        self._chunk_size = chunk_size
        self._step = chunk_size - chunk_overlap
        self._min_chunk_length = min_chunk_length

    def chunk(self, pages: list[PageText], file_label: str) -> list[ChunkDraft]:
        """
        Split pages into chunk drafts.

        Args:
            pages: Extracted page texts
            file_label: Source file name recorded on every chunk

        Returns:
            list[ChunkDraft]: Chunks in page order, then window order
        """
        chunks: list[ChunkDraft] = []
        for page in pages:
            text = page.text
            for start in range(0, len(text), self._step):
                window = text[start:start + self._chunk_size]
                if len(window.strip()) > self._min_chunk_length:
                    chunks.append(
                        ChunkDraft(
                            text=window,
                            source_file_name=file_label,
                            page_number=page.page_number,
                        )
                    )
        return chunks
