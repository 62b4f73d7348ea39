"""
Test suite for the ingestion pipeline and its embedding stage.

Covers progress reporting, sequential embedding, the abort-on-failure rule
and the order of metadata and chunk persistence.

System role: Verification of document ingestion orchestration
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from ragchat.core.document_processing.configs import DocumentPipelineSettings
from ragchat.core.document_processing.entrypoint import DocumentPipeline
from ragchat.core.document_processing.models import ChunkDraft, PageText
from ragchat.core.document_processing.tasks.embedding_task import EmbeddingTask
from ragchat.core.exceptions import EmbeddingError, VectorStoreError


def _drafts(count: int) -> list[ChunkDraft]:
    return [ChunkDraft(text=f"chunk {i}", source_file_name="a.pdf", page_number=1) for i in range(count)]


class TestEmbeddingTask:
    """Test suite for EmbeddingTask."""

    def test_progress_for_should_report_even_indices_and_last(self) -> None:
        """Five chunks report indices 0, 2 and 4."""
        # Arrange
        task = EmbeddingTask(MagicMock(), seconds_per_chunk_estimate=0.2)

        # Act
        reported = [task.progress_for(i, 5) for i in range(5)]

        # Assert
        assert reported[1] is None and reported[3] is None
        assert reported[0] == ("Embedding chunk 1 of 5 (approx. 1s remaining)...", 20)
        assert reported[2] == ("Embedding chunk 3 of 5 (approx. 1s remaining)...", 48)
        assert reported[4] == ("Embedding chunk 5 of 5 (approx. 1s remaining)...", 76)

    def test_progress_for_should_report_odd_last_index(self) -> None:
        task = EmbeddingTask(MagicMock())
        assert task.progress_for(3, 4) is not None

    @pytest.mark.asyncio
    async def test_embed_should_keep_order_and_empty_vectors(self, mock_embedding_client: MagicMock) -> None:
        """Chunks keep draft order; an empty embedding is kept, not filtered."""
        # Arrange
        mock_embedding_client.embed = AsyncMock(side_effect=[[0.1], [], [0.3]])
        task = EmbeddingTask(mock_embedding_client)

        # Act
        chunks = await task.embed(_drafts(3), AsyncMock())

        # Assert
        assert [c.text for c in chunks] == ["chunk 0", "chunk 1", "chunk 2"]
        assert [c.embedding for c in chunks] == [[0.1], [], [0.3]]

    @pytest.mark.asyncio
    async def test_embed_should_abort_on_first_failure(self, mock_embedding_client: MagicMock) -> None:
        """No chunk after a failed one is embedded."""
        # Arrange
        mock_embedding_client.embed = AsyncMock(side_effect=[[0.1], EmbeddingError("quota"), [0.3]])
        task = EmbeddingTask(mock_embedding_client)

        # Act / Assert
        with pytest.raises(EmbeddingError):
            await task.embed(_drafts(3), AsyncMock())
        assert mock_embedding_client.embed.await_count == 2


@pytest.fixture
def parsing_task() -> MagicMock:
    task = MagicMock()
    task.parse.return_value = [PageText(text="z" * 120, page_number=1)]
    return task


@pytest.fixture
def vector_store() -> MagicMock:
    store = MagicMock()
    store.add_chunks = AsyncMock(side_effect=lambda chunks, document_id: len(chunks))
    return store


@pytest.fixture
def pipeline(mock_embedding_client, test_session_factory, vector_store, parsing_task) -> DocumentPipeline:
    settings = DocumentPipelineSettings(chunk_size=100, chunk_overlap=10, min_chunk_length=5)
    return DocumentPipeline(
        mock_embedding_client,
        test_session_factory,
        vector_store,
        settings=settings,
        parsing_task=parsing_task,
    )


class TestDocumentPipeline:
    """Test suite for DocumentPipeline.ingest()."""

    @pytest.mark.asyncio
    async def test_ingest_should_save_document_then_chunks(
        self, pipeline: DocumentPipeline, vector_store: MagicMock, test_session_factory
    ) -> None:
        """The document row exists before chunks are written and chunks reference it."""
        # Arrange
        from ragchat.boundary.db.CRUD import document_crud

        # Act
        result = await pipeline.ingest("/tmp/a.pdf", "a.pdf", scope="chat-1")

        # Assert
        assert result.chunk_count == 2
        assert result.document.scope == "chat-1"
        assert result.document.chunk_count == 2
        chunks, document_id = vector_store.add_chunks.await_args.args
        assert document_id == result.document.id
        assert all(c.document_id == result.document.id for c in chunks)
        async with test_session_factory() as session:
            assert await document_crud.exists(session, result.document.id)

    @pytest.mark.asyncio
    async def test_ingest_should_report_stage_progress(self, pipeline: DocumentPipeline) -> None:
        """Sync observers receive each stage in order, ending at 100%."""
        # Arrange
        updates: list[tuple[str, int]] = []

        # Act
        await pipeline.ingest("/tmp/a.pdf", "a.pdf", on_progress=lambda s, p: updates.append((s, p)))

        # Assert
        statuses = [s for s, _ in updates]
        assert statuses[0] == "Parsing PDF (a.pdf)..."
        assert statuses[1] == "Splitting document into chunks (1 pages)..."
        assert "Saving document metadata..." in statuses
        assert "Finalizing: Saving vector embeddings..." in statuses
        assert updates[-1] == ("Upload Complete!", 100)
        percents = [p for _, p in updates]
        assert percents == sorted(percents)

    @pytest.mark.asyncio
    async def test_ingest_should_keep_document_when_chunk_save_fails(
        self, pipeline: DocumentPipeline, vector_store: MagicMock, test_session_factory
    ) -> None:
        """A chunk failure propagates and leaves the committed document row."""
        # Arrange
        from ragchat.boundary.db.CRUD import document_crud

        vector_store.add_chunks = AsyncMock(side_effect=VectorStoreError("insert failed"))

        # Act
        with pytest.raises(VectorStoreError):
            await pipeline.ingest("/tmp/a.pdf", "a.pdf")

        # Assert
        async with test_session_factory() as session:
            documents = await document_crud.get_documents(session)
        assert [d.file_name for d in documents] == ["a.pdf"]

    @pytest.mark.asyncio
    async def test_ingest_should_not_save_when_embedding_fails(
        self, pipeline: DocumentPipeline, mock_embedding_client: MagicMock, vector_store: MagicMock, test_session_factory
    ) -> None:
        # Arrange
        from ragchat.boundary.db.CRUD import document_crud

        mock_embedding_client.embed = AsyncMock(side_effect=EmbeddingError("down"))

        # Act
        with pytest.raises(EmbeddingError):
            await pipeline.ingest("/tmp/a.pdf", "a.pdf")

        # Assert
        vector_store.add_chunks.assert_not_awaited()
        async with test_session_factory() as session:
            assert await document_crud.get_documents(session) == []
