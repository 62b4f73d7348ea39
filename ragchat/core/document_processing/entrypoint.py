"""
Document pipeline orchestrator.

Coordinates parsing (with OCR fallback), chunking, embedding and saving for
one uploaded PDF, reporting progress at every stage.

Dependencies: All task modules, configs
System role: Pipeline orchestration (coordinates only)
"""

import inspect
import logging
import time
from typing import Awaitable, Callable

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ragchat.boundary.llm.embedding_client import EmbeddingClient
from ragchat.boundary.vdb.vector_store_client import VectorStoreClient
from ragchat.models.document import GLOBAL_SCOPE, RagDocument

from .configs import DocumentPipelineSettings, get_pipeline_settings
from .models import PipelineResult
from .tasks import ChunkingTask, EmbeddingTask, ParsingTask, SavingTask

logger = logging.getLogger(__name__)

ProgressObserver = Callable[[str, int], Awaitable[None] | None]


class DocumentPipeline:
    """Orchestrate document ingestion: parse -> chunk -> embed -> save."""

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        session_factory: async_sessionmaker[AsyncSession],
        vector_store: VectorStoreClient,
        settings: DocumentPipelineSettings | None = None,
        parsing_task: ParsingTask | None = None,
    ) -> None:
        """
        Initialize pipeline with collaborators and configuration.

        Args:
            embedding_client: Embedding provider client
            session_factory: Async session factory for document metadata
            vector_store: Chunk storage client
            settings: Pipeline settings (uses defaults if None)
            parsing_task: Parsing stage override (custom OCR engine)
        """
        self._settings = settings or get_pipeline_settings()

        self._parsing_task = parsing_task or ParsingTask(
            ocr_min_text_length=self._settings.ocr_min_text_length,
            ocr_render_scale=self._settings.ocr_render_scale,
            ocr_language=self._settings.ocr_language,
        )
        self._chunking_task = ChunkingTask(
            chunk_size=self._settings.chunk_size,
            chunk_overlap=self._settings.chunk_overlap,
            min_chunk_length=self._settings.min_chunk_length,
        )
        self._embedding_task = EmbeddingTask(
            embedding_client,
            seconds_per_chunk_estimate=self._settings.seconds_per_chunk_estimate,
        )
        self._saving_task = SavingTask(session_factory, vector_store)

    async def ingest(
        self,
        file_path: str,
        file_name: str,
        scope: str = GLOBAL_SCOPE,
        on_progress: ProgressObserver | None = None,
    ) -> PipelineResult:
        """
        Ingest one PDF into the knowledge base.

        Steps run strictly in order. A failure aborts the file without
        removing a document record that was already saved.

        Args:
            file_path: Local path of the uploaded PDF
            file_name: Original file name shown in citations
            scope: 'global' or a chat id
            on_progress: Observer called with (status text, percent)

        Returns:
            PipelineResult: Persisted document and chunk count

        Raises:
            ParsingError: Document parsing failed
            EmbeddingError: A chunk could not be embedded
            VectorStoreError: Chunks could not be saved
        """
        start_time = time.perf_counter()

        async def report(status: str, percent: int) -> None:
            logger.info(f"{__name__}:ingest - [{percent}%] {status}")
            if on_progress is None:
                return
            outcome = on_progress(status, percent)
            if inspect.isawaitable(outcome):
                await outcome

        await report(f"Parsing PDF ({file_name})...", 10)
        pages = await run_in_threadpool(self._parsing_task.parse, file_path)

        await report(f"Splitting document into chunks ({len(pages)} pages)...", 20)
        drafts = self._chunking_task.chunk(pages, file_name)

        await report("Analyzing text and generating embeddings...", 20)
        chunks = await self._embedding_task.embed(drafts, report)

        await report("Saving document metadata...", 90)
        document = RagDocument(file_name=file_name, scope=scope, chunk_count=len(chunks))
        await self._saving_task.save_document(document)

        await report("Finalizing: Saving vector embeddings...", 90)
        for chunk in chunks:
            chunk.document_id = document.id
        saved = await self._saving_task.save_chunks(chunks, document.id)

        await report("Upload Complete!", 100)

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        return PipelineResult(document=document, chunk_count=saved, processing_time_ms=elapsed_ms)
