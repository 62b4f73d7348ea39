"""
RAG orchestrator.

Embeds the user query, retrieves scoped context, assembles the grounding
instruction and streams the generated answer while reporting progress and
cited sources.

Dependencies: ragchat.boundary.llm, ragchat.boundary.vdb, ragchat.core.rag
System role: Retrieval-augmented answer orchestration
"""

import inspect
import logging
from collections.abc import AsyncGenerator
from typing import Any, Awaitable, Callable

from ragchat.application.adapters.chat_history_adapter import ChatHistoryAdapter
from ragchat.boundary.llm.embedding_client import EmbeddingClient
from ragchat.boundary.llm.gemini_client import GeminiClient
from ragchat.boundary.vdb.vector_schemas import VectorSearchResult
from ragchat.boundary.vdb.vector_store_client import VectorStoreClient, dedupe_sources
from ragchat.core.rag.history_compressor import HistoryCompressor
from ragchat.core.rag.rag_prompt import RAG_PROMPT_NAME, format_context, get_prompt
from ragchat.models.chat import ChatType, Message, SourceCitation
from ragchat.models.document import GLOBAL_SCOPE
from ragchat.models.streaming import StreamEvent, StreamEventType

logger = logging.getLogger(__name__)

STATUS_THINKING = "Thinking..."
STATUS_ANALYZING = "Analyzing query..."
STATUS_SEARCHING = "Searching knowledge base..."
STATUS_GENERATING = "Generating response..."


def resolve_scope(chat_type: ChatType, chat_id: str) -> str:
    """Dedicated chats search their own pool (plus global); global chats only global."""
    return chat_id if chat_type == ChatType.DEDICATED else GLOBAL_SCOPE


async def _notify(callback: Callable[..., Any] | None, *args: Any) -> None:
    if callback is None:
        return
    outcome = callback(*args)
    if inspect.isawaitable(outcome):
        await outcome


class RagOrchestrator:
    """
    Retrieval-augmented answer generation.

    Without a vector store the orchestrator runs in degraded mode: retrieval
    is skipped with a warning and the answer is generated from history alone.
    """

    def __init__(
        self,
        embedding_client: EmbeddingClient,
        gemini_client: GeminiClient,
        history_compressor: HistoryCompressor,
        vector_store: VectorStoreClient | None = None,
        top_k: int = 5,
        use_prompt_registry: bool = False,
    ) -> None:
        self._embedding_client = embedding_client
        self._gemini_client = gemini_client
        self._compressor = history_compressor
        self._vector_store = vector_store
        self._top_k = top_k
        self._use_prompt_registry = use_prompt_registry

    async def astream(
        self,
        query: Message,
        history: list[Message],
        chat_type: ChatType,
        chat_id: str,
    ) -> AsyncGenerator[StreamEvent, None]:
        """
        Stream a grounded answer.

        CHUNK events carry the cumulative answer text. The final COMPLETE
        event carries the full text and the sources.

        Args:
            query: Current user message
            history: Messages before the query (query excluded)
            chat_type: Chat knowledge scope type
            chat_id: Chat id (used as scope for dedicated chats)

        Yields:
            StreamEvent: status, sources, chunk and complete events
        """
        logger.info(f"{__name__}:astream - START chat_id={chat_id}, query_len={len(query.text)}")
        yield StreamEvent.status(STATUS_THINKING)

        # Step 1: Embed the query
        yield StreamEvent.status(STATUS_ANALYZING)
        logger.info(f"{__name__}:astream - Step 1: Embedding query")
        query_embedding = await self._embedding_client.embed(query.text)
        logger.info(f"{__name__}:astream - Step 1 OK: dim={len(query_embedding)}")

        # Step 2: Resolve retrieval scope
        scope = resolve_scope(chat_type, chat_id)

        # Step 3: Retrieve context
        results: list[VectorSearchResult] = []
        sources: list[SourceCitation] = []
        if self._vector_store is not None:
            yield StreamEvent.status(STATUS_SEARCHING)
            logger.info(f"{__name__}:astream - Step 3: Searching (scope={scope}, top_k={self._top_k})")
            results = await self._vector_store.search(
                query_embedding,
                filter_scope=scope,
                top_k=self._top_k,
            )
            logger.info(f"{__name__}:astream - Step 3 OK: Retrieved {len(results)} chunks")

            # Step 4: Publish sources before any text streams
            sources = dedupe_sources(results)
            yield StreamEvent(
                type=StreamEventType.SOURCES,
                data={"sources": [s.model_dump() for s in sources]},
            )
        else:
            logger.warning(f"{__name__}:astream - Skipping RAG search: DB not configured")

        # Step 5: Assemble grounding instruction and fit history
        context_text = format_context(
            [(r.chunk.text, r.chunk.source_file_name, r.chunk.page_number) for r in results]
        )
        system_instruction = get_prompt(
            RAG_PROMPT_NAME, use_registry=self._use_prompt_registry
        ).format(context=context_text)

        prior = list(history)
        if self._compressor.should_compress(prior, context_text, pending_text=query.text):
            logger.info(f"{__name__}:astream - Step 5: Context over budget, compressing history")
            prior = await self._compressor.compress(prior)
        logger.info(
            f"{__name__}:astream - Step 5 OK: context_len={len(context_text)}, history_msgs={len(prior)}"
        )

        # Step 6: Stream generation (cumulative text)
        yield StreamEvent.status(STATUS_GENERATING)
        full_text = ""
        async for cumulative in self._gemini_client.stream_generate(
            ChatHistoryAdapter.to_langchain(prior),
            query.text,
            system_instruction=system_instruction,
        ):
            full_text = cumulative
            yield StreamEvent.chunk(cumulative)

        logger.info(f"{__name__}:astream - Step 6 OK: answer_len={len(full_text)}")
        yield StreamEvent(
            type=StreamEventType.COMPLETE,
            data={"text": full_text, "sources": [s.model_dump() for s in sources]},
        )

    async def answer(
        self,
        query: Message,
        history: list[Message],
        chat_type: ChatType,
        chat_id: str,
        on_status: Callable[[str], Awaitable[None] | None] | None = None,
        on_stream_chunk: Callable[[str], Awaitable[None] | None] | None = None,
        on_sources: Callable[[list[SourceCitation]], Awaitable[None] | None] | None = None,
    ) -> str:
        """
        Callback-style wrapper around astream().

        Returns:
            str: Final answer text
        """
        final_text = ""
        async for event in self.astream(query, history, chat_type, chat_id):
            if event.type == StreamEventType.STATUS:
                await _notify(on_status, event.data["message"])
            elif event.type == StreamEventType.SOURCES:
                await _notify(
                    on_sources,
                    [SourceCitation(**s) for s in event.data["sources"]],
                )
            elif event.type == StreamEventType.CHUNK:
                final_text = event.data["text"]
                await _notify(on_stream_chunk, final_text)
            elif event.type == StreamEventType.COMPLETE:
                final_text = event.data["text"]
        return final_text
