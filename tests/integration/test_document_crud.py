"""
Integration tests for document and chunk CRUD against in-memory SQLite.

Chunks are stored without embeddings here; the vector column only accepts
full-dimension vectors.

System role: Verification of knowledge base persistence
"""

import pytest

from ragchat.boundary.db.CRUD import NO_PAGE_ONE_TEXT, chunk_crud, document_crud
from ragchat.models.document import RagChunk, RagDocument


async def _seed(session_factory, document: RagDocument, chunks: list[RagChunk]) -> None:
    async with session_factory() as session:
        await document_crud.add_document(session, document)
        await chunk_crud.bulk_create(session, chunks, document.id)
        await session.commit()


def _chunk(text: str, page: int | None, name: str = "a.pdf") -> RagChunk:
    return RagChunk(text=text, source_file_name=name, page_number=page)


class TestDocumentCRUD:
    """Document table operations."""

    @pytest.mark.asyncio
    async def test_get_documents_should_return_newest_first(self, test_session_factory) -> None:
        # Arrange
        old = RagDocument(file_name="old.pdf", upload_timestamp=100)
        new = RagDocument(file_name="new.pdf", upload_timestamp=200, scope="chat-1")
        await _seed(test_session_factory, old, [])
        await _seed(test_session_factory, new, [])

        # Act
        async with test_session_factory() as session:
            everything = await document_crud.get_documents(session)
            scoped = await document_crud.get_documents(session, scope="chat-1")

        # Assert
        assert [d.file_name for d in everything] == ["new.pdf", "old.pdf"]
        assert [d.id for d in scoped] == [new.id]
        assert scoped[0].scope == "chat-1"

    @pytest.mark.asyncio
    async def test_get_document_page_one_should_return_page_one_chunk(self, test_session_factory) -> None:
        # Arrange
        document = RagDocument(file_name="a.pdf", chunk_count=2)
        await _seed(
            test_session_factory,
            document,
            [_chunk("second page", 2), _chunk("first page", 1)],
        )

        # Act
        async with test_session_factory() as session:
            text = await document_crud.get_document_page_one(session, document.id)

        # Assert
        assert text == "first page"

    @pytest.mark.asyncio
    async def test_get_document_page_one_should_fall_back_when_missing(self, test_session_factory) -> None:
        # Arrange
        document = RagDocument(file_name="scan.pdf")
        await _seed(test_session_factory, document, [_chunk("only page three", 3)])

        # Act
        async with test_session_factory() as session:
            text = await document_crud.get_document_page_one(session, document.id)

        # Assert
        assert text == NO_PAGE_ONE_TEXT

    @pytest.mark.asyncio
    async def test_delete_many_should_cascade_to_chunks(self, test_session_factory) -> None:
        # Arrange
        first = RagDocument(file_name="first.pdf")
        second = RagDocument(file_name="second.pdf")
        keep = RagDocument(file_name="keep.pdf")
        await _seed(test_session_factory, first, [_chunk("a", 1)])
        await _seed(test_session_factory, second, [_chunk("b", 1), _chunk("c", 2)])
        await _seed(test_session_factory, keep, [_chunk("d", 1)])

        # Act
        async with test_session_factory() as session:
            deleted = await document_crud.delete_many(session, [first.id, second.id])
            await session.commit()

        # Assert
        async with test_session_factory() as session:
            remaining = await document_crud.get_documents(session)
            assert deleted == 2
            assert [d.id for d in remaining] == [keep.id]
            assert await chunk_crud.count_for_document(session, first.id) == 0
            assert await chunk_crud.count_for_document(session, second.id) == 0
            assert await chunk_crud.count_for_document(session, keep.id) == 1

    @pytest.mark.asyncio
    async def test_delete_many_with_no_ids_should_be_noop(self, test_async_db) -> None:
        assert await document_crud.delete_many(test_async_db, []) == 0

    @pytest.mark.asyncio
    async def test_exists_should_reflect_inserted_rows(self, test_session_factory) -> None:
        # Arrange
        document = RagDocument(file_name="a.pdf")
        await _seed(test_session_factory, document, [])

        # Act / Assert
        async with test_session_factory() as session:
            assert await document_crud.exists(session, document.id) is True
            assert await document_crud.exists(session, "00000000-0000-0000-0000-000000000000") is False


class TestChunkCRUD:
    """Chunk table operations."""

    @pytest.mark.asyncio
    async def test_bulk_create_should_store_empty_embedding_as_null(self, test_session_factory) -> None:
        # Arrange
        document = RagDocument(file_name="a.pdf")
        chunk = _chunk("no vector", 1)

        # Act
        async with test_session_factory() as session:
            await document_crud.add_document(session, document)
            added = await chunk_crud.bulk_create(session, [chunk], document.id)
            await session.commit()

        # Assert
        async with test_session_factory() as session:
            row = await chunk_crud.get_by_id(session, chunk.id)
        assert added == 1
        assert row is not None
        assert row.embedding is None
        assert row.page_number == 1
        assert str(row.document_id) == document.id
