"""
Unit tests for BaseCRUD and id conversion with a mocked session.

System role: Verification of generic CRUD statements
"""

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest

from ragchat.boundary.db.base import to_uuid
from ragchat.boundary.db.CRUD.base_crud import BaseCRUD
from ragchat.boundary.db.models import DocumentModel
from ragchat.core.exceptions import ValidationError


@pytest.fixture
def mock_session() -> MagicMock:
    session = MagicMock()
    session.execute = AsyncMock(return_value=MagicMock(rowcount=1))
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    return session


class TestToUuid:
    """Tests for to_uuid."""

    def test_parses_string(self) -> None:
        value = uuid.uuid4()
        assert to_uuid(str(value)) == value

    def test_passes_uuid_through(self) -> None:
        value = uuid.uuid4()
        assert to_uuid(value) is value

    def test_invalid_value_names_field(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            to_uuid("bogus", field="chat_id")
        assert exc_info.value.details == {"field": "chat_id"}


class TestBaseCRUD:
    """Tests for BaseCRUD with a mocked AsyncSession."""

    @pytest.mark.asyncio
    async def test_create_should_add_flush_and_refresh(self, mock_session) -> None:
        # Arrange
        crud = BaseCRUD(DocumentModel)

        # Act
        instance = await crud.create(
            mock_session, file_name="a.pdf", upload_timestamp=1, scope="global", chunk_count=0
        )

        # Assert
        mock_session.add.assert_called_once_with(instance)
        mock_session.flush.assert_awaited_once()
        mock_session.refresh.assert_awaited_once_with(instance)
        assert instance.file_name == "a.pdf"

    @pytest.mark.asyncio
    async def test_delete_by_id_should_report_rowcount(self, mock_session) -> None:
        # Arrange
        crud = BaseCRUD(DocumentModel)
        mock_session.execute.return_value = MagicMock(rowcount=0)

        # Act
        deleted = await crud.delete_by_id(mock_session, str(uuid.uuid4()))

        # Assert
        assert deleted is False
        mock_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_delete_many_should_skip_empty_list(self, mock_session) -> None:
        crud = BaseCRUD(DocumentModel)
        assert await crud.delete_many(mock_session, []) == 0
        mock_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_by_id_should_reject_invalid_id(self, mock_session) -> None:
        crud = BaseCRUD(DocumentModel)
        with pytest.raises(ValidationError):
            await crud.update_by_id(mock_session, "not-a-uuid", file_name="b.pdf")
        mock_session.execute.assert_not_awaited()
