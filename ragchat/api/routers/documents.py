"""Document API endpoints.

Routes:
- GET /documents - List documents (optional scope filter)
- POST /documents - Multipart batch upload
- DELETE /documents/{document_id} - Delete one document
- POST /documents/bulk-delete - Delete several documents
- GET /documents/{document_id}/preview - Page 1 text
- POST /documents/search - Semantic search

Dependencies: ragchat.application.services.document_service
System role: Document HTTP API
"""

import logging

from fastapi import APIRouter, Depends, File, Form, Query, Response, UploadFile

from ragchat.api.deps import get_document_service
from ragchat.api.routers.router_utils import cleanup_temp_dir, stage_uploads, to_http_exception
from ragchat.application.services.document_service import DocumentService
from ragchat.boundary.vdb.vector_schemas import VectorSearchResult
from ragchat.core.exceptions import RagChatException
from ragchat.models.chat import ChatType
from ragchat.models.document import (
    BatchUploadResponse,
    BulkDeleteRequest,
    DocumentPreviewResponse,
    DocumentSearchRequest,
    RagDocument,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/documents", tags=["documents"])


@router.get("", response_model=list[RagDocument])
async def list_documents(
    scope: str | None = Query(default=None, description="'global' or a chat id"),
    document_service: DocumentService = Depends(get_document_service),
) -> list[RagDocument]:
    """List documents, newest first."""
    return await document_service.list_documents(scope=scope)


@router.post("", response_model=BatchUploadResponse)
async def upload_documents(
    files: list[UploadFile] = File(..., description="PDF files (max 20MB each)"),
    scope: ChatType = Form(default=ChatType.GLOBAL, description="global or dedicated"),
    chat_id: str | None = Form(default=None, description="Chat receiving dedicated uploads"),
    document_service: DocumentService = Depends(get_document_service),
) -> BatchUploadResponse:
    """
    Upload a batch of PDFs.

    Files are ingested one at a time; a failing file is counted and the
    rest of the batch continues.

    Raises:
        HTTPException(503): Store not configured
    """
    temp_dir, candidates = await stage_uploads(files)
    try:
        return await document_service.upload_documents(
            candidates,
            chat_type=scope,
            chat_id=chat_id,
        )
    except RagChatException as e:
        raise to_http_exception(e) from e
    finally:
        cleanup_temp_dir(temp_dir)


@router.delete("/{document_id}", status_code=204)
async def delete_document(
    document_id: str,
    document_service: DocumentService = Depends(get_document_service),
) -> Response:
    try:
        await document_service.delete_document(document_id)
    except RagChatException as e:
        raise to_http_exception(e) from e
    return Response(status_code=204)


@router.post("/bulk-delete")
async def bulk_delete_documents(
    request: BulkDeleteRequest,
    document_service: DocumentService = Depends(get_document_service),
) -> dict[str, int]:
    try:
        deleted = await document_service.delete_documents(request.ids)
    except RagChatException as e:
        raise to_http_exception(e) from e
    return {"deleted": deleted}


@router.get("/{document_id}/preview", response_model=DocumentPreviewResponse)
async def preview_document(
    document_id: str,
    document_service: DocumentService = Depends(get_document_service),
) -> DocumentPreviewResponse:
    try:
        text = await document_service.preview_document(document_id)
    except RagChatException as e:
        raise to_http_exception(e) from e
    return DocumentPreviewResponse(document_id=document_id, text=text)


@router.post("/search", response_model=list[VectorSearchResult])
async def search_documents(
    request: DocumentSearchRequest,
    document_service: DocumentService = Depends(get_document_service),
) -> list[VectorSearchResult]:
    try:
        return await document_service.search_documents(request.query, scope=request.scope)
    except RagChatException as e:
        raise to_http_exception(e) from e
