"""
Document router utility functions.

Stages multipart uploads on disk for the ingestion pipeline and removes
them afterwards.

Dependencies: fastapi
System role: Document upload staging helpers
"""

import logging
import shutil
import tempfile
from pathlib import Path

from fastapi import UploadFile

from ragchat.models.document import UploadCandidate
from ragchat.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

TEMP_DIR_PREFIX = "ragchat_upload_"


async def stage_uploads(files: list[UploadFile]) -> tuple[Path, list[UploadCandidate]]:
    """
    Write uploaded files into a fresh temp directory.

    Args:
        files: Multipart uploads

    Returns:
        tuple: Temp directory and one UploadCandidate per file
    """
    temp_dir = Path(tempfile.mkdtemp(prefix=TEMP_DIR_PREFIX))
    candidates: list[UploadCandidate] = []
    for index, upload in enumerate(files):
        file_name = Path(upload.filename or f"upload_{index}").name
        target = temp_dir / f"{index}_{file_name}"
        content = await upload.read()
        target.write_bytes(content)
        candidates.append(
            UploadCandidate(
                file_name=file_name,
                content_type=upload.content_type,
                size=len(content),
                path=str(target),
            )
        )
    log_with_context(logger, logging.DEBUG, "Staged uploads", temp_dir=str(temp_dir), count=len(candidates))
    return temp_dir, candidates


def cleanup_temp_dir(temp_dir: Path) -> None:
    """
    Remove a staging directory created by stage_uploads.

    Args:
        temp_dir: Directory to remove
    """
    if temp_dir.exists() and temp_dir.name.startswith(TEMP_DIR_PREFIX):
        shutil.rmtree(temp_dir, ignore_errors=True)
        log_with_context(logger, logging.DEBUG, "Cleaned up temp directory", temp_dir=str(temp_dir))
