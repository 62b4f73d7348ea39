"""
Router utility functions.

Contains helper functions extracted from router endpoints to keep them clean.
"""

from ragchat.api.routers.router_utils.document_utils import cleanup_temp_dir, stage_uploads
from ragchat.api.routers.router_utils.error_utils import (
    error_code_for,
    status_code_for,
    to_http_exception,
)

__all__ = [
    "cleanup_temp_dir",
    "stage_uploads",
    "error_code_for",
    "status_code_for",
    "to_http_exception",
]
