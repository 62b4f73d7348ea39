"""
Common response models and utilities.

Id and timestamp helpers shared by the domain models.

Dependencies: stdlib
System role: Shared model helpers
"""

import time
import uuid


def new_id() -> str:
    """Generate a new string UUID for chats, messages, documents and chunks."""
    return str(uuid.uuid4())


def now_ms() -> int:
    """Current wall-clock time as epoch milliseconds."""
    return int(time.time() * 1000)
