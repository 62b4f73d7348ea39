"""
SQLAlchemy declarative base and common mixins.

Provides base class for all ORM models, the UUID primary key mixin and
id conversion helpers between API strings and UUID columns.

Dependencies: sqlalchemy
System role: Foundation for all database models
"""

import uuid

from sqlalchemy import Uuid
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from ragchat.core.exceptions import ValidationError


class Base(DeclarativeBase):
    """
    SQLAlchemy declarative base for ORM model registration.

    All database models inherit from this class to ensure they're
    registered with the metadata and included in table creation.
    """

    pass


class UUIDMixin:
    """
    Mixin providing UUID primary key to all models.

    Domain objects mint their own ids, so the default only applies to rows
    created without one.

    Attributes:
        id: UUID primary key
    """

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        nullable=False,
    )


def to_uuid(value: str | uuid.UUID, field: str = "id") -> uuid.UUID:
    """
    Parse an id received from the API or a domain model.

    Raises:
        ValidationError: If the value is not a UUID
    """
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError as e:
        raise ValidationError(f"Invalid UUID: {value}", field=field) from e
