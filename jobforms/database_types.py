"""
Column types that behave the same on PostgreSQL and SQLite.

Production runs on PostgreSQL (native UUID / JSONB); the test suite runs on
in-memory SQLite where both are stored as text.
"""
import json
import uuid

from sqlalchemy import TypeDecorator, CHAR, Text
from sqlalchemy.dialects.postgresql import UUID, JSONB


class GUID(TypeDecorator):
    """UUID primary/foreign keys, CHAR(36) outside PostgreSQL."""
    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name == 'postgresql':
            return value
        return str(value) if isinstance(value, uuid.UUID) else str(uuid.UUID(str(value)))

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


class JSON(TypeDecorator):
    """
    Field schemas, prescreen questions and answer maps.

    JSONB on PostgreSQL; serialized text elsewhere. Rows written by older
    clients sometimes hold a JSON string inside the JSON column, so a
    string result is decoded once more when it parses.
    """
    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name == 'postgresql':
            return value
        return json.dumps(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        if dialect.name != 'postgresql':
            value = json.loads(value)
        if isinstance(value, str):
            try:
                return json.loads(value)
            except ValueError:
                return value
        return value
