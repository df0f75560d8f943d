"""
Opaque identifiers: global node ids and pagination cursors.

A global id is the base64 of ``"<TypeName>:<id>"``; a cursor is the base64 of
``"cursor:<id>"``, so it points at a row by key rather than by offset.
"""

from strawberry.relay import GlobalID
from strawberry.relay.utils import from_base64, to_base64

POST_TYPE = "Post"
TAG_TYPE = "Tag"
NODE_TYPES = frozenset({POST_TYPE, TAG_TYPE})

CURSOR_PREFIX = "cursor"


class InvalidGlobalIdError(ValueError):
    """Raised when a global id cannot be decoded."""


class InvalidCursorError(ValueError):
    """Raised when a pagination cursor cannot be decoded."""


def encode_global_id(type_name: str, entity_id: int) -> str:
    return str(GlobalID(type_name=type_name, node_id=str(entity_id)))


def decode_global_id(value: str) -> tuple[str, int]:
    """Return ``(type_name, id)`` for an opaque global id."""
    try:
        global_id = GlobalID.from_id(value)
        return global_id.type_name, int(global_id.node_id)
    except ValueError as e:
        raise InvalidGlobalIdError(f"Invalid global id: {value!r}") from e


def decode_id_of_type(value: str, type_name: str) -> int | None:
    """Decode a global id, returning None when it names another type."""
    decoded_type, entity_id = decode_global_id(value)
    if decoded_type != type_name:
        return None
    return entity_id


def encode_cursor(key: int) -> str:
    return to_base64(CURSOR_PREFIX, key)


def decode_cursor(cursor: str) -> int:
    try:
        prefix, key = from_base64(cursor)
        if prefix != CURSOR_PREFIX:
            raise ValueError(prefix)
        return int(key)
    except ValueError as e:
        raise InvalidCursorError(f"Invalid cursor: {cursor!r}") from e
