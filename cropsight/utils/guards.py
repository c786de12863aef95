# cropsight/utils/guards.py

from __future__ import annotations

from ..errors import NotFound
from ..models import Field
from ..storage.base import Storage


def owned_field(storage: Storage, field_id: str, user_id: str) -> Field:
    """
    Load a field for `user_id`.
    Someone else's field answers NotFound, same as a missing one.
    """
    field = storage.get_field(field_id)
    if field.user_id != user_id:
        raise NotFound("Field not found")
    return field
