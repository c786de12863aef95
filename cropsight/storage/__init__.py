# cropsight/storage/__init__.py
from __future__ import annotations

from flask import Flask, current_app

from .base import ReadingStore, Storage
from .database import DatabaseStorage
from .memory import MemoryStorage

EXTENSION_KEY = "cropsight.storage"

BACKENDS = {
    "database": DatabaseStorage,
    "memory": MemoryStorage,
}


def init_storage(app: Flask) -> Storage:
    backend = (app.config.get("STORAGE_BACKEND") or "database").strip().lower()
    try:
        storage = BACKENDS[backend]()
    except KeyError:
        raise RuntimeError(
            f"Unknown STORAGE_BACKEND {backend!r}; expected one of {', '.join(BACKENDS)}"
        ) from None

    app.extensions[EXTENSION_KEY] = storage
    app.logger.info("Storage backend: %s", backend)
    return storage


def get_storage() -> Storage:
    return current_app.extensions[EXTENSION_KEY]


__all__ = [
    "DatabaseStorage",
    "MemoryStorage",
    "ReadingStore",
    "Storage",
    "get_storage",
    "init_storage",
]
