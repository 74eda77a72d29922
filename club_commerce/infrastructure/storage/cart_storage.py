"""Durable and in-memory implementations of the cart persistence port"""

import json
from pathlib import Path
from typing import Optional

from club_commerce.config import settings
from club_commerce.domain.cart import CartSnapshot, CartStorage


class JsonFileCartStorage(CartStorage):
    """
    Stores the cart under one key of a JSON document on disk.

    The document is a key/value map so other local state can share the
    file; only ``key`` is read or written here.
    """

    def __init__(self, file_path: Path | str | None = None, key: str | None = None):
        self._file_path = Path(file_path or settings.cart_storage_path)
        self._key = key or settings.cart_storage_key

    def load(self) -> Optional[CartSnapshot]:
        document = self._read_document()
        return document.get(self._key)

    def save(self, snapshot: CartSnapshot) -> None:
        document = self._read_document()
        document[self._key] = snapshot
        self._write_document(document)

    def clear(self) -> None:
        document = self._read_document()
        if self._key in document:
            del document[self._key]
            self._write_document(document)

    # --- File helpers ---------------------------------------------------------

    def _read_document(self) -> dict:
        if not self._file_path.exists():
            return {}
        document = json.loads(self._file_path.read_text(encoding="utf-8"))
        if not isinstance(document, dict):
            raise ValueError(f"{self._file_path} does not hold a JSON object")
        return document

    def _write_document(self, document: dict) -> None:
        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file_path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")


class InMemoryCartStorage(CartStorage):
    """Keeps the snapshot in a variable. No file I/O, no side effects."""

    def __init__(self, snapshot: Optional[CartSnapshot] = None):
        self.snapshot = snapshot
        self.save_count = 0

    def load(self) -> Optional[CartSnapshot]:
        return self.snapshot

    def save(self, snapshot: CartSnapshot) -> None:
        self.snapshot = snapshot
        self.save_count += 1

    def clear(self) -> None:
        self.snapshot = None
