"""JSON key-value mirror over SQLite with default-on-failure reads."""

from __future__ import annotations

import json
import logging
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.exc import SQLAlchemyError

from storage.schemas import KeyValueRecord
from storage.sql_store import SQLStore

logger = logging.getLogger("ht.kv_store")

T = TypeVar("T")

_MISSING = object()


class KeyValueStore:
    """Passive mirror of tracker state; never authoritative over defaults."""

    def __init__(self, sql_store: SQLStore) -> None:
        self.sql_store = sql_store
        self.sql_store.create_all()

    def get(self, key: str, default: Any = None) -> Any:
        """Return the decoded value, or ``default`` when missing or unparsable."""
        raw = self._read(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except (json.JSONDecodeError, ValueError):
            logger.warning("Corrupt JSON under key %r; using default.", key)
            return default

    def load(self, key: str, adapter: TypeAdapter[T], default: T) -> T:
        """Decode and validate a slice, falling back to ``default``."""
        data = self.get(key, _MISSING)
        if data is _MISSING:
            return default
        try:
            return adapter.validate_python(data)
        except ValidationError as exc:
            logger.warning("Invalid value under key %r (%d errors); using default.", key, exc.error_count())
            return default

    def set(self, key: str, value: Any) -> bool:
        """Serialize and persist a value. Failures are logged, never raised."""
        try:
            payload = json.dumps(value, ensure_ascii=False, default=str)
        except (TypeError, ValueError) as exc:
            logger.error("Cannot serialize key %r: %s", key, exc)
            return False
        try:
            with self.sql_store.session() as sess:
                record = sess.get(KeyValueRecord, key)
                if record is None:
                    sess.add(KeyValueRecord(key=key, value=payload))
                else:
                    record.value = payload
        except SQLAlchemyError as exc:
            logger.error("Failed to persist key %r: %s", key, exc)
            return False
        return True

    def set_raw(self, key: str, raw: str) -> None:
        """Write raw text without encoding (import and recovery tooling)."""
        with self.sql_store.session() as sess:
            record = sess.get(KeyValueRecord, key)
            if record is None:
                sess.add(KeyValueRecord(key=key, value=raw))
            else:
                record.value = raw

    def keys(self) -> list[str]:
        with self.sql_store.session() as sess:
            return [row.key for row in sess.query(KeyValueRecord).order_by(KeyValueRecord.key).all()]

    def _read(self, key: str) -> str | None:
        try:
            with self.sql_store.session() as sess:
                record = sess.get(KeyValueRecord, key)
                return record.value if record is not None else None
        except SQLAlchemyError as exc:
            logger.error("Failed to read key %r: %s", key, exc)
            return None
