import asyncio
import logging
import secrets
from typing import Any, Dict, List, Optional, Set

from .errors import IOFailure, NotFound, ValidationFailed
from .persistence import JsonFileStorage
from .query import QueryResult, categories, query
from .validation import PRODUCT_FIELDS, ValidationMode, normalize, validate

# This file holds the in-memory catalog and the lock that serializes writers.

logger = logging.getLogger(__name__)

ID_BYTES = 6  # 8 url-safe characters

DEFAULTS: Dict[str, Any] = {
    "category": "general",
    "description": "",
    "stock": 0,
    "rating": 0,
    "image": None,
}


def _build_record(product_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    record = {"id": product_id}
    for name in PRODUCT_FIELDS:
        record[name] = fields[name] if name in fields else DEFAULTS.get(name)
    return record


class CatalogStore:
    """
    Authoritative product collection.

    Writers hold one asyncio.Lock across validate -> mutate -> persist;
    the save runs in a worker thread while the lock is still held.
    Every mutation installs a new list (and a new record dict), so readers
    can work on the current list without locking and never see half a change.
    """

    def __init__(self, storage: Optional[JsonFileStorage] = None, seed: Optional[List[Dict[str, Any]]] = None):
        self.storage = storage
        self._seed = seed or []
        self._products: List[Dict[str, Any]] = []
        self._issued: Set[str] = set()
        self._lock = asyncio.Lock()
        self._dirty = False

    # ---------------------------
    # Lifecycle
    # ---------------------------
    def load(self) -> None:
        """Initialise from the data file, or from the seed when there is none. CorruptState propagates."""
        stored = self.storage.load() if self.storage is not None else None
        if stored is None:
            self.reseed()
            return
        self._products = [_build_record(p["id"], p) for p in stored]
        self._issued.update(p["id"] for p in stored)
        self._dirty = False

    def reseed(self) -> None:
        # the seed is only written once something changes
        self._products = [_build_record(self._new_id(), normalize(p)) for p in self._seed]
        self._dirty = False
        logger.info("Catalog started with %d seed products", len(self._products))

    def close(self) -> None:
        if self._dirty and self.storage is not None:
            logger.info("Flushing catalog before shutdown")
            self._save(self.snapshot())

    @property
    def durable(self) -> bool:
        return not self._dirty

    def __len__(self) -> int:
        return len(self._products)

    # ---------------------------
    # Reads
    # ---------------------------
    def snapshot(self) -> List[Dict[str, Any]]:
        return [dict(p) for p in self._products]

    def list(self, params: Optional[Dict[str, Any]] = None) -> QueryResult:
        return query(self.snapshot(), params)

    def get(self, product_id: str) -> Dict[str, Any]:
        for p in self._products:
            if p["id"] == product_id:
                return dict(p)
        raise NotFound(product_id)

    def categories(self) -> List[str]:
        return categories(self._products)

    # ---------------------------
    # Writes
    # ---------------------------
    async def create(self, fields: Dict[str, Any]) -> Dict[str, Any]:
        async with self._lock:
            errors = validate(fields, ValidationMode.CREATE)
            if errors:
                raise ValidationFailed(errors)
            record = _build_record(self._new_id(), normalize(fields))
            self._products = self._products + [record]
            logger.info("Created product %s (%s)", record["id"], record["name"])
            await self._persist()
            return dict(record)

    async def replace(self, product_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        async with self._lock:
            idx = self._index(product_id)
            errors = validate(fields, ValidationMode.FULL_UPDATE)
            if errors:
                raise ValidationFailed(errors)
            record = _build_record(product_id, normalize(fields))
            self._install(idx, record)
            logger.info("Replaced product %s", product_id)
            await self._persist()
            return dict(record)

    async def patch(self, product_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        async with self._lock:
            idx = self._index(product_id)
            errors = validate(fields, ValidationMode.PARTIAL_UPDATE)
            if errors:
                raise ValidationFailed(errors)
            changes = normalize(fields)
            current = self._products[idx]
            if not changes:
                return dict(current)
            record = {**current, **changes}
            self._install(idx, record)
            logger.info("Patched product %s: %s", product_id, ", ".join(sorted(changes)))
            await self._persist()
            return dict(record)

    async def delete(self, product_id: str) -> Dict[str, Any]:
        async with self._lock:
            idx = self._index(product_id)
            removed = self._products[idx]
            self._products = self._products[:idx] + self._products[idx + 1:]
            logger.info("Deleted product %s", product_id)
            await self._persist()
            return dict(removed)

    # ---------------------------
    # Helpers
    # ---------------------------
    def _index(self, product_id: str) -> int:
        for idx, p in enumerate(self._products):
            if p["id"] == product_id:
                return idx
        raise NotFound(product_id)

    def _install(self, idx: int, record: Dict[str, Any]) -> None:
        products = list(self._products)
        products[idx] = record
        self._products = products

    def _new_id(self) -> str:
        while True:
            pid = secrets.token_urlsafe(ID_BYTES)
            if pid not in self._issued:
                self._issued.add(pid)
                return pid

    async def _persist(self) -> None:
        # runs under the writer lock; the file write itself happens off the event loop
        if self.storage is None:
            return
        await asyncio.to_thread(self._save, self.snapshot())

    def _save(self, snapshot: List[Dict[str, Any]]) -> None:
        try:
            self.storage.save(snapshot)
        except IOFailure as e:
            self._dirty = True
            logger.warning("Change applied in memory but not persisted: %s", e)
        else:
            self._dirty = False
