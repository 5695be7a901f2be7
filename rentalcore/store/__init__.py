from .base import COLLECTIONS, FIELDS, REFERENCE_FIELDS, Collection, Store, same_id
from .memory import MemoryStore
from .sql import SqlStore

BACKENDS = {
    "sql": SqlStore,
    "memory": MemoryStore,
}


def make_store(backend: str) -> Store:
    try:
        return BACKENDS[backend]()
    except KeyError:
        raise ValueError(f"unknown store backend {backend!r}; expected one of {sorted(BACKENDS)}") from None
