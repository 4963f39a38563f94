"""Access to the hosted worker table."""
from workerverify.store.client import WorkerStore, fetch_document
from workerverify.store.loader import DEFAULT_PAGE_SIZE, LoadResult, count_stats, load_all

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "LoadResult",
    "WorkerStore",
    "count_stats",
    "fetch_document",
    "load_all",
]
