"""Engine components orchestrating fetch → transform → dedup → persist."""

from .dedup import DeduplicationIndex
from .document import CatalogDocument
from .fetcher import Fetcher
from .paginator import CatalogPage, PaginationResult, Paginator
from .reconciler import StoreReconciler, TargetResult
from .transformer import transform_item

__all__ = [
    "CatalogDocument",
    "CatalogPage",
    "DeduplicationIndex",
    "Fetcher",
    "PaginationResult",
    "Paginator",
    "StoreReconciler",
    "TargetResult",
    "transform_item",
]
