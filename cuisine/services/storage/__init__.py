from .base import CollectionStore
from .collection_store import COLLECTION_NAMES, JsonCollectionStore
from .preference_store import PreferenceStore
from .snapshot_store import SnapshotStore

__all__ = [
    "CollectionStore",
    "COLLECTION_NAMES",
    "JsonCollectionStore",
    "PreferenceStore",
    "SnapshotStore",
]
