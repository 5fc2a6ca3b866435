"""Episode catalog: records, merging and persistence."""

from ohrenbaer_archive.catalog.merger import MergeResult, merge, merge_catalog
from ohrenbaer_archive.catalog.models import EpisodeRecord, IdentityKey, identity_key
from ohrenbaer_archive.catalog.store import load_catalog, save_catalog

__all__ = [
    "EpisodeRecord",
    "IdentityKey",
    "identity_key",
    "MergeResult",
    "merge",
    "merge_catalog",
    "load_catalog",
    "save_catalog",
]
