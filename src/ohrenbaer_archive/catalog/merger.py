"""Merge freshly scraped episodes into an existing catalog."""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from ohrenbaer_archive.catalog.models import EpisodeRecord, IdentityKey, identity_key

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    """Outcome of a catalog merge."""

    catalog: list[EpisodeRecord]
    added: list[EpisodeRecord] = field(default_factory=list)

    @property
    def added_count(self) -> int:
        return len(self.added)


def merge_catalog(
    existing: Sequence[EpisodeRecord],
    incoming: Iterable[EpisodeRecord],
) -> MergeResult:
    """Append incoming records whose identity key is not yet known.

    Existing entries keep their position and are never replaced, even when
    the incoming record for the same key carries different data. Incoming
    duplicates keep their first occurrence.

    Args:
        existing: Current catalog, assumed to have unique keys
        incoming: Newly scraped records

    Returns:
        MergeResult with the new catalog and the records that were appended
    """
    seen: set[IdentityKey] = {identity_key(record) for record in existing}
    added: list[EpisodeRecord] = []

    for record in incoming:
        key = identity_key(record)
        if key in seen:
            continue
        seen.add(key)
        added.append(record)

    logger.debug("Merged catalog: %d existing, %d added", len(existing), len(added))
    return MergeResult(catalog=[*existing, *added], added=added)


def merge(
    existing: Sequence[EpisodeRecord],
    incoming: Iterable[EpisodeRecord],
) -> list[EpisodeRecord]:
    """Return ``existing`` followed by the unseen records of ``incoming``."""
    return merge_catalog(existing, incoming).catalog
