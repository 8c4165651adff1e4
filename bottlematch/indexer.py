"""
Catalog Indexer

Projects raw catalog listings into the compact representation the
Matcher scans: lowercase names, verbatim id and price, a default image
marker, ordered by name.

Malformed records (no name, no usable price) are skipped and counted by
default. With `strict=True` the first malformed record fails the batch.
"""

import logging
import unicodedata
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, Optional

from pydantic import ValidationError

from bottlematch.config import NO_IMAGE
from bottlematch.errors import MalformedCatalogEntry
from bottlematch.models import CatalogEntry, IndexedEntry
from bottlematch.pipeline_logger import log_error, log_index, log_pipeline


@dataclass
class IndexedCatalog:
    """Name-ordered catalog entries plus the records that were skipped."""

    entries: list[IndexedEntry] = field(default_factory=list)
    skipped: list[MalformedCatalogEntry] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    def __iter__(self) -> Iterator[IndexedEntry]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __getitem__(self, position: int) -> IndexedEntry:
        return self.entries[position]


def collation_key(name: str) -> tuple[str, str]:
    """
    Case-insensitive, accent-folded sort key.

    Names that differ only by accents order by code point; identical
    names keep their input order (sorted() is stable).
    """
    decomposed = unicodedata.normalize("NFKD", name)
    folded = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return folded.casefold(), name


def _describe_error(error: Exception) -> str:
    if isinstance(error, ValidationError):
        parts = []
        for item in error.errors():
            loc = ".".join(str(p) for p in item.get("loc", ())) or "record"
            parts.append(f"{loc}: {item.get('msg', 'invalid')}")
        return "; ".join(parts)
    return str(error)


def _record_id(record: Any) -> Optional[str]:
    if not isinstance(record, dict):
        return None
    value = record.get("_id", record.get("id"))
    return None if value is None else str(value)


def index_entry(entry: CatalogEntry, no_image: str = NO_IMAGE) -> IndexedEntry:
    """Project one validated listing."""
    return IndexedEntry(
        id=entry.id,
        name=entry.name.lower(),
        price=entry.price,
        image=entry.image_url or no_image,
    )


def index_catalog(
    raw_entries: Iterable[Any],
    strict: bool = False,
    no_image: str = NO_IMAGE,
) -> IndexedCatalog:
    """
    Build the name-ordered catalog.

    Args:
        raw_entries: Flat records, search hits, or CatalogEntry instances
        strict: Raise MalformedCatalogEntry on the first bad record
        no_image: Marker stored when a listing has no image

    Returns:
        IndexedCatalog sorted by collation_key(name)
    """
    projected: list[IndexedEntry] = []
    skipped: list[MalformedCatalogEntry] = []

    for position, record in enumerate(raw_entries or []):
        try:
            entry = CatalogEntry.from_record(record)
        except (ValidationError, ValueError) as e:
            malformed = MalformedCatalogEntry(position, _describe_error(e), _record_id(record))
            if strict:
                log_error("INDEX", "Catalog rejected", malformed)
                raise malformed from e
            log_pipeline(
                "INDEX",
                "Skipping malformed catalog entry",
                {"position": position, "id": malformed.entry_id, "reason": malformed.reason},
                level=logging.WARNING,
            )
            skipped.append(malformed)
            continue
        projected.append(index_entry(entry, no_image))

    projected.sort(key=lambda item: collation_key(item.name))

    log_index("Catalog indexed", {
        "entries": len(projected),
        "skipped": len(skipped),
    })
    return IndexedCatalog(entries=projected, skipped=skipped)
