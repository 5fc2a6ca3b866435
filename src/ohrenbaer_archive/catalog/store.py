"""Read and write the catalog JSON file."""

import json
import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from ohrenbaer_archive.catalog.models import EpisodeRecord
from ohrenbaer_archive.utils.errors import CatalogError

logger = logging.getLogger(__name__)

_catalog_adapter = TypeAdapter(list[EpisodeRecord])


def load_catalog(path: Path) -> list[EpisodeRecord]:
    """Load the catalog from disk.

    A missing file is an empty catalog.

    Args:
        path: Catalog JSON file

    Returns:
        Records in file order

    Raises:
        CatalogError: If the file cannot be read, is not valid JSON, or
            contains invalid records
    """
    if not path.exists():
        logger.debug("No catalog at %s, starting empty", path)
        return []

    try:
        content = path.read_text(encoding="utf-8")
        data = json.loads(content)
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogError(f"Could not read catalog {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"Catalog {path} is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise CatalogError(f"Catalog {path} must contain a JSON array")

    try:
        records = _catalog_adapter.validate_python(data)
    except ValidationError as e:
        raise CatalogError(f"Catalog {path} contains invalid records: {e}") from e

    logger.debug("Loaded %d records from %s", len(records), path)
    return records


def save_catalog(path: Path, records: Sequence[EpisodeRecord]) -> None:
    """Write the whole catalog atomically.

    Args:
        path: Destination file
        records: Catalog records in order

    Raises:
        CatalogError: If the file cannot be written
    """
    payload = json.dumps(
        [record.to_json_dict() for record in records],
        indent=2,
        ensure_ascii=False,
    )

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    except OSError as e:
        raise CatalogError(f"Could not write catalog {path}: {e}") from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.write("\n")
        os.replace(tmp_path, path)
    except OSError as e:
        raise CatalogError(f"Could not write catalog {path}: {e}") from e
    finally:
        tmp_path.unlink(missing_ok=True)

    logger.debug("Saved %d records to %s", len(records), path)
