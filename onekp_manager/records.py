"""
Record Store - Parse the 1KP sample table into immutable records.

The published table (Sample-List-with-Taxonomy.tsv.csv) is tab-separated
with one header line:

    1kP_ID    Clade    Order    Family    Species    Tissue Type

The catalog is built once per run and never modified afterwards.
"""

import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

from .cache import fetch_cached_text
from .config import CATALOG_COLUMNS, METADATA_URL, MISSING_VALUE
from .errors import ParseError
from .urls import resolve_directory

logger = logging.getLogger(__name__)

N_COLUMNS = len(CATALOG_COLUMNS)


@dataclass(frozen=True)
class Record:
    """One row of the 1KP catalog."""

    id: str
    clade: str
    order: str
    family: str
    genus_species: str
    tissue_description: str
    directory: str = ""

    def __post_init__(self):
        if not self.directory:
            object.__setattr__(self, 'directory', self.id)

    def to_row(self) -> List[str]:
        return [self.id, self.clade, self.order, self.family,
                self.genus_species, self.tissue_description]


def parse_table(text: str, pad_short_rows: bool = False) -> List[Record]:
    """
    Parse the catalog table into records, preserving source order.

    Args:
        text: Full contents of the TSV table (header line included)
        pad_short_rows: Pad lines with missing trailing columns with
                        MISSING_VALUE instead of failing

    Returns:
        List of Record objects

    Raises:
        ParseError: A line has the wrong number of fields, an empty id,
                    or an id already seen on an earlier line
    """
    records = []
    seen = {}
    header_seen = False

    for line_number, raw in enumerate(text.splitlines(), 1):
        if not raw.strip():
            continue
        if not header_seen:
            header_seen = True
            continue

        fields = [field.strip() for field in raw.split('\t')]

        if len(fields) < N_COLUMNS and pad_short_rows:
            fields.extend([MISSING_VALUE] * (N_COLUMNS - len(fields)))

        if len(fields) != N_COLUMNS:
            raise ParseError(
                f"expected {N_COLUMNS} fields, found {len(fields)}", line_number
            )

        sample_id = fields[0]
        if not sample_id:
            raise ParseError("empty sample id", line_number)
        if sample_id in seen:
            raise ParseError(
                f"duplicate sample id {sample_id!r} (first seen on line {seen[sample_id]})",
                line_number,
            )
        seen[sample_id] = line_number

        records.append(Record(*fields))

    if not header_seen:
        raise ParseError("table is empty")

    return records


class Catalog:
    """Read-only, ordered collection of records with unique sample ids."""

    def __init__(self, records: Iterable[Record]):
        self._records: Tuple[Record, ...] = tuple(records)
        seen = set()
        for rec in self._records:
            if rec.id in seen:
                raise ParseError(f"duplicate sample id {rec.id!r}")
            seen.add(rec.id)

    @property
    def records(self) -> Tuple[Record, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self._records)

    def with_directories(self, directory_names: Iterable[str]) -> "Catalog":
        """
        Return a new catalog whose records carry their assembly directory.

        Records without a matching entry keep the sample id as directory.
        """
        names = list(directory_names)
        resolved = []
        for rec in self._records:
            directory = resolve_directory(rec.id, names)
            if directory is None:
                logger.warning("%s is not listed in the assembly index; using the id as directory",
                               rec.id)
                resolved.append(rec)
            else:
                resolved.append(replace(rec, directory=directory))
        return Catalog(resolved)


def load_catalog(
    path: Optional[str] = None,
    *,
    pad_short_rows: bool = False,
    refresh: bool = False,
    cache_dir: Optional[str] = None,
) -> Catalog:
    """
    Load the catalog from a local TSV file or from GigaDB via the cache.

    Args:
        path: Local table file. If None, the published table is used.
        pad_short_rows: See parse_table()
        refresh: Re-download the published table even if the cache is fresh
        cache_dir: Cache directory for the published table

    Returns:
        Catalog with all records
    """
    if path is not None:
        table_path = Path(path)
        if not table_path.exists():
            raise FileNotFoundError(f"Metadata file not found: {path}")
        logger.debug("Reading catalog from %s", table_path)
        try:
            text = table_path.read_text(encoding='utf-8')
        except UnicodeDecodeError as e:
            raise ParseError(f"{path} is not valid UTF-8: {e}") from e
    else:
        text = fetch_cached_text(METADATA_URL, cache_dir=cache_dir, refresh=refresh)

    catalog = Catalog(parse_table(text, pad_short_rows=pad_short_rows))
    logger.info("Loaded %d catalog records", len(catalog))
    return catalog
