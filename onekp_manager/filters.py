"""
Record filters - select catalog rows by field value.

Keys name Record fields. The column names used on the 1KP website
(species, tissue_type) are accepted as aliases.
"""

from typing import Iterable, List

from .errors import InvalidKeyError
from .records import Record

FILTER_KEYS = ['id', 'clade', 'order', 'family', 'genus_species', 'tissue_description']

KEY_ALIASES = {
    'species': 'genus_species',
    'tissue_type': 'tissue_description',
}


def resolve_key(key: str) -> str:
    """Return the canonical field name for key, or raise InvalidKeyError."""
    name = key.strip().lower().replace('-', '_')
    name = KEY_ALIASES.get(name, name)
    if name not in FILTER_KEYS:
        raise InvalidKeyError(key, FILTER_KEYS)
    return name


def filter_records(records: Iterable[Record], key: str, values: Iterable[str]) -> List[Record]:
    """
    Select records whose field matches one of the accepted values.

    Matching is exact and case-sensitive. Input order is preserved and an
    empty result is not an error.

    Args:
        records: Records to filter (a Catalog or any iterable of Record)
        key: Field name, see FILTER_KEYS
        values: Accepted field values (a single string is one value)

    Returns:
        Matching records
    """
    field = resolve_key(key)
    if isinstance(values, str):
        values = [values]
    accepted = set(values)
    return [rec for rec in records if getattr(rec, field) in accepted]


def distinct_values(records: Iterable[Record], key: str) -> List[str]:
    """Sorted list of the distinct values of a field."""
    field = resolve_key(key)
    return sorted({getattr(rec, field) for rec in records})
