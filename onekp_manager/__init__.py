"""
OneKP Manager - Query the 1000 Plant Transcriptomes (1KP) catalog and
download translated assemblies from GigaDB.

Workflow:
1. load_catalog() - Parse the sample table (local file or cached GigaDB copy)
2. filter_records() - Select samples by id, clade, order, family, species...
3. build_urls() - Derive protein / cds download URLs for each sample
4. fetch_all() - Download the files one by one into a directory

distinct_values() lists the values of a field, e.g. all clades.
"""

from .errors import (
    OneKpError, ParseError, InvalidKeyError,
    FetchError, NetworkError, HttpStatusError, WriteError,
)
from .records import Record, Catalog, parse_table, load_catalog
from .filters import FILTER_KEYS, resolve_key, filter_records, distinct_values
from .urls import SequenceType, build_urls, parse_directory_index, resolve_directory
from .fetcher import Fetcher, FetchResult, fetch_all, summarize

__version__ = "0.1.0"
__all__ = [
    'OneKpError', 'ParseError', 'InvalidKeyError',
    'FetchError', 'NetworkError', 'HttpStatusError', 'WriteError',
    'Record', 'Catalog', 'parse_table', 'load_catalog',
    'FILTER_KEYS', 'resolve_key', 'filter_records', 'distinct_values',
    'SequenceType', 'build_urls', 'parse_directory_index', 'resolve_directory',
    'Fetcher', 'FetchResult', 'fetch_all', 'summarize',
]
