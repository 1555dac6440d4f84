"""
URL Builder - Derive GigaDB download URLs for 1KP samples.

Translated assemblies are published as:

    {ASSEMBLY_INDEX_URL}{directory}/{id}-translated-protein.fa.gz
    {ASSEMBLY_INDEX_URL}{directory}/{id}-translated-nucleotides.fa.gz

where directory is the per-sample folder listed in the assembly index
(e.g. WOGB-Physcomitrella_patens).
"""

import enum
import posixpath
from typing import Iterable, List, Optional, Union
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from .config import ASSEMBLY_INDEX_URL, CDS_SUFFIX, PROTEIN_SUFFIX


class SequenceType(str, enum.Enum):
    PROTEIN = 'protein'
    CDS = 'cds'
    BOTH = 'both'

    def file_suffixes(self) -> List[str]:
        if self is SequenceType.PROTEIN:
            return [PROTEIN_SUFFIX]
        if self is SequenceType.CDS:
            return [CDS_SUFFIX]
        return [CDS_SUFFIX, PROTEIN_SUFFIX]


def build_urls(
    sample_id: str,
    sequence_type: Union[SequenceType, str],
    directory: Optional[str] = None,
) -> List[str]:
    """
    Build the download URL(s) for one sample.

    Args:
        sample_id: 1KP sample id (e.g. "WOGB")
        sequence_type: protein, cds or both
        directory: Assembly directory name; defaults to sample_id

    Returns:
        One URL for protein/cds, two for both
    """
    seq_type = SequenceType(sequence_type)
    directory = directory or sample_id
    return [
        f"{ASSEMBLY_INDEX_URL}{directory}/{sample_id}-translated-{suffix}"
        for suffix in seq_type.file_suffixes()
    ]


def filename_from_url(url: str) -> str:
    """Final path segment of a URL (empty for directory URLs)."""
    return posixpath.basename(urlparse(url).path)


def parse_directory_index(html: str) -> List[str]:
    """
    Extract entry names from an HTML directory listing.

    Parent links, absolute links and sort links (?C=N;O=D) are ignored.
    """
    soup = BeautifulSoup(html, "html.parser")
    names = []
    for link in soup.find_all("a"):
        href = link.get("href") or ""
        if href.startswith(('?', '/', '#', '..')) or '://' in href:
            continue
        name = href.rstrip('/')
        if name and name not in names:
            names.append(name)
    return names


def resolve_directory(sample_id: str, directory_names: Iterable[str]) -> Optional[str]:
    """First listed directory whose name starts with the sample id."""
    for name in directory_names:
        if name == sample_id or name.startswith(f"{sample_id}-"):
            return name
    return None
