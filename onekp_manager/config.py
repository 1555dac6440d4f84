"""
Configuration for the OneKP Manager.

Default locations of the 1KP catalog and assemblies on GigaDB, plus local
cache and download settings.
"""

import os
from pathlib import Path

# GigaDB dataset 100627 (1000 Plant Transcriptomes)
GIGADB_BASE_URL = "https://ftp.cngb.org/pub/gigadb/pub/10.5524/100001_101000/100627"
METADATA_URL = f"{GIGADB_BASE_URL}/Sample-List-with-Taxonomy.tsv.csv"
ASSEMBLY_INDEX_URL = f"{GIGADB_BASE_URL}/assemblies/"

# Local cache for the catalog table and the assembly index
DEFAULT_CACHE_DIR = Path(os.environ.get("ONEKP_CACHE_DIR", ".onekp_cache"))
CACHE_MAX_AGE = 3600  # seconds

# HTTP settings
REQUEST_INTERVAL = 3.0  # seconds between consecutive requests
DEFAULT_TIMEOUT = 60  # seconds
CHUNK_SIZE = 1 << 16

# Catalog table layout: 0 id, 1 clade, 2 order, 3 family, 4 species, 5 tissue
CATALOG_COLUMNS = ['1kP_ID', 'Clade', 'Order', 'Family', 'Species', 'Tissue Type']
MISSING_VALUE = "No data"

# Translated assembly file names: {id}-translated-{suffix}
PROTEIN_SUFFIX = "protein.fa.gz"
CDS_SUFFIX = "nucleotides.fa.gz"
