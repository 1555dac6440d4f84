"""Shared fixtures for OneKP Manager tests."""

from unittest.mock import MagicMock

import pytest
import requests

from onekp_manager.records import Catalog, parse_table

SAMPLE_TABLE = (
    "1kP_ID\tClade\tOrder\tFamily\tSpecies\tTissue Type\n"
    "WOGB\tMosses\tFunariales\tFunariaceae\tPhyscomitrella_patens\tgametophyte\n"
    "AALA\tEudicots\tCaryophyllales\tAizoaceae\tDelosperma_echinatum\tleaves\n"
    "ABCD\tMosses\tBryales\tBryaceae\tBryum_argenteum\twhole plant\n"
    "XYZA\tChromista\tBacillariales\tBacillariaceae\tNitzschia_sp.\t\n"
)

INDEX_HTML = """<html><head><title>Index of /assemblies</title></head><body>
<h1>Index of /assemblies</h1>
<a href="?C=N;O=D">Name</a>
<a href="../">Parent Directory</a>
<a href="AALA-Delosperma_echinatum/">AALA-Delosperma_echinatum/</a>
<a href="ABCD-Bryum_argenteum/">ABCD-Bryum_argenteum/</a>
<a href="WOGB-Physcomitrella_patens/">WOGB-Physcomitrella_patens/</a>
</body></html>
"""


@pytest.fixture
def sample_table():
    return SAMPLE_TABLE


@pytest.fixture
def index_html():
    return INDEX_HTML


@pytest.fixture
def catalog():
    return Catalog(parse_table(SAMPLE_TABLE))


@pytest.fixture
def table_file(tmp_path):
    path = tmp_path / "catalog.tsv"
    path.write_text(SAMPLE_TABLE)
    return path


def _make_response(status_code=200, chunks=(b"data",), text="", reason="OK"):
    """Build a mock requests.Response."""
    response = MagicMock(spec=requests.Response)
    response.status_code = status_code
    response.reason = reason
    response.text = text
    response.iter_content.return_value = list(chunks)
    return response


@pytest.fixture
def make_response():
    return _make_response


@pytest.fixture
def mock_session():
    return MagicMock(spec=requests.Session)
