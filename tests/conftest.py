"""
Shared test fixtures: sample coefficient table, resolver, test client.
"""

import copy

import pytest
from fastapi.testclient import TestClient

from sash_coefficients.dependencies import get_resolver
from sash_coefficients.main import app
from sash_coefficients.resolver import CoefficientResolver
from sash_coefficients.table_store import CoefficientTable


# "standard" is the worked example grid: widths x heights -> values[i][j]
SAMPLE_DOCUMENT = {
    "demo": {
        "standard": {
            "widths": [1, 2, 3],
            "heights": [1, 2],
            "values": [[10, 11], [20, 21], [30, 31]],
        },
        "blackout": {
            "widths": [1, 2],
            "heights": [1],
            "values": [[5], [6]],
        },
    },
    "single": {
        "E": {
            "widths": [1.0],
            "heights": [1.5],
            "values": [[2.5]],
        },
    },
}


@pytest.fixture
def table():
    return CoefficientTable.from_document(SAMPLE_DOCUMENT)


@pytest.fixture
def resolver(table):
    return CoefficientResolver(table)


@pytest.fixture
def client(resolver):
    """FastAPI test client serving the sample table."""
    app.dependency_overrides[get_resolver] = lambda: resolver
    yield TestClient(app)
    app.dependency_overrides.pop(get_resolver, None)


@pytest.fixture
def sample_document():
    """Fresh copy of the sample dataset document, safe to mutate."""
    return copy.deepcopy(SAMPLE_DOCUMENT)
