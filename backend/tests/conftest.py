"""
Pytest configuration and shared fixtures for the environmental risk backend.

Provides:
- A PubChem client pointed at fixed test URLs
- Typed sample records
"""

import pytest

from models import CompoundProperties, parse_sections
from pubchem_client import PubChemClient
from sample_data import record_sections


@pytest.fixture
def client():
    return PubChemClient(
        rest_url="https://pubchem.test/rest/pug",
        view_url="https://pubchem.test/rest/pug_view",
        compound_url="https://pubchem.test/compound",
        timeout=5,
    )


@pytest.fixture
def sample_sections():
    return parse_sections(record_sections())


@pytest.fixture
def empty_properties():
    return CompoundProperties()
