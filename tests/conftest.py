from pathlib import Path

import pytest

from sideloader.ingest import MergeEngine
from sideloader.schema import load_registry
from sideloader.serializer import Serializer
from sideloader.store import NormalizedStore

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def schema_path() -> Path:
    return FIXTURES / "blog.yaml"


@pytest.fixture
def registry(schema_path):
    return load_registry(schema_path)


@pytest.fixture
def store():
    return NormalizedStore()


@pytest.fixture
def engine(store, registry):
    return MergeEngine(store, registry)


@pytest.fixture
def serializer(registry):
    return Serializer(registry)
