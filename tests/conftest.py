"""Shared fixtures for the phenogrid test suite."""

import copy
import json
import os
from typing import Any, Dict

import pytest

from phenogrid.record import PatientRecord

SAMPLE_RECORD_PATH = os.path.join(
    os.path.dirname(os.path.dirname(os.path.abspath(__file__))),
    "data",
    "records",
    "P0000001.json",
)


def pytest_configure(config):
    """Configure pytest markers"""
    config.addinivalue_line("markers", "integration: tests that write export files")


@pytest.fixture
def sample_document() -> Dict[str, Any]:
    with open(SAMPLE_RECORD_PATH, "r", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def sample_record(sample_document) -> PatientRecord:
    return PatientRecord(copy.deepcopy(sample_document))


@pytest.fixture
def empty_record() -> PatientRecord:
    return PatientRecord({"id": "P0000099"})


@pytest.fixture
def make_record():
    def _make(**data: Any) -> PatientRecord:
        data.setdefault("id", "P0000100")
        return PatientRecord(data)

    return _make
