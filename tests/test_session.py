"""Tests for the export session: conversion, absent sections and column parity."""

from enum import Enum

import pytest

from phenogrid.cells import Cell, Grid
from phenogrid.columns import IdColumn, PhenotypeColumn
from phenogrid.resolver import rule
from phenogrid.sections import SECTIONS, ColumnSpec, SectionDescriptor
from phenogrid.session import ColumnCountMismatch, ExportSession

ALL_FIELD_IDS = [field_id for section in SECTIONS for field_id in section.field_ids]


def _by_name(converted, session):
    return {section.name: grids for section, grids in zip(session.sections, converted)}


def test_end_to_end_identifiers_and_phenotype(make_record):
    record = make_record(
        id="P0000042",
        features=[
            {"id": "HP:01", "name": "SeizuresYes", "present": True},
            {"id": "HP:02", "name": "AtaxiaYes", "present": True},
        ],
    )
    session = ExportSession.for_fields({"doc.name", "phenotype", "code"})
    converted = _by_name(session.convert(record), session)

    identifiers = converted["identifiers"]
    assert [c.value for c in identifiers.header.row(1)] == ["Report ID"]
    assert [c.value for c in identifiers.body] == ["P0000042"]

    phenotype = converted["phenotype"]
    assert [c.value for c in phenotype.header.row(1)] == ["Label", "ID"]
    assert phenotype.body.to_matrix() == [["SeizuresYes", "HP:01"], ["AtaxiaYes", "HP:02"]]

    others = [name for name, grids in converted.items() if grids is not None]
    assert others == ["identifiers", "phenotype"]


def test_nothing_enabled_gives_all_absent(sample_record):
    session = ExportSession.for_fields([])
    assert session.convert(sample_record) == [None] * len(SECTIONS)
    assert session.headers() == [None] * len(SECTIONS)


@pytest.mark.parametrize("field_id", ALL_FIELD_IDS)
@pytest.mark.parametrize("record_fixture", ["sample_record", "empty_record"])
def test_header_and_body_column_counts_match(field_id, record_fixture, request):
    record = request.getfixturevalue(record_fixture)
    session = ExportSession.for_fields([field_id])
    converted = [grids for grids in session.convert(record) if grids is not None]
    assert converted
    for grids in converted:
        assert grids.header.column_count == grids.body.column_count
        assert grids.body.row_count >= 1


@pytest.mark.parametrize("record_fixture", ["sample_record", "empty_record"])
def test_every_field_enabled(record_fixture, request):
    record = request.getfixturevalue(record_fixture)
    session = ExportSession.for_fields(ALL_FIELD_IDS)
    assert session.unclaimed_fields == frozenset()
    converted = session.convert(record)
    assert all(grids is not None for grids in converted)
    for grids in converted:
        assert grids.column_count == grids.body.column_count


def test_sample_record_is_normal_and_solved(sample_record):
    session = ExportSession.for_fields(["unaffected", "solved"])
    converted = _by_name(session.convert(sample_record), session)
    assert converted["is_normal"].body.get(0, 0).value == "No"
    assert converted["is_solved"].body.get(0, 0).value == "No"


def test_is_normal_without_clinical_status(make_record):
    session = ExportSession.for_fields(["unaffected"])
    converted = _by_name(session.convert(make_record()), session)
    assert converted["is_normal"].body.get(0, 0).value == "No"


def test_document_info_translations(sample_record):
    session = ExportSession.for_fields(["referrer", "creationDate", "author", "date"])
    converted = _by_name(session.convert(sample_record), session)
    assert [c.value for c in converted["document_info"].body] == [
        "jdoe",
        "2024.03.05",
        "asmith",
        "2024.04.18",
    ]


def test_characters_per_line_is_passed_to_wrapping(make_record):
    record = make_record(solved={"solved": "1", "solved__notes": "aaa bbb ccc"})
    session = ExportSession.for_fields(["solved", "solved__notes"], characters_per_line=3)
    converted = _by_name(session.convert(record), session)
    notes = converted["is_solved"].body
    assert [c.value for c in notes.column(0)] == ["Yes"]
    assert [c.value for c in notes.column(1)] == ["aaa", "bbb", "ccc"]


class SingleColumn(str, Enum):
    VALUE = "value"


SINGLE = SectionDescriptor(
    name="single",
    title="Single",
    rules=(rule("single", SingleColumn.VALUE),),
    columns=(ColumnSpec(SingleColumn.VALUE, "Value"),),
    entries=lambda record, present: [{SingleColumn.VALUE: "x"}],
)


def test_custom_section_table(empty_record):
    session = ExportSession.for_fields(["single"], sections=[SINGLE])
    (grids,) = session.convert(empty_record)
    assert grids.name == "single"
    assert grids.body.to_matrix() == [["x"]]


def test_column_count_mismatch_is_fatal(empty_record, monkeypatch):
    session = ExportSession.for_fields(["single"], sections=[SINGLE])

    def wide_body(section, record):
        return Grid([Cell(0, 0, "a"), Cell(1, 0, "b")])

    monkeypatch.setattr(session, "body", wide_body)
    with pytest.raises(ColumnCountMismatch) as excinfo:
        session.convert(empty_record)
    assert excinfo.value.section == "single"
    assert excinfo.value.header_columns == 1
    assert excinfo.value.body_columns == 2


def test_one_sided_absent_section_is_fatal(empty_record, monkeypatch):
    session = ExportSession.for_fields(["doc.name"])
    monkeypatch.setattr(session, "body", lambda section, record: None)
    with pytest.raises(ColumnCountMismatch):
        session.convert(empty_record)


def test_present_column_lookup():
    session = ExportSession.for_fields(["external_id", "negative_phenotype"])
    assert session.present(SECTIONS[0]) == {IdColumn.EXTERNAL_ID}
    assert session.present(SECTIONS[5]) == {PhenotypeColumn.NEGATIVE, PhenotypeColumn.PHENOTYPE}
