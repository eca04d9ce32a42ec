"""Tests for assembling section grids into one sheet."""

from phenogrid.document import assemble
from phenogrid.session import ExportSession


def test_headers_side_by_side_and_record_blocks(sample_record, make_record):
    two_genes = make_record(
        id="P0000002",
        genes=[
            {"gene": "KCNQ2", "status": "solved"},
            {"gene": "STXBP1", "status": "rejected"},
        ],
    )
    session = ExportSession.for_fields(["doc.name", "external_id", "genes", "genes_status"])
    sheet = assemble(session, [sample_record, two_genes])

    assert sheet.to_matrix() == [
        ["Identifiers", "", "Genotype", ""],
        ["Report ID", "Patient Identifier", "Gene Name", "Status"],
        ["P0000001", "FAM-0042-01", "SCN1A", "Candidate"],
        ["P0000002", "", "KCNQ2", "Confirmed causal"],
        ["", "", "STXBP1", "Negative"],
    ]


def test_grouped_header_pushes_bodies_down(sample_record):
    session = ExportSession.for_fields(["doc.name", "maternal_ethnicity"])
    sheet = assemble(session, [sample_record])

    assert sheet.get(1, 0).value == "Family History"
    assert sheet.get(1, 1).value == "Ethnicity"
    assert sheet.get(1, 2).value == "Maternal"
    assert sheet.get(0, 3).value == "P0000001"
    assert [c.value for c in sheet.column(1)[3:]] == ["Ashkenazi Jewish", "Irish"]


def test_absent_sections_take_no_columns(empty_record):
    session = ExportSession.for_fields(["unaffected"])
    sheet = assemble(session, [empty_record, empty_record])
    assert sheet.to_matrix() == [
        ["Clinically Normal"],
        ["Clinically normal"],
        ["No"],
        ["No"],
    ]


def test_no_records_gives_headers_only():
    session = ExportSession.for_fields(["doc.name"])
    sheet = assemble(session, [])
    assert sheet.row_count == 2
