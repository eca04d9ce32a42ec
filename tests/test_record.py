"""Tests for record accessors and phenotype finding selection/ordering."""

import logging

import pytest

from phenogrid.features import category_ranks, select_features, sort_features
from phenogrid.record import Feature, PatientRecord
from phenogrid.session import ExportSession


def _names(features):
    return [feature.name for feature in features]


class TestPatientRecord:
    def test_rejects_non_mapping(self):
        with pytest.raises(TypeError):
            PatientRecord(["P0000001"])

    def test_identifiers(self, sample_record, make_record):
        assert sample_record.id == "P0000001"
        assert sample_record.external_id == "FAM-0042-01"
        assert make_record(external_id="  ").external_id is None

    def test_missing_groups_read_as_empty(self, empty_record):
        assert empty_record.group("notes") == {}
        assert empty_record.text("notes", "family_history") is None
        assert empty_record.values("ethnicity", "maternal_ethnicity") == []
        assert empty_record.indexed("genes") == []
        assert empty_record.features() == []

    def test_scalar_becomes_one_item_list(self, make_record):
        record = make_record(ethnicity={"maternal_ethnicity": "Irish"})
        assert record.values("ethnicity", "maternal_ethnicity") == ["Irish"]

    def test_malformed_data_is_logged_not_raised(self, make_record, caplog):
        record = make_record(notes="not a mapping", variants={"cdna": "c.1A>G"})
        with caplog.at_level(logging.WARNING):
            assert record.group("notes") == {}
            assert record.indexed("variants") == []
        assert "'notes' is not a mapping" in caplog.text
        assert "'variants' is not a list" in caplog.text

    def test_features_parse(self, sample_record):
        features = sample_record.features()
        assert _names(features) == ["Seizures", "Microcephaly", "Global developmental delay"]
        seizures = features[0]
        assert seizures.present is True
        assert [m.name for m in seizures.metadata] == ["Infantile onset", "Severe"]
        assert features[1].present is False
        assert features[2].metadata == ()

    @pytest.mark.parametrize("raw, expected", [("no", False), ("absent", False), ("yes", True)])
    def test_string_presence(self, make_record, raw, expected):
        record = make_record(features=[{"id": "HP:1", "name": "Ataxia", "present": raw}])
        assert record.features()[0].present is expected

    @pytest.mark.parametrize("raw", [{"present": None}, {}])
    def test_unpopulated_presence_means_observed(self, make_record, raw):
        record = make_record(features=[dict(raw, id="HP:1", name="Ataxia")])
        assert record.features()[0].present is True

    def test_null_presence_is_exported_as_observed_finding(self, make_record):
        record = make_record(features=[{"id": "HP:1", "name": "Ataxia", "present": None}])
        session = ExportSession.for_fields(["phenotype"])
        phenotype = session.convert(record)[5]
        assert phenotype.body.to_matrix() == [["Ataxia"]]

    def test_features_without_id_or_name_are_skipped(self, make_record):
        record = make_record(features=[{"present": True}, {"id": "HP:1"}, "HP:2"])
        assert [f.id for f in record.features()] == ["HP:1"]

    def test_disorders(self, sample_record):
        disorders = sample_record.disorders()
        assert [(d.id, d.name) for d in disorders] == [("607208", "Dravet syndrome")]


def _feature(name, present=True, category=None, type_="phenotype"):
    return Feature(id=name.lower(), name=name, present=present, type=type_, category=category)


class TestSelectFeatures:
    FEATURES = [
        _feature("Seizures"),
        _feature("Microcephaly", present=False),
        _feature("Polyhydramnios", type_="prenatal_phenotype"),
        _feature("Oligohydramnios", present=False, type_="prenatal_phenotype"),
    ]

    def test_kind_and_presence_filters(self):
        assert _names(select_features(self.FEATURES, False, True, True)) == [
            "Seizures",
            "Microcephaly",
        ]
        assert _names(select_features(self.FEATURES, False, True, False)) == ["Seizures"]
        assert _names(select_features(self.FEATURES, True, False, True)) == ["Oligohydramnios"]

    def test_no_presence_flag_selects_nothing(self):
        assert select_features(self.FEATURES, False, False, False) == []


class TestSortFeatures:
    def test_observed_before_excluded_keeps_original_order(self):
        features = [
            _feature("A", present=False),
            _feature("B"),
            _feature("C", present=False),
            _feature("D"),
        ]
        ordered = sort_features(features, by_presence=True, by_category=False)
        assert _names(ordered) == ["B", "D", "A", "C"]

    def test_categories_by_first_appearance_uncategorized_last(self):
        features = [
            _feature("A"),
            _feature("B", category="Head"),
            _feature("C", category="Nervous"),
            _feature("D", category="Head"),
        ]
        ordered = sort_features(features, by_presence=False, by_category=True)
        assert _names(ordered) == ["B", "D", "C", "A"]

    def test_no_sorting_requested(self):
        features = [_feature("B", present=False), _feature("A")]
        assert _names(sort_features(features, False, False)) == ["B", "A"]

    def test_category_ranks(self):
        ranks = category_ranks([_feature("A", category="X"), _feature("B"), _feature("C", category="Y")])
        assert ranks == {"X": 0, "Y": 1, None: 2}
