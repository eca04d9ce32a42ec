"""Section descriptor table for the patient export.

Each export section is described as data: the field rules that enable its
columns, its canonical column order and labels, per-column behavior
(translation, grouping, row expansion, overflow) and the function that
pulls its entries out of a patient record. One generic header builder and
one generic body builder in ``layout.py`` consume these descriptors.

Column order per section is binding; it is never derived from the order of
requested fields.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Tuple

from .cells import StyleTag
from .columns import (
    DisorderColumn,
    DocumentInfoColumn,
    FamilyHistoryColumn,
    GeneColumn,
    IdColumn,
    IsNormalColumn,
    IsSolvedColumn,
    MedicalHistoryColumn,
    PatientInfoColumn,
    PhenotypeColumn,
    PrenatalHistoryColumn,
    VariantColumn,
)
from .features import select_features, sort_features
from .record import PatientRecord
from .resolver import FieldRule, cumulative, one_to_one, rule
from .translate import (
    GENE_VALUES,
    VARIANT_VALUES,
    allergy,
    format_date,
    integer_to_str_bool,
    parse_evidence,
    presence,
    str_integer_to_str_bool,
    username,
)

Present = FrozenSet[Enum]
Entry = Dict[Enum, Any]


@dataclass(frozen=True)
class ColumnSpec:
    """One physical column of a section.

    ``grouping`` columns are written once per run, ``expands`` columns hold
    lists laid out one item per row, ``wraps`` columns go through the
    overflow wrapper. ``section_scoped`` columns hold one value for the whole
    section (laid out from row 0) instead of one value per entry.
    """

    column: Enum
    label: str
    translate: Optional[Callable[[Any], Any]] = None
    grouping: bool = False
    expands: bool = False
    wraps: bool = False
    multiline: bool = False
    styles: FrozenSet[StyleTag] = frozenset()
    section_scoped: bool = False
    visible: Optional[Callable[[Present], bool]] = None

    def is_visible(self, present: Present) -> bool:
        if self.visible is not None:
            return self.visible(present)
        return self.column in present


@dataclass(frozen=True)
class GroupSpec:
    """A label spanning adjacent columns, written one row above their labels."""

    label: str
    members: FrozenSet[Enum]


@dataclass(frozen=True)
class SectionDescriptor:
    name: str
    title: str
    rules: Tuple[FieldRule, ...]
    columns: Tuple[ColumnSpec, ...]
    entries: Callable[[PatientRecord, Present], List[Entry]]
    groups: Tuple[GroupSpec, ...] = ()
    section_values: Optional[Callable[[PatientRecord], Entry]] = None

    def visible_columns(self, present: Present) -> List[ColumnSpec]:
        if not present:
            return []
        return [spec for spec in self.columns if spec.is_visible(present)]

    @property
    def field_ids(self) -> List[str]:
        return [field_rule.field_id for field_rule in self.rules]


# ---------------------------------------------------------------------------
# Entry extraction
# ---------------------------------------------------------------------------


def _identifier_entries(record: PatientRecord, present: Present) -> List[Entry]:
    return [{IdColumn.ID: record.id, IdColumn.EXTERNAL_ID: record.external_id}]


def _document_info_entries(record: PatientRecord, present: Present) -> List[Entry]:
    doc = record.group("document")
    return [
        {
            DocumentInfoColumn.REFERRER: doc.get("creator"),
            DocumentInfoColumn.CREATION_DATE: doc.get("creation_date"),
            DocumentInfoColumn.AUTHOR: doc.get("author"),
            DocumentInfoColumn.DATE: doc.get("date"),
        }
    ]


def _patient_info_entries(record: PatientRecord, present: Present) -> List[Entry]:
    return [
        {
            PatientInfoColumn.FIRST_NAME: record.text("patient_name", "first_name"),
            PatientInfoColumn.LAST_NAME: record.text("patient_name", "last_name"),
            PatientInfoColumn.DATE_OF_BIRTH: record.value("dates", "date_of_birth"),
            PatientInfoColumn.GENDER: record.get("sex"),
            PatientInfoColumn.INDICATION_FOR_REFERRAL: record.text(
                "notes", "indication_for_referral"
            ),
        }
    ]


def _family_history_entries(record: PatientRecord, present: Present) -> List[Entry]:
    return [
        {
            FamilyHistoryColumn.MODE_OF_INHERITANCE: record.values(
                "global_qualifiers", "global_mode_of_inheritance"
            ),
            FamilyHistoryColumn.MISCARRIAGES: record.value("family_history", "miscarriages"),
            FamilyHistoryColumn.CONSANGUINITY: record.value("family_history", "consanguinity"),
            FamilyHistoryColumn.FAMILY_CONDITIONS: record.text("notes", "family_history"),
            FamilyHistoryColumn.MATERNAL_ETHNICITY: record.values(
                "ethnicity", "maternal_ethnicity"
            ),
            FamilyHistoryColumn.PATERNAL_ETHNICITY: record.values(
                "ethnicity", "paternal_ethnicity"
            ),
        }
    ]


_ASSISTED_REPRODUCTION = (
    PrenatalHistoryColumn.FERTILITY_MEDS,
    PrenatalHistoryColumn.IUI,
    PrenatalHistoryColumn.IVF,
    PrenatalHistoryColumn.ICSI,
    PrenatalHistoryColumn.SURROGACY,
    PrenatalHistoryColumn.DONOR_SPERM,
    PrenatalHistoryColumn.DONOR_EGG,
)
_APGAR = (PrenatalHistoryColumn.APGAR1, PrenatalHistoryColumn.APGAR5)


def _prenatal_history_entries(record: PatientRecord, present: Present) -> List[Entry]:
    history = record.group("prenatal_perinatal_history")
    apgar = record.group("apgar")
    entry: Entry = {
        PrenatalHistoryColumn.GESTATION: history.get("gestation"),
        PrenatalHistoryColumn.NOTES: record.text("notes", "prenatal_development"),
    }
    for column in _ASSISTED_REPRODUCTION:
        entry[column] = history.get(column.value)
    for column in _APGAR:
        entry[column] = apgar.get(column.value)
    return [entry]


def _feature_entries(prenatal: bool) -> Callable[[PatientRecord, Present], List[Entry]]:
    def entries(record: PatientRecord, present: Present) -> List[Entry]:
        positive = PhenotypeColumn.POSITIVE in present
        negative = PhenotypeColumn.NEGATIVE in present
        features = select_features(record.features(), prenatal, positive, negative)
        features = sort_features(
            features,
            by_presence=positive and negative,
            by_category=PhenotypeColumn.CATEGORY in present,
        )
        return [
            {
                PhenotypeColumn.PRESENT: feature.present,
                PhenotypeColumn.CATEGORY: feature.category,
                PhenotypeColumn.PHENOTYPE: feature.name,
                PhenotypeColumn.CODE: feature.id,
                PhenotypeColumn.META: [meta.name for meta in feature.metadata],
                PhenotypeColumn.META_CODE: [meta.id for meta in feature.metadata],
            }
            for feature in features
        ]

    return entries


def _disorder_entries(record: PatientRecord, present: Present) -> List[Entry]:
    return [
        {DisorderColumn.DISORDER: disorder.name, DisorderColumn.CODE: disorder.id}
        for disorder in record.disorders()
    ]


def _disorder_notes(record: PatientRecord) -> Entry:
    return {DisorderColumn.NOTES: record.text("notes", "diagnosis_notes")}


def _gene_entries(record: PatientRecord, present: Present) -> List[Entry]:
    return [
        {
            GeneColumn.GENES: gene.get("gene"),
            GeneColumn.STATUS: gene.get("status"),
            GeneColumn.STRATEGY: gene.get("strategy"),
            GeneColumn.COMMENTS: gene.get("comments"),
        }
        for gene in record.indexed("genes")
    ]


def _variant_entries(record: PatientRecord, present: Present) -> List[Entry]:
    return [
        {column: variant.get(column.value) for column in VariantColumn}
        for variant in record.indexed("variants")
    ]


def _medical_history_entries(record: PatientRecord, present: Present) -> List[Entry]:
    return [
        {
            MedicalHistoryColumn.ALLERGIES: record.items("allergies"),
            MedicalHistoryColumn.AGE_OF_ONSET: record.values(
                "global_qualifiers", "global_age_of_onset"
            ),
            MedicalHistoryColumn.NOTES: record.text("notes", "medical_history"),
        }
    ]


def _is_normal_entries(record: PatientRecord, present: Present) -> List[Entry]:
    status = record.get("clinical_status")
    value = record.value("clinical_status", "unaffected") if status is not None else 0
    return [{IsNormalColumn.UNAFFECTED: value}]


def _is_solved_entries(record: PatientRecord, present: Present) -> List[Entry]:
    return [
        {
            IsSolvedColumn.SOLVED: record.value("solved", "solved"),
            IsSolvedColumn.PUBMED_ID: record.value("solved", "solved__pubmed_id"),
            IsSolvedColumn.NOTES: record.text("solved", "solved__notes"),
        }
    ]


# ---------------------------------------------------------------------------
# Descriptors
# ---------------------------------------------------------------------------


def _both_presence_flags(present: Present) -> bool:
    return PhenotypeColumn.POSITIVE in present and PhenotypeColumn.NEGATIVE in present


def _always(present: Present) -> bool:
    return True


_FEATURE_LABEL_STYLES = frozenset({StyleTag.FEATURE_SEPARATOR})

_PHENOTYPE_COLUMNS = (
    ColumnSpec(
        PhenotypeColumn.PRESENT,
        "Present",
        translate=presence,
        grouping=True,
        visible=_both_presence_flags,
    ),
    ColumnSpec(PhenotypeColumn.CATEGORY, "Category", grouping=True),
    ColumnSpec(PhenotypeColumn.PHENOTYPE, "Label", styles=_FEATURE_LABEL_STYLES),
    ColumnSpec(PhenotypeColumn.CODE, "ID", styles=_FEATURE_LABEL_STYLES),
)

IDENTIFIERS = SectionDescriptor(
    name="identifiers",
    title="Identifiers",
    rules=(rule("doc.name", IdColumn.ID), rule("external_id", IdColumn.EXTERNAL_ID)),
    columns=(
        ColumnSpec(IdColumn.ID, "Report ID"),
        ColumnSpec(IdColumn.EXTERNAL_ID, "Patient Identifier"),
    ),
    entries=_identifier_entries,
)

DOCUMENT_INFO = SectionDescriptor(
    name="document_info",
    title="Report Information",
    rules=one_to_one(DocumentInfoColumn),
    columns=(
        ColumnSpec(DocumentInfoColumn.REFERRER, "Referrer", translate=username),
        ColumnSpec(DocumentInfoColumn.CREATION_DATE, "Creation date", translate=format_date),
        ColumnSpec(DocumentInfoColumn.AUTHOR, "Last modified by", translate=username),
        ColumnSpec(DocumentInfoColumn.DATE, "Last modification date", translate=format_date),
    ),
    entries=_document_info_entries,
)

PATIENT_INFO = SectionDescriptor(
    name="patient_info",
    title="Patient Information",
    rules=one_to_one(PatientInfoColumn),
    columns=(
        ColumnSpec(PatientInfoColumn.FIRST_NAME, "First Name"),
        ColumnSpec(PatientInfoColumn.LAST_NAME, "Last Name"),
        ColumnSpec(PatientInfoColumn.DATE_OF_BIRTH, "Date of birth", translate=format_date),
        ColumnSpec(PatientInfoColumn.GENDER, "Sex"),
        ColumnSpec(PatientInfoColumn.INDICATION_FOR_REFERRAL, "Indication for referral", wraps=True),
    ),
    entries=_patient_info_entries,
)

FAMILY_HISTORY = SectionDescriptor(
    name="family_history",
    title="Family History",
    rules=one_to_one(FamilyHistoryColumn),
    columns=(
        ColumnSpec(FamilyHistoryColumn.MODE_OF_INHERITANCE, "Mode of inheritance", expands=True),
        ColumnSpec(FamilyHistoryColumn.MISCARRIAGES, "3+ miscarriages", translate=integer_to_str_bool),
        ColumnSpec(FamilyHistoryColumn.CONSANGUINITY, "Consanguinity", translate=integer_to_str_bool),
        ColumnSpec(FamilyHistoryColumn.FAMILY_CONDITIONS, "Family conditions", wraps=True),
        ColumnSpec(FamilyHistoryColumn.MATERNAL_ETHNICITY, "Maternal", expands=True),
        ColumnSpec(FamilyHistoryColumn.PATERNAL_ETHNICITY, "Paternal", expands=True),
    ),
    groups=(
        GroupSpec(
            "Ethnicity",
            frozenset({FamilyHistoryColumn.MATERNAL_ETHNICITY, FamilyHistoryColumn.PATERNAL_ETHNICITY}),
        ),
    ),
    entries=_family_history_entries,
)

PRENATAL_HISTORY = SectionDescriptor(
    name="prenatal_history",
    title="Prenatal and Perinatal History",
    rules=one_to_one(PrenatalHistoryColumn),
    columns=(
        ColumnSpec(PrenatalHistoryColumn.GESTATION, "Gestation at delivery"),
        ColumnSpec(PrenatalHistoryColumn.NOTES, "Notes", wraps=True),
        ColumnSpec(PrenatalHistoryColumn.FERTILITY_MEDS, "Fertility medication", translate=integer_to_str_bool),
        ColumnSpec(PrenatalHistoryColumn.IUI, "Intrauterine insemination (IUI)", translate=integer_to_str_bool),
        ColumnSpec(PrenatalHistoryColumn.IVF, "In vitro fertilization", translate=integer_to_str_bool),
        ColumnSpec(PrenatalHistoryColumn.ICSI, "Intra-cytoplasmic sperm injection", translate=integer_to_str_bool),
        ColumnSpec(PrenatalHistoryColumn.SURROGACY, "Surrogacy", translate=integer_to_str_bool),
        ColumnSpec(PrenatalHistoryColumn.DONOR_SPERM, "Donor sperm", translate=integer_to_str_bool),
        ColumnSpec(PrenatalHistoryColumn.DONOR_EGG, "Donor egg", translate=integer_to_str_bool),
        ColumnSpec(PrenatalHistoryColumn.APGAR1, "1 min"),
        ColumnSpec(PrenatalHistoryColumn.APGAR5, "5 min"),
    ),
    groups=(
        GroupSpec("Assisted Reproduction", frozenset(_ASSISTED_REPRODUCTION)),
        GroupSpec("APGAR Score", frozenset(_APGAR)),
    ),
    entries=_prenatal_history_entries,
)

PHENOTYPE = SectionDescriptor(
    name="phenotype",
    title="Phenotype",
    rules=(
        rule("phenotype", PhenotypeColumn.PHENOTYPE, PhenotypeColumn.POSITIVE),
        rule("code", PhenotypeColumn.CODE, PhenotypeColumn.POSITIVE),
        rule("phenotype_code", PhenotypeColumn.CODE, PhenotypeColumn.POSITIVE),
        rule(
            "phenotype_combined",
            PhenotypeColumn.PHENOTYPE,
            PhenotypeColumn.CODE,
            PhenotypeColumn.POSITIVE,
        ),
        rule(
            "phenotype_code_meta",
            PhenotypeColumn.META_CODE,
            PhenotypeColumn.PHENOTYPE,
            PhenotypeColumn.POSITIVE,
        ),
        rule(
            "phenotype_meta",
            PhenotypeColumn.META,
            PhenotypeColumn.PHENOTYPE,
            PhenotypeColumn.POSITIVE,
        ),
        rule("negative_phenotype", PhenotypeColumn.NEGATIVE, PhenotypeColumn.PHENOTYPE),
        rule("negative_phenotype_code", PhenotypeColumn.NEGATIVE, PhenotypeColumn.CODE),
        rule(
            "negative_phenotype_combined",
            PhenotypeColumn.NEGATIVE,
            PhenotypeColumn.CODE,
            PhenotypeColumn.PHENOTYPE,
        ),
        rule("phenotype_by_section", PhenotypeColumn.CATEGORY),
    ),
    columns=_PHENOTYPE_COLUMNS
    + (
        ColumnSpec(PhenotypeColumn.META, "Meta", expands=True),
        ColumnSpec(PhenotypeColumn.META_CODE, "ID", expands=True),
    ),
    entries=_feature_entries(prenatal=False),
)

PRENATAL_PHENOTYPE = SectionDescriptor(
    name="prenatal_phenotype",
    title="Prenatal Phenotype",
    rules=(
        rule("prenatal_phenotype", PhenotypeColumn.PHENOTYPE, PhenotypeColumn.POSITIVE),
        rule("prenatal_phenotype_code", PhenotypeColumn.CODE, PhenotypeColumn.POSITIVE),
        rule(
            "prenatal_phenotype_combined",
            PhenotypeColumn.PHENOTYPE,
            PhenotypeColumn.CODE,
            PhenotypeColumn.POSITIVE,
        ),
        rule("negative_prenatal_phenotype", PhenotypeColumn.NEGATIVE, PhenotypeColumn.PHENOTYPE),
        rule("prenatal_phenotype_by_section", PhenotypeColumn.CATEGORY),
    ),
    columns=_PHENOTYPE_COLUMNS,
    entries=_feature_entries(prenatal=True),
)

DISORDERS = SectionDescriptor(
    name="disorders",
    title="Disorders",
    rules=(
        rule("omim_id", DisorderColumn.DISORDER),
        rule("omim_id_code", DisorderColumn.CODE),
        rule("omim_id_combined", DisorderColumn.DISORDER, DisorderColumn.CODE),
        rule("diagnosis_notes", DisorderColumn.NOTES),
    ),
    columns=(
        ColumnSpec(DisorderColumn.DISORDER, "Label", multiline=True),
        ColumnSpec(DisorderColumn.CODE, "ID"),
        ColumnSpec(DisorderColumn.NOTES, "Notes", wraps=True, section_scoped=True),
    ),
    entries=_disorder_entries,
    section_values=_disorder_notes,
)

GENES = SectionDescriptor(
    name="genes",
    title="Genotype",
    rules=cumulative(
        ["genes", "genes_status", "genes_strategy", "genes_comments"],
        [GeneColumn.GENES, GeneColumn.STATUS, GeneColumn.STRATEGY, GeneColumn.COMMENTS],
    ),
    columns=(
        ColumnSpec(GeneColumn.GENES, "Gene Name"),
        ColumnSpec(GeneColumn.STATUS, "Status", translate=GENE_VALUES),
        ColumnSpec(GeneColumn.STRATEGY, "Strategy", translate=GENE_VALUES),
        ColumnSpec(GeneColumn.COMMENTS, "Comments", wraps=True),
    ),
    entries=_gene_entries,
)

_VARIANT_FIELDS = (
    VariantColumn.CDNA,
    VariantColumn.PROTEIN,
    VariantColumn.TRANSCRIPT,
    VariantColumn.DBSNP,
    VariantColumn.ZYGOSITY,
    VariantColumn.EFFECT,
    VariantColumn.INTERPRETATION,
    VariantColumn.INHERITANCE,
    VariantColumn.EVIDENCE,
    VariantColumn.SEGREGATION,
    VariantColumn.SANGER,
)

VARIANTS = SectionDescriptor(
    name="variants",
    title="Genotype - Variants",
    rules=cumulative(
        ["variants"] + [f"variants_{column.value}" for column in _VARIANT_FIELDS[1:]],
        _VARIANT_FIELDS,
    ),
    columns=(
        ColumnSpec(VariantColumn.GENE_SYMBOL, "Gene Symbol", visible=_always),
        ColumnSpec(VariantColumn.CDNA, "cDNA"),
        ColumnSpec(VariantColumn.PROTEIN, "Protein"),
        ColumnSpec(VariantColumn.TRANSCRIPT, "Transcript"),
        ColumnSpec(VariantColumn.DBSNP, "dbSNP"),
        ColumnSpec(VariantColumn.ZYGOSITY, "Zygosity"),
        ColumnSpec(VariantColumn.EFFECT, "Effect", translate=VARIANT_VALUES),
        ColumnSpec(VariantColumn.INTERPRETATION, "Interpretation", translate=VARIANT_VALUES),
        ColumnSpec(VariantColumn.INHERITANCE, "Inheritance", translate=VARIANT_VALUES),
        ColumnSpec(VariantColumn.EVIDENCE, "Evidence", translate=parse_evidence),
        ColumnSpec(VariantColumn.SEGREGATION, "Segregation Studies", translate=VARIANT_VALUES),
        ColumnSpec(VariantColumn.SANGER, "Sanger validation", translate=VARIANT_VALUES),
    ),
    entries=_variant_entries,
)

MEDICAL_HISTORY = SectionDescriptor(
    name="medical_history",
    title="Medical History",
    rules=one_to_one(MedicalHistoryColumn),
    columns=(
        ColumnSpec(MedicalHistoryColumn.ALLERGIES, "Allergies", translate=allergy, expands=True),
        ColumnSpec(MedicalHistoryColumn.AGE_OF_ONSET, "Age of onset", expands=True),
        ColumnSpec(MedicalHistoryColumn.NOTES, "Notes", wraps=True),
    ),
    entries=_medical_history_entries,
)

IS_NORMAL = SectionDescriptor(
    name="is_normal",
    title="Clinically Normal",
    rules=one_to_one(IsNormalColumn),
    columns=(
        ColumnSpec(IsNormalColumn.UNAFFECTED, "Clinically normal", translate=integer_to_str_bool),
    ),
    entries=_is_normal_entries,
)

IS_SOLVED = SectionDescriptor(
    name="is_solved",
    title="Solved Status",
    rules=one_to_one(IsSolvedColumn),
    columns=(
        ColumnSpec(IsSolvedColumn.SOLVED, "Solved", translate=str_integer_to_str_bool),
        ColumnSpec(IsSolvedColumn.PUBMED_ID, "PubMed ID"),
        ColumnSpec(IsSolvedColumn.NOTES, "Notes", wraps=True),
    ),
    entries=_is_solved_entries,
)

# Fixed export order; the resolver also claims field ids in this order.
SECTIONS: Tuple[SectionDescriptor, ...] = (
    IDENTIFIERS,
    DOCUMENT_INFO,
    PATIENT_INFO,
    FAMILY_HISTORY,
    PRENATAL_HISTORY,
    PHENOTYPE,
    PRENATAL_PHENOTYPE,
    DISORDERS,
    GENES,
    VARIANTS,
    MEDICAL_HISTORY,
    IS_NORMAL,
    IS_SOLVED,
)
