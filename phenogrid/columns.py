"""Column identifiers per export section.

Each section has a closed set of column ids. Field-id strings from export
requests are mapped onto these by the resolver; the string values are only
used when a column id has to be reported or serialized.
"""

from __future__ import annotations

from enum import Enum


class IdColumn(str, Enum):
    ID = "id"
    EXTERNAL_ID = "external_id"


class DocumentInfoColumn(str, Enum):
    REFERRER = "referrer"
    CREATION_DATE = "creationDate"
    AUTHOR = "author"
    DATE = "date"


class PatientInfoColumn(str, Enum):
    FIRST_NAME = "first_name"
    LAST_NAME = "last_name"
    DATE_OF_BIRTH = "date_of_birth"
    GENDER = "gender"
    INDICATION_FOR_REFERRAL = "indication_for_referral"


class FamilyHistoryColumn(str, Enum):
    MODE_OF_INHERITANCE = "global_mode_of_inheritance"
    MISCARRIAGES = "miscarriages"
    CONSANGUINITY = "consanguinity"
    FAMILY_CONDITIONS = "family_history"
    MATERNAL_ETHNICITY = "maternal_ethnicity"
    PATERNAL_ETHNICITY = "paternal_ethnicity"


class PrenatalHistoryColumn(str, Enum):
    GESTATION = "gestation"
    NOTES = "prenatal_development"
    FERTILITY_MEDS = "assistedReproduction_fertilityMeds"
    IUI = "assistedReproduction_iui"
    IVF = "ivf"
    ICSI = "icsi"
    SURROGACY = "assistedReproduction_surrogacy"
    DONOR_SPERM = "assistedReproduction_donorsperm"
    DONOR_EGG = "assistedReproduction_donoregg"
    APGAR1 = "apgar1"
    APGAR5 = "apgar5"


class PhenotypeColumn(str, Enum):
    # Presence flags; they select findings but are not columns themselves.
    POSITIVE = "positive"
    NEGATIVE = "negative"

    PRESENT = "present"
    CATEGORY = "category"
    PHENOTYPE = "phenotype"
    CODE = "code"
    META = "meta"
    META_CODE = "meta_code"


class DisorderColumn(str, Enum):
    DISORDER = "disorder"
    CODE = "code"
    NOTES = "notes"


class GeneColumn(str, Enum):
    GENES = "genes"
    STATUS = "status"
    STRATEGY = "strategy"
    COMMENTS = "comments"


class VariantColumn(str, Enum):
    GENE_SYMBOL = "genesymbol"
    CDNA = "cdna"
    PROTEIN = "protein"
    TRANSCRIPT = "transcript"
    DBSNP = "dbsnp"
    ZYGOSITY = "zygosity"
    EFFECT = "effect"
    INTERPRETATION = "interpretation"
    INHERITANCE = "inheritance"
    EVIDENCE = "evidence"
    SEGREGATION = "segregation"
    SANGER = "sanger"


class MedicalHistoryColumn(str, Enum):
    ALLERGIES = "allergies"
    AGE_OF_ONSET = "global_age_of_onset"
    NOTES = "medical_history"


class IsNormalColumn(str, Enum):
    UNAFFECTED = "unaffected"


class IsSolvedColumn(str, Enum):
    SOLVED = "solved"
    PUBMED_ID = "solved__pubmed_id"
    NOTES = "solved__notes"
