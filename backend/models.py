# models.py
# Typed views over PubChem PUG-View records and the assessment response.
#
# PUG-View records are loosely structured: any key may be missing or carry
# an unexpected type. The section-tree models coerce anything malformed to
# an empty/absent value instead of failing validation, so a single odd node
# never hides the rest of the record.

import logging
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)


def _as_text(value):
    return value if isinstance(value, str) else None


def _as_dict_list(value):
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


class _RecordNode(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


# ===== PUG-VIEW SECTION TREE =====

class Markup(_RecordNode):
    url: Optional[str] = Field(None, alias="URL")
    type: Optional[str] = Field(None, alias="Type")
    extra: Optional[str] = Field(None, alias="Extra")

    @field_validator("url", "type", "extra", mode="before")
    @classmethod
    def _text(cls, value):
        return _as_text(value)


class StringWithMarkup(_RecordNode):
    string: Optional[str] = Field(None, alias="String")
    markup: List[Markup] = Field(default_factory=list, alias="Markup")

    @field_validator("string", mode="before")
    @classmethod
    def _text(cls, value):
        return _as_text(value)

    @field_validator("markup", mode="before")
    @classmethod
    def _markup(cls, value):
        return _as_dict_list(value)


class Value(_RecordNode):
    string_with_markup: List[StringWithMarkup] = Field(default_factory=list, alias="StringWithMarkup")

    @field_validator("string_with_markup", mode="before")
    @classmethod
    def _fragments(cls, value):
        return _as_dict_list(value)


class Information(_RecordNode):
    """One annotated value entry of a section"""
    description: Optional[str] = Field(None, alias="Description")
    reference_number: Optional[int] = Field(None, alias="ReferenceNumber")
    value: Value = Field(default_factory=Value, alias="Value")

    @field_validator("description", mode="before")
    @classmethod
    def _text(cls, value):
        return _as_text(value)

    @field_validator("reference_number", mode="before")
    @classmethod
    def _reference(cls, value):
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        return None

    @field_validator("value", mode="before")
    @classmethod
    def _value(cls, value):
        return value if isinstance(value, dict) else {}

    @property
    def first_string(self):
        """Text of the first markup fragment, or None"""
        fragments = self.value.string_with_markup
        return fragments[0].string if fragments else None

    @property
    def strings(self):
        return [fragment.string for fragment in self.value.string_with_markup if fragment.string]


class Section(_RecordNode):
    """A heading-labelled node; may hold child sections and/or entries"""
    heading: str = Field("", alias="TOCHeading")
    information: List[Information] = Field(default_factory=list, alias="Information")
    sections: List["Section"] = Field(default_factory=list, alias="Section")

    @field_validator("heading", mode="before")
    @classmethod
    def _heading(cls, value):
        return value if isinstance(value, str) else ""

    @field_validator("information", "sections", mode="before")
    @classmethod
    def _children(cls, value):
        return _as_dict_list(value)


def parse_sections(raw_sections):
    """Build typed sections from the raw ``Record.Section`` list, skipping junk"""
    sections = []
    for raw in _as_dict_list(raw_sections):
        try:
            sections.append(Section.model_validate(raw))
        except ValidationError as e:
            logger.debug(f"[Record] Skipping malformed section: {e}")
    return sections


# ===== ASSESSMENT RESULT =====

class _ResponseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


class CompoundProperties(_ResponseModel):
    molecular_weight: Optional[float] = Field(None, alias="MolecularWeight")
    iupac_name: Optional[str] = Field(None, alias="IUPACName")
    inchi: Optional[str] = Field(None, alias="InChI")
    molecular_formula: Optional[str] = Field(None, alias="MolecularFormula")

    @field_validator("molecular_weight", mode="before")
    @classmethod
    def _weight(cls, value):
        # PUG REST reports the weight as a decimal string
        if value is None or isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @field_validator("iupac_name", "inchi", "molecular_formula", mode="before")
    @classmethod
    def _text(cls, value):
        return _as_text(value)

    def is_empty(self):
        return all(value is None for value in self.model_dump().values())


class GHSSymbol(_ResponseModel):
    url: str
    description: str


class GHSInfo(_ResponseModel):
    symbols: List[GHSSymbol] = Field(default_factory=list)
    signal_word: Optional[str] = Field(None, alias="signalWord")
    hazard_statements: List[str] = Field(default_factory=list, alias="hazardStatements")
    precautionary_statements: List[str] = Field(default_factory=list, alias="precautionaryStatements")


class ToxicityInfo(_ResponseModel):
    ld50: List[str] = Field(default_factory=list)
    lc50: List[str] = Field(default_factory=list)
    human_effects: List[str] = Field(default_factory=list, alias="humanEffects")
    animal_effects: List[str] = Field(default_factory=list, alias="animalEffects")

    def has_data(self):
        return bool(self.ld50 or self.lc50 or self.human_effects or self.animal_effects)


class EnvironmentalInfo(_ResponseModel):
    aquatic_toxicity: List[str] = Field(default_factory=list, alias="aquaticToxicity")
    biodegradability: List[str] = Field(default_factory=list)
    bioaccumulation: List[str] = Field(default_factory=list)


class ExtractedInfo(_ResponseModel):
    ghs: GHSInfo = Field(default_factory=GHSInfo)
    toxicity: ToxicityInfo = Field(default_factory=ToxicityInfo)
    environmental: EnvironmentalInfo = Field(default_factory=EnvironmentalInfo)
    synonyms: List[str] = Field(default_factory=list)
    found_iupac_name: Optional[str] = None
    description: Optional[str] = None


RiskLevel = Literal["Low", "Medium", "High", "Unknown"]


class RiskResult(_ResponseModel):
    score: int = Field(ge=0, le=100)
    risk_level: RiskLevel = Field(alias="riskLevel")
    reasons: List[str] = Field(default_factory=list)


class AssessmentResult(_ResponseModel):
    query: str
    query_type: str = Field(alias="queryType")
    cid: int
    compound_name: str = Field(alias="compoundName")
    risk: RiskResult
    properties: CompoundProperties
    ghs: GHSInfo
    toxicity: ToxicityInfo
    environmental: EnvironmentalInfo
    synonyms: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    pub_chem_url: str = Field(alias="pubChemUrl")

    def to_response(self):
        return self.model_dump(by_alias=True, exclude_none=True)
