# record_extractor.py
# Walks a PubChem PUG-View section tree and pulls out GHS classification,
# toxicity and environmental-fate excerpts, synonyms, a fallback IUPAC name
# and a short record description

import logging
import re
from dataclasses import dataclass, field
from typing import List, Optional

from models import EnvironmentalInfo, ExtractedInfo, GHSInfo, GHSSymbol, ToxicityInfo

logger = logging.getLogger(__name__)

MAX_EXCERPTS = 5
MAX_SYNONYMS = 10

HAZARD_CODE_PATTERN = re.compile(r"^H\d{3}")
PRECAUTION_SPLIT_PATTERN = re.compile(r",\s*|\n")
LD50_PATTERN = re.compile(r"LD(?:50|.?LO)", re.IGNORECASE)
LC50_PATTERN = re.compile(r"LC(?:50|.?LO)", re.IGNORECASE)
AQUATIC_PATTERN = re.compile(r"(?:LC|EC|IC|ErC|NOEC|LOEC).?50", re.IGNORECASE)

TOXICITY_HEADINGS = [
    "Toxicity", "Toxicological Information", "Acute Effects",
    "Human Toxicity Excerpts", "Non-Human Toxicity Excerpts", "Health Hazard",
]
ENVIRONMENTAL_HEADINGS = [
    "Ecotoxicity", "Environmental Fate", "Ecotoxicity Values", "Environmental Biodegradation",
    "Environmental Bioconcentration", "Bioaccumulation", "Ecological Information",
]


@dataclass
class ExtractionState:
    """Accumulator threaded through one walk of a record"""
    symbols: List[GHSSymbol] = field(default_factory=list)
    symbol_urls: set = field(default_factory=set)
    signal_word: Optional[str] = None
    # dicts keep first-seen order while deduplicating
    hazard_statements: dict = field(default_factory=dict)
    precautionary_statements: dict = field(default_factory=dict)
    ld50: List[str] = field(default_factory=list)
    lc50: List[str] = field(default_factory=list)
    human_effects: List[str] = field(default_factory=list)
    animal_effects: List[str] = field(default_factory=list)
    aquatic_toxicity: List[str] = field(default_factory=list)
    biodegradability: List[str] = field(default_factory=list)
    bioaccumulation: List[str] = field(default_factory=list)
    synonyms: List[str] = field(default_factory=list)
    iupac_name: Optional[str] = None
    description: Optional[str] = None

    def add_hazard(self, statement):
        self.hazard_statements.setdefault(statement, None)

    def add_precaution(self, code):
        self.precautionary_statements.setdefault(code, None)


def _unique(items, limit):
    return list(dict.fromkeys(items))[:limit]


def _collect_hazard_statements(information, state):
    found = []
    for item in information:
        for text in item.strings:
            if HAZARD_CODE_PATTERN.match(text):
                state.add_hazard(text)
                found.append(text)
    return found


def _split_precaution_codes(text):
    return [code.strip() for code in PRECAUTION_SPLIT_PATTERN.split(text) if code.strip()]


# ===== GHS =====

def _read_ghs_classification(node, state):
    for sub in node.sections:
        if sub.heading == "Pictograms":
            for item in sub.information:
                fragments = item.value.string_with_markup
                markups = fragments[0].markup if fragments else []
                for markup in markups:
                    if markup.type == "Icon" and markup.url and markup.url not in state.symbol_urls:
                        state.symbols.append(GHSSymbol(url=markup.url, description=markup.extra or "GHS Pictogram"))
                        state.symbol_urls.add(markup.url)
        elif sub.heading == "Signal Word" and sub.information:
            signal = sub.information[0].first_string
            if signal:
                state.signal_word = signal
        elif sub.heading == "GHS Hazard Statements":
            _collect_hazard_statements(sub.information, state)
        elif sub.heading == "Precautionary Statement Codes":
            for item in sub.information:
                text = item.first_string
                if text:
                    for code in _split_precaution_codes(text):
                        state.add_precaution(code)


def _read_fallback_hazards(node, heading, path, state):
    if heading == "Hazards Identification" and not state.hazard_statements:
        for sub in node.sections:
            if sub.heading in ("GHS Hazard Statements", "GHS Classification"):
                _collect_hazard_statements(sub.information, state)

    if "Hazard" in heading and node.information and not state.hazard_statements:
        found = _collect_hazard_statements(node.information, state)
        for text in found:
            logger.warning(f"[Extractor] Found potential Hazard Statement \"{text}\" in generic section: {' > '.join(path)}")

    if "Precaution" in heading and node.information and not state.precautionary_statements:
        for item in node.information:
            text = item.first_string
            if not text:
                continue
            codes = [code for code in _split_precaution_codes(text) if code.startswith("P")]
            if codes:
                logger.warning(f"[Extractor] Found potential Precautionary Codes in generic section: {' > '.join(path)}")
                for code in codes:
                    state.add_precaution(code)


# ===== TOXICITY / ENVIRONMENT =====

def _read_toxicity(node, heading, state):
    for item in node.information:
        text = item.first_string
        if not text:
            continue
        if LD50_PATTERN.search(text):
            state.ld50.append(text)
        if LC50_PATTERN.search(text):
            state.lc50.append(text)
        if heading == "Human Toxicity Excerpts":
            state.human_effects.append(text)
        if heading == "Non-Human Toxicity Excerpts":
            state.animal_effects.append(text)


def _read_environmental(node, state):
    for item in node.information:
        text = item.first_string
        if not text:
            continue
        lowered = text.lower()
        if AQUATIC_PATTERN.search(text) or "aquatic" in lowered:
            state.aquatic_toxicity.append(text)
        if "biodegrad" in lowered or "persist" in lowered:
            state.biodegradability.append(text)
        if "accumul" in lowered or "bcf" in lowered or "bioconcentration" in lowered:
            state.bioaccumulation.append(text)


# ===== NAMES AND IDENTIFIERS =====

def choose_description(information):
    """
    Pick one description from a "Record Description" block.
    Priority: Physical Description > Hazards Summary > reference 43 >
    reference 72 > first entry with text.
    """
    first = physical = hazards_summary = ref_43 = ref_72 = None
    for item in information:
        text = item.first_string
        if not text:
            continue
        if first is None:
            first = text
        if item.description == "Physical Description":
            physical = text
        elif item.description == "Hazards Summary":
            if hazards_summary is None:
                hazards_summary = text
        elif item.reference_number == 43:
            ref_43 = text
        elif item.reference_number == 72:
            ref_72 = text
    return physical or hazards_summary or ref_43 or ref_72 or first


def _first_text(section):
    return section.information[0].first_string if section.information else None


def _read_names_and_identifiers(node, state):
    for sub in node.sections:
        if state.iupac_name is None and sub.heading == "Computed Descriptors":
            for descriptor in sub.sections:
                if state.iupac_name is None and descriptor.heading == "IUPAC Name":
                    state.iupac_name = _first_text(descriptor) or None
        elif state.iupac_name is None and sub.heading == "IUPAC Name":
            state.iupac_name = _first_text(sub) or None
        elif "Synonyms" in sub.heading:
            for item in sub.information:
                if item.first_string:
                    state.synonyms.append(item.first_string)
            for nested in sub.sections:
                for item in nested.information:
                    state.synonyms.extend(item.strings)
        elif sub.heading == "Record Description" and state.description is None:
            state.description = choose_description(sub.information)


# ===== TRAVERSAL =====

def _crawl(node, path, state):
    heading = node.heading
    path = path + [heading]

    if heading == "GHS Classification":
        _read_ghs_classification(node, state)

    _read_fallback_hazards(node, heading, path, state)

    if any(h in heading for h in TOXICITY_HEADINGS):
        _read_toxicity(node, heading, state)

    if any(h in heading for h in ENVIRONMENTAL_HEADINGS):
        _read_environmental(node, state)

    if heading == "Names and Identifiers":
        _read_names_and_identifiers(node, state)

    for child in node.sections:
        if state.description is not None and child.heading == "Record Description":
            continue
        _crawl(child, path, state)


def extract_chemical_info(sections):
    """
    Extract hazard, toxicity, environmental and naming evidence from typed
    PUG-View sections. Missing or malformed parts simply contribute nothing.
    """
    state = ExtractionState()
    for section in sections:
        _crawl(section, [], state)

    result = ExtractedInfo(
        ghs=GHSInfo(
            symbols=state.symbols,
            signal_word=state.signal_word,
            hazard_statements=list(state.hazard_statements),
            precautionary_statements=list(state.precautionary_statements),
        ),
        toxicity=ToxicityInfo(
            ld50=_unique(state.ld50, MAX_EXCERPTS),
            lc50=_unique(state.lc50, MAX_EXCERPTS),
            human_effects=_unique(state.human_effects, MAX_EXCERPTS),
            animal_effects=_unique(state.animal_effects, MAX_EXCERPTS),
        ),
        environmental=EnvironmentalInfo(
            aquatic_toxicity=_unique(state.aquatic_toxicity, MAX_EXCERPTS),
            biodegradability=_unique(state.biodegradability, MAX_EXCERPTS),
            bioaccumulation=_unique(state.bioaccumulation, MAX_EXCERPTS),
        ),
        synonyms=_unique(state.synonyms, MAX_SYNONYMS),
        found_iupac_name=state.iupac_name,
        description=state.description,
    )

    logger.info(
        f"[Extractor] {len(result.ghs.hazard_statements)} hazard statements, "
        f"{len(result.ghs.precautionary_statements)} precautionary codes, "
        f"{len(result.synonyms)} synonyms, description: {'Yes' if result.description else 'No'}"
    )
    return result
