# identifier_classifier.py
# Lexical classification of user-supplied compound identifiers

import re
from dataclasses import dataclass

CID = "cid"
FORMULA = "formula"
INCHI = "inchi"
INCHIKEY = "inchikey"
NAME = "name"

QUERY_TYPES = (CID, FORMULA, INCHI, INCHIKEY, NAME)

FORMULA_PATTERN = re.compile(r"^(?:[A-Z][a-z]?\d*)+$")
INCHIKEY_PATTERN = re.compile(r"^[A-Z]{14}-[A-Z]{10}-[A-Z]$")
BARE_ELEMENTS = ["H", "O", "N", "C", "S", "P", "F", "Cl", "Br", "I"]
MAX_FORMULA_LENGTH = 50


@dataclass(frozen=True)
class Identifier:
    raw: str
    kind: str


def _looks_like_formula(query):
    if len(query) >= MAX_FORMULA_LENGTH or not FORMULA_PATTERN.match(query):
        return False
    # Bare symbols such as "Hg" or "Co" resolve as names unless listed
    if not (re.search(r"\d", query) or re.search(r"[A-Z].*[A-Z]", query) or query in BARE_ELEMENTS):
        return False
    return not re.search(r"[^A-Za-z0-9]", query)


def detect_input_type(query):
    """Return the identifier kind for a raw query string. Never fails."""
    query = query.strip()

    if query.isdigit() and query.isascii():
        return CID
    if _looks_like_formula(query):
        return FORMULA
    if query.startswith("InChI="):
        return INCHI
    if INCHIKEY_PATTERN.match(query):
        return INCHIKEY
    return NAME


def classify_identifier(query):
    raw = query.strip()
    return Identifier(raw=raw, kind=detect_input_type(raw))
