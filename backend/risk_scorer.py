# risk_scorer.py
# Heuristic 0-100 environmental/health risk score with readable reasons.
# The GHS code buckets and weights are empirical policy, not a standard.

import logging
import re

from models import RiskResult

logger = logging.getLogger(__name__)

MAX_SCORE = 100
HIGH_THRESHOLD = 65
MEDIUM_THRESHOLD = 30
UNKNOWN_THRESHOLD = 5

HEALTH_SCORE_CAP = 40
ENV_SCORE_CAP = 25

SEVERE_HEALTH_CODES = {"H300", "H310", "H330", "H301", "H311", "H331", "H340", "H350", "H360", "H370", "H372"}
MODERATE_HEALTH_CODES = {"H302", "H312", "H332", "H314", "H318", "H334", "H317", "H341", "H351", "H361", "H371", "H373"}
HIGH_ENV_CODES = {"H400", "H410", "H290"}
MEDIUM_ENV_CODES = {"H401", "H411"}
LOW_ENV_CODES = {"H402", "H412", "H413"}

HAZARD_CODE = re.compile(r"^(H\d{3})")
HALOGEN_PATTERN = re.compile(r"[Ff]l?|[Cc]l|[Bb]r|[Ii]")

INSUFFICIENT_DATA_REASON = (
    "Insufficient specific hazard data found in PubChem record for a comprehensive risk assessment."
)
NO_HAZARDS_REASON = (
    "No significant environmental or health hazards identified from available GHS, "
    "property, and toxicity/environmental excerpts."
)


def _code_label(statement):
    return statement.split(":")[0]


def _env_code_score(code):
    if code in HIGH_ENV_CODES:
        return 15
    if code in MEDIUM_ENV_CODES:
        return 10
    if code in LOW_ENV_CODES:
        return 5
    return 0


def calculate_risk(properties, ghs, toxicity, environmental):
    """
    Score a compound from its properties and extracted evidence.
    Pure function: identical inputs always give the same RiskResult.
    """
    score = 0
    reasons = []

    health_score = 0
    env_score = 0
    severe = []
    moderate = []
    env_hazards = []

    for statement in ghs.hazard_statements:
        match = HAZARD_CODE.match(statement)
        if not match:
            continue
        code = match.group(1)
        if code in SEVERE_HEALTH_CODES:
            health_score += 15
            severe.append(statement)
        elif code in MODERATE_HEALTH_CODES:
            health_score += 7
            moderate.append(statement)
        elif code.startswith("H4") or code == "H290":
            env_score += _env_code_score(code)
            env_hazards.append((code, statement))

    score += min(health_score, HEALTH_SCORE_CAP)
    score += min(env_score, ENV_SCORE_CAP)

    if severe:
        reasons.append(f"GHS: Contains severe health hazards (e.g., {_code_label(severe[0])}...).")
    if moderate:
        reasons.append(f"GHS: Contains moderate health hazards (e.g., {_code_label(moderate[0])}...).")
    if env_hazards:
        example = _code_label(env_hazards[0][1])
        if any(code == "H290" for code, _ in env_hazards):
            reasons.append(
                f"GHS: Classified as corrosive to metals and/or hazardous to the aquatic environment (e.g., {example}...)."
            )
        else:
            reasons.append(f"GHS: Classified as hazardous to the aquatic environment (e.g., {example}...).")

    weight = properties.molecular_weight
    is_halogenated = bool(properties.inchi and HALOGEN_PATTERN.search(properties.inchi))
    if weight is not None and weight > 500 and is_halogenated:
        score += 10
        reasons.append("High Molecular Weight (>500 Da) with halogenation suggests potential persistence.")
    elif weight is not None and weight > 700:
        score += 5
        reasons.append("Very High Molecular Weight (>700 Da) may indicate persistence.")

    is_persistent = any(
        "not readily biodegradable" in text.lower() or "persistent" in text.lower()
        for text in environmental.biodegradability
    )
    is_bioaccumulative = bool(environmental.bioaccumulation)

    if is_persistent:
        score += 10
        reasons.append("Data indicates persistence/low biodegradability.")
    elif environmental.biodegradability:
        score += 2

    if is_bioaccumulative:
        score += 8
        reasons.append("Bioaccumulation potential indicated by data.")

    if toxicity.has_data():
        score += 5
        if health_score <= 10:
            reasons.append("Toxicity data found (check details/GHS).")

    final_score = max(0, min(round(score), MAX_SCORE))

    if final_score >= HIGH_THRESHOLD:
        risk_level = "High"
    elif final_score >= MEDIUM_THRESHOLD:
        risk_level = "Medium"
    else:
        risk_level = "Low"

    has_hazard_data = (
        bool(ghs.hazard_statements)
        or toxicity.has_data()
        or bool(environmental.aquatic_toxicity)
        or is_persistent
        or is_bioaccumulative
    )

    if final_score < UNKNOWN_THRESHOLD and not has_hazard_data:
        risk_level = "Unknown"
        reasons = [INSUFFICIENT_DATA_REASON]
    elif risk_level == "Low" and not reasons:
        reasons.append(NO_HAZARDS_REASON)

    logger.info(f"[Risk] Score {final_score} ({risk_level}), {len(reasons)} reasons")
    return RiskResult(score=final_score, risk_level=risk_level, reasons=reasons)
