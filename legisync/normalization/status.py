"""
Status normalization for legislative sources.

Each source describes progress in its own vocabulary: Congress.gov sends
free-text latest actions, GovTrack sends enum codes, Open States sends
state-specific latest action descriptions. All of them collapse into the
canonical BillStatus vocabulary here.

Rules are checked from the most advanced stage to the least and the first
match wins, so "Referred to committee ... became public law" is Enacted and
"enacted_veto_override" is Enacted rather than Vetoed. Anything that matches
no rule is Introduced; these functions never raise.

Responsibility: Map source-specific status signals to BillStatus
"""

from typing import Any, Dict, Iterable, Tuple
import re

from ..models.bill import BillStatus


# Evaluation order: most advanced stage first. INTRODUCED is the fallback.
STATUS_PRIORITY: Tuple[BillStatus, ...] = (
    BillStatus.ENACTED,
    BillStatus.VETOED,
    BillStatus.FAILED,
    BillStatus.PASSED_SENATE,
    BillStatus.PASSED_HOUSE,
    BillStatus.COMMITTEE_REVIEW,
)

StatusRules = Tuple[Tuple[BillStatus, Tuple[str, ...]], ...]

_SEPARATORS = re.compile(r"[\s_:\-/]+")


def _build_rules(patterns: Dict[BillStatus, Tuple[str, ...]]) -> StatusRules:
    """Order a pattern table by STATUS_PRIORITY."""
    return tuple(
        (status, patterns[status])
        for status in STATUS_PRIORITY
        if status in patterns
    )


CONGRESS_RULES = _build_rules({
    BillStatus.ENACTED: ("became public law", "became private law", "enacted", "signed by president"),
    BillStatus.VETOED: ("veto",),
    BillStatus.FAILED: ("failed", "rejected"),
    BillStatus.PASSED_SENATE: ("passed senate", "agreed to in senate", "received in the house"),
    BillStatus.PASSED_HOUSE: ("passed house", "agreed to in house", "received in the senate"),
    BillStatus.COMMITTEE_REVIEW: ("committee", "referred to"),
})

# GovTrack current_status codes, e.g. "pass_over_house", "enacted_signed",
# "prov_kill_veto", "fail_originating_senate", after separator folding.
GOVTRACK_RULES = _build_rules({
    BillStatus.ENACTED: ("enacted",),
    BillStatus.VETOED: ("veto", "override"),
    BillStatus.FAILED: ("fail", "prov kill"),
    BillStatus.PASSED_SENATE: (
        "pass over senate",
        "pass back senate",
        "conference passed senate",
        "passed bill",
        "passed concurrentres",
        "passed constamend",
        "passed simpleres",
    ),
    BillStatus.PASSED_HOUSE: ("pass over house", "pass back house", "conference passed house"),
    BillStatus.COMMITTEE_REVIEW: ("referred", "reported"),
})

# Open States latest action descriptions. "executive signature" also covers
# callers that pass the classification list of an Open States action.
OPENSTATES_RULES = _build_rules({
    BillStatus.ENACTED: (
        "chaptered",
        "signed by governor",
        "approved by governor",
        "signed into law",
        "became law",
        "enacted",
        "executive signature",
    ),
    BillStatus.VETOED: ("veto",),
    BillStatus.FAILED: ("fail", "died"),
    BillStatus.PASSED_SENATE: ("passed senate", "passed the senate", "senate passed", "passed upper"),
    BillStatus.PASSED_HOUSE: (
        "passed house",
        "passed the house",
        "house passed",
        "passed assembly",
        "passed the assembly",
        "assembly passed",
        "passed lower",
    ),
    BillStatus.COMMITTEE_REVIEW: ("committee", "referred", "referral"),
})


def _flatten(signal: Any) -> str:
    """
    Fold any status signal into one lowercase, space-separated string.

    Accepts None, strings, and (nested) lists or tuples of strings, which
    is what the three sources send. Other objects are stringified.
    """
    if signal is None:
        return ""
    if isinstance(signal, str):
        parts: Iterable[str] = (signal,)
    elif isinstance(signal, (list, tuple, set)):
        parts = (_flatten(item) for item in signal)
    else:
        parts = (str(signal),)

    text = " ".join(part for part in parts if part)
    return _SEPARATORS.sub(" ", text.lower()).strip()


def match_status(signal: Any, rules: StatusRules) -> BillStatus:
    """
    Return the first rule whose pattern occurs in the signal text.

    Args:
        signal: Status text, code, or list of either
        rules: Priority-ordered rule table

    Returns:
        Canonical status, INTRODUCED when nothing matches
    """
    text = _flatten(signal)
    if not text:
        return BillStatus.INTRODUCED

    for status, patterns in rules:
        if any(pattern in text for pattern in patterns):
            return status

    return BillStatus.INTRODUCED


def normalize_congress_status(latest_action_text: Any) -> BillStatus:
    """Map a Congress.gov latestAction text."""
    return match_status(latest_action_text, CONGRESS_RULES)


def normalize_govtrack_status(current_status: Any) -> BillStatus:
    """Map a GovTrack current_status code (or its description)."""
    return match_status(current_status, GOVTRACK_RULES)


def normalize_openstates_status(
    latest_action_description: Any,
    classification: Any = None
) -> BillStatus:
    """
    Map an Open States latest action description.

    `classification` is an optional extra signal matched together with the
    description. The bills adapter passes the bill's own v3 classification,
    which is the bill type (`["bill"]`, `["resolution"]`) and carries no
    stage, so the description decides the status for synced bills.
    """
    return match_status([latest_action_description, classification], OPENSTATES_RULES)


_NORMALIZERS = {
    "congress": normalize_congress_status,
    "govtrack": normalize_govtrack_status,
    "openstates": normalize_openstates_status,
}


def normalize_status(source_key: str, signal: Any) -> BillStatus:
    """
    Dispatch to the normalizer variant for a source key.

    Unknown source keys fall back to the Congress.gov vocabulary, which is
    plain English and the most general of the three.
    """
    normalizer = _NORMALIZERS.get(source_key, normalize_congress_status)
    return normalizer(signal)
