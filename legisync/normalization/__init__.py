"""
Normalization package for LegiSync.

Translates source-specific vocabularies into canonical values.
"""

from .status import (
    STATUS_PRIORITY,
    match_status,
    normalize_congress_status,
    normalize_govtrack_status,
    normalize_openstates_status,
    normalize_status,
)

__all__ = [
    "STATUS_PRIORITY",
    "match_status",
    "normalize_congress_status",
    "normalize_govtrack_status",
    "normalize_openstates_status",
    "normalize_status",
]
