"""
Tests for source status normalization.
"""

import pytest

from legisync.models.bill import BillStatus
from legisync.normalization.status import (
    normalize_congress_status,
    normalize_govtrack_status,
    normalize_openstates_status,
    normalize_status,
)


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Became Public Law No: 119-4.", BillStatus.ENACTED),
        ("Signed by President.", BillStatus.ENACTED),
        ("Vetoed by President.", BillStatus.VETOED),
        ("Failed of passage in House by Yea-Nay Vote.", BillStatus.FAILED),
        ("Passed Senate without amendment by Unanimous Consent.", BillStatus.PASSED_SENATE),
        ("Received in the Senate.", BillStatus.PASSED_HOUSE),
        ("On passage Passed House by recorded vote.", BillStatus.PASSED_HOUSE),
        ("Referred to the House Committee on Ways and Means.", BillStatus.COMMITTEE_REVIEW),
        ("Introduced in House", BillStatus.INTRODUCED),
    ],
)
def test_congress_actions(text: str, expected: BillStatus) -> None:
    assert normalize_congress_status(text) == expected


def test_most_advanced_stage_wins() -> None:
    text = "Referred to committee; later became public law"
    assert normalize_congress_status(text) == BillStatus.ENACTED


def test_enacted_outranks_committee_keyword() -> None:
    assert normalize_congress_status("Reported by committee; enacted") == BillStatus.ENACTED


@pytest.mark.parametrize(
    "code, expected",
    [
        ("introduced", BillStatus.INTRODUCED),
        ("referred", BillStatus.COMMITTEE_REVIEW),
        ("reported", BillStatus.COMMITTEE_REVIEW),
        ("pass_over_house", BillStatus.PASSED_HOUSE),
        ("pass_over_senate", BillStatus.PASSED_SENATE),
        ("passed_bill", BillStatus.PASSED_SENATE),
        ("passed_constamend", BillStatus.PASSED_SENATE),
        ("enacted_signed", BillStatus.ENACTED),
        ("enacted_veto_override", BillStatus.ENACTED),
        ("prov_kill_veto", BillStatus.VETOED),
        ("vetoed_override_fail_second_senate", BillStatus.VETOED),
        ("fail_originating_house", BillStatus.FAILED),
    ],
)
def test_govtrack_codes(code: str, expected: BillStatus) -> None:
    assert normalize_govtrack_status(code) == expected


def test_openstates_combines_action_and_classification() -> None:
    status = normalize_openstates_status(
        "Referred to Com. on RLS.",
        ["executive-signature"],
    )
    assert status == BillStatus.ENACTED


def test_openstates_assembly_passage() -> None:
    assert normalize_openstates_status("Passed the Assembly. Ordered to the Senate.") == BillStatus.PASSED_HOUSE


def test_openstates_chaptered() -> None:
    assert normalize_openstates_status("Chaptered by Secretary of State.", None) == BillStatus.ENACTED


def test_openstates_bill_type_classification_does_not_change_status() -> None:
    assert normalize_openstates_status("Referred to Com. on ED.", ["bill"]) == BillStatus.COMMITTEE_REVIEW
    assert normalize_openstates_status("Introduced.", ["resolution"]) == BillStatus.INTRODUCED


@pytest.mark.parametrize("signal", [None, "", "   ", [], 42, {"unexpected": "shape"}, ["", None]])
def test_normalizers_never_raise(signal) -> None:
    for source in ("congress", "govtrack", "openstates", "unknown"):
        assert isinstance(normalize_status(source, signal), BillStatus)


def test_unmatched_signal_is_introduced() -> None:
    assert normalize_status("govtrack", "something new") == BillStatus.INTRODUCED
