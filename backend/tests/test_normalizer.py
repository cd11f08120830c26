"""
Record normalizer tests
=======================
Amounts, dates, lookups, the OLD_CRM_ID migration sentinel, owner attribution
and link keys, each degrading to a neutral default on bad input.
"""

import math
import pytest
import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ceo_metrics.normalizer import (
    deal_effective_date,
    deal_facts,
    deal_link_key,
    deal_owners,
    extract_date,
    is_post_migration,
    lookup_name,
    parse_amount,
    round_half_away,
    round_half_up,
)


class TestParseAmount:

    @pytest.mark.parametrize("value,expected", [
        (1500, 1500.0),
        (1500.75, 1500.75),
        ("1500", 1500.0),
        ("$1,234.50", 1234.5),
        ("USD 2,000", 2000.0),
        ("-250.5", -250.5),
        ("12-34", 12.0),
        ("", 0.0),
        ("n/a", 0.0),
        (None, 0.0),
        (True, 0.0),
        ({"value": 10}, 0.0),
    ])
    def test_values(self, value, expected):
        assert parse_amount(value) == expected

    def test_nan_is_zero(self):
        assert parse_amount(math.nan) == 0.0


class TestExtractDate:

    def test_iso_datetime(self):
        assert extract_date("2026-10-05T10:15:00-05:00") == "2026-10-05"

    def test_nested_date_attribute_preferred(self):
        assert extract_date({"date": "2026-10-05", "time": "10:00"}) == "2026-10-05"

    def test_date_found_inside_text(self):
        assert extract_date("created on 2026-01-02 by import") == "2026-01-02"

    def test_unparseable_text_returned_as_is(self):
        assert extract_date("yesterday") == "yesterday"

    @pytest.mark.parametrize("value", [None, "", 0])
    def test_absent(self, value):
        assert extract_date(value) is None


class TestLookupName:

    def test_dict_with_name(self):
        assert lookup_name({"id": "55", "name": "  Ana Ruiz "}) == "Ana Ruiz"

    def test_dict_without_name_uses_id(self):
        assert lookup_name({"id": "55", "name": ""}) == "55"

    def test_bare_string(self):
        assert lookup_name(" Bob ") == "Bob"

    @pytest.mark.parametrize("value", [None, "", "   ", {"name": "  "}, {}])
    def test_blank(self, value):
        assert lookup_name(value) is None


class TestMigrationSentinel:

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_post_migration(self, value):
        assert is_post_migration({"OLD_CRM_ID": value}) is True

    def test_absent_field(self):
        assert is_post_migration({}) is True

    @pytest.mark.parametrize("value", ["A-1001", 1001])
    def test_pre_migration(self, value):
        assert is_post_migration({"OLD_CRM_ID": value}) is False


class TestDealOwners:

    def test_three_named_reps(self):
        record = {"Sales_Rep": {"name": "Ana"}, "Sales_Rep_2": "Bob", "Trainee": {"name": "Cy"}}
        assert deal_owners(record) == ("Ana", "Bob", "Cy")

    def test_duplicates_collapse(self):
        record = {"Sales_Rep": {"name": "Ana"}, "Sales_Rep_2": " Ana ", "Trainee": None}
        assert deal_owners(record) == ("Ana",)

    def test_owner_used_when_sales_rep_empty(self):
        record = {"Sales_Rep": None, "Sales_Rep_2": "Bob", "Owner": {"name": "Olga"}}
        assert deal_owners(record) == ("Bob", "Olga")

    def test_owner_ignored_when_sales_rep_present(self):
        record = {"Sales_Rep": "Ana", "Owner": {"name": "Olga"}}
        assert deal_owners(record) == ("Ana",)

    def test_no_reps_is_unknown(self):
        assert deal_owners({"Sales_Rep": "  "}) == ("Unknown",)


class TestDealDates:

    def test_effective_date_order(self):
        record = {"Closing_Date": "2026-10-09", "Modified_Time": "2026-10-10T00:00:00Z",
                  "Created_Time": "2026-10-01T00:00:00Z"}
        assert deal_effective_date(record) == "2026-10-09"

    def test_effective_date_falls_back_to_created(self):
        assert deal_effective_date({"Created_Time": "2026-10-01T08:00:00Z"}) == "2026-10-01"

    def test_effective_date_none(self):
        assert deal_effective_date({}) is None


class TestLinkKey:

    def test_meeting_id_string(self):
        assert deal_link_key({"Meeting_ID": "m-1"}) == "m-1"

    def test_events_lookup(self):
        assert deal_link_key({"Events": {"id": 4400, "name": "Demo"}}) == "4400"

    def test_meeting_id_preferred_over_events(self):
        assert deal_link_key({"Meeting_ID": "m-1", "Events": {"id": "e-2"}}) == "m-1"

    def test_absent(self):
        assert deal_link_key({}) is None


def test_deal_facts_bundle():
    facts = deal_facts({
        "Amount": "$3,000",
        "Created_Time": "2026-10-05T10:00:00-05:00",
        "Sales_Rep": {"name": "Ana"},
        "OLD_CRM_ID": "",
        "Meeting_ID": {"id": "m-7"},
    })
    assert facts.amount == 3000.0
    assert facts.created_date == "2026-10-05"
    assert facts.effective_date == "2026-10-05"
    assert facts.owners == ("Ana",)
    assert facts.is_post_migration is True
    assert facts.link_key == "m-7"


@pytest.mark.parametrize("value,expected", [(2.5, 3), (2.4999, 2), (0.5, 1), (-2.5, -2), (7.0, 7)])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected


@pytest.mark.parametrize("value,expected", [(2.5, 3), (-2.5, -3), (-2.4999, -2), (-0.5, -1), (0.0, 0), (-87.5, -88)])
def test_round_half_away(value, expected):
    assert round_half_away(value) == expected
