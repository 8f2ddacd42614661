"""
Visibility filter — which records the public view exposes.
"""

from types import SimpleNamespace

import pytest

from core.errors import NotFoundError
from core.interfaces.sharing import OwnerInfo, RuleView, SharingProvider
from modules.inventory.schemas import RecordCreate
from modules.inventory.store import RecordStore
from modules.inventory.visibility import Decision, decide, filter_visible, material_id_of, public_view


def _rec(material):
    return SimpleNamespace(material=material)


RECORDS = [_rec("1"), _rec("2"), _rec("PLA"), _rec(" 3 ")]


def test_public_global_rule_shares_everything():
    rules = [RuleView(None, True), RuleView(1, False)]
    assert filter_visible(RECORDS, rules) == RECORDS


def test_private_global_rule_defers_to_material_rules():
    rules = [RuleView(None, False), RuleView(2, True)]
    assert filter_visible(RECORDS, rules) == [RECORDS[1]]


def test_only_public_material_rules_grant():
    rules = [RuleView(1, True), RuleView(2, False), RuleView(3, True)]
    assert filter_visible(RECORDS, rules) == [RECORDS[0], RECORDS[3]]


def test_non_numeric_material_is_never_matched():
    assert decide(_rec("PLA"), [RuleView(1, True)]) is Decision.EXCLUDE
    assert decide(_rec("1abc"), [RuleView(1, True)]) is Decision.EXCLUDE
    assert material_id_of(_rec("12")) == 12
    assert material_id_of(_rec(None)) is None


def test_no_public_rules_hides_everything():
    assert filter_visible(RECORDS, [RuleView(None, False), RuleView(1, False)]) == []


class FakeSharing(SharingProvider):
    def __init__(self, owners, rules):
        self.owners, self.rules = owners, rules

    def get_owner(self, db, owner_id):
        return self.owners.get(owner_id)

    def get_rules(self, db, owner_id):
        return self.rules.get(owner_id, [])


class TestPublicView:

    def test_unknown_owner_is_not_found(self, db):
        with pytest.raises(NotFoundError):
            public_view(db, 424242, FakeSharing({}, {}))

    def test_owner_without_rules_is_not_found(self, db, owner):
        provider = FakeSharing({owner.id: OwnerInfo(owner.id, "Filament Fan")}, {})
        with pytest.raises(NotFoundError):
            public_view(db, owner.id, provider)

    def test_returns_owner_and_visible_records(self, db, owner):
        store = RecordStore(db)
        for name, material in (("Shared", "5"), ("Hidden", "6")):
            store.create(owner.scope, RecordCreate(name=name, material=material,
                                                   total_weight=1, remaining_percentage=50))
        provider = FakeSharing(
            {owner.id: OwnerInfo(owner.id, "Filament Fan")},
            {owner.id: [RuleView(5, True), RuleView(6, False)]},
        )
        info, records = public_view(db, owner.id, provider)
        assert info.name == "Filament Fan"
        assert [r.name for r in records] == ["Shared"]


@pytest.mark.parametrize("rules", [
    [RuleView(None, True)],
    [RuleView(None, False), RuleView(1, True)],
    [RuleView(2, False), RuleView(3, True)],
    [],
])
def test_filter_keeps_exactly_the_included_records(rules):
    expected = [r for r in RECORDS if decide(r, rules) is Decision.INCLUDE]
    assert filter_visible(RECORDS, rules) == expected
