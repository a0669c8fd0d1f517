# Rev 0.3.0
from __future__ import annotations

import pytest

from zaraboard.models.entities import BudgetItem, Note, PeoplePreset, Task, TaskUpdate
from zaraboard.models.normalize import normalize_budget_doc, normalize_payer_doc, normalize_preset_doc, normalize_task_doc


def test_legacy_latest_update_becomes_single_entry():
    doc = {"id": "t1", "title": "Old", "inCharge": "Ana", "latestUpdate": "Ordered sticks", "createdAt": 10}
    out = normalize_task_doc(doc)
    assert "latestUpdate" not in out
    assert out["inCharge"] == ["Ana"]
    assert out["updates"] == [{"text": "Ordered sticks", "timestamp": 10}]
    # input untouched
    assert doc["inCharge"] == "Ana"


def test_updates_list_wins_over_legacy_and_is_sorted_newest_first():
    doc = {
        "inCharge": ["Ana", "Ana", "Bea"],
        "latestUpdate": "ignored",
        "updates": [{"text": "a", "timestamp": 1}, {"text": "b", "timestamp": 3}],
    }
    out = normalize_task_doc(doc)
    assert out["inCharge"] == ["Ana", "Bea"]
    assert [u["text"] for u in out["updates"]] == ["b", "a"]


def test_missing_fields_normalize_to_empty():
    out = normalize_task_doc({"title": "x"})
    assert out["inCharge"] == []
    assert out["updates"] == []


def test_task_from_legacy_doc():
    t = Task.from_doc({"id": "t1", "title": "Old", "status": "In Progress", "inCharge": "Bea",
                       "latestUpdate": "half done", "projectId": "hiphop", "createdAt": 4})
    assert t.in_charge == ["Bea"]
    assert t.updates == [TaskUpdate("half done", 4)]
    assert t.project_id == "hiphop"


def test_task_doc_shape_round_trip():
    t = Task(id="x", title="T", in_charge=["Ana"], updates=[TaskUpdate("u", 2)], project_id="p", created_at=1)
    doc = t.to_doc()
    assert "id" not in doc
    assert Task.from_doc({**doc, "id": "x"}) == t


def test_preset_people_string():
    assert normalize_preset_doc({"name": "x", "people": "Ana"})["people"] == ["Ana"]
    assert PeoplePreset.from_doc({"id": "1", "name": "Crew", "people": ["Ana", "Bea"]}).people == ["Ana", "Bea"]


def test_budget_item_from_sparse_doc():
    item = BudgetItem.from_doc({"id": "b1", "name": "Glue", "payers": [{"name": "Ana", "amountToPay": 5}]})
    assert (item.quantity, item.type, item.total) == (1, "prop", 0.0)
    assert item.payers[0].status == "due"
    assert item.payers[0].payment_type == "gcash"
    assert item.payers[0].status_override is False


def test_legacy_payer_status_that_disagrees_with_amounts_reads_as_hand_set():
    hand_set = normalize_payer_doc({"name": "Ana", "amountToPay": 100, "amountPaid": 0, "status": "paid"})
    derived = normalize_payer_doc({"name": "Bea", "amountToPay": 100, "amountPaid": 40, "status": "delayed"})
    assert hand_set["statusOverride"] is True
    assert derived["statusOverride"] is False
    zero_share = normalize_payer_doc({"name": "Cy", "amountToPay": 0, "amountPaid": 0, "status": "due"})
    assert zero_share["statusOverride"] is False
    # an explicit flag is kept as stored
    assert normalize_payer_doc({"name": "C", "status": "paid", "statusOverride": False})["statusOverride"] is False


@pytest.mark.parametrize("raw,expected", [(2.5, 2), (0.5, 1), (-3, 1), ("4", 4), (None, 1), ("lots", 1)])
def test_budget_quantity_is_a_whole_number_of_at_least_one(raw, expected):
    assert normalize_budget_doc({"name": "x", "quantity": raw})["quantity"] == expected
    assert BudgetItem.from_doc({"id": "b", "name": "x", "quantity": raw}).quantity == expected


def test_note_updated_at_defaults_to_created():
    n = Note.from_doc({"id": "n", "title": "x", "createdAt": 9})
    assert n.updated_at == 9
