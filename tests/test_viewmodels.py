# tests/test_viewmodels.py
from __future__ import annotations

import logging
from typing import List

import pytest

from zaraboard.errors import (
    BudgetValidationError, LastAssigneeError, NoteValidationError, StoreError, TaskValidationError
)
from zaraboard.models.entities import PeoplePreset
from zaraboard.repositories.document_store import DocumentStore
from zaraboard.viewmodels.budget_viewmodel import BudgetViewModel
from zaraboard.viewmodels.notes_viewmodel import NotesViewModel
from zaraboard.viewmodels.presets_viewmodel import PresetsViewModel
from zaraboard.viewmodels.tasks_viewmodel import TasksViewModel


# --- A store whose every call fails -----------------------------------------

class _BrokenStore(DocumentStore):
    def __init__(self):
        self.calls: List[str] = []

    def subscribe(self, collection, on_snapshot, on_error=None):
        self.calls.append("subscribe")
        on_error(StoreError("offline"))
        return lambda: None

    def create(self, collection, record):
        self.calls.append("create")
        raise StoreError("offline")

    def update(self, collection, doc_id, partial):
        self.calls.append("update")
        raise StoreError("offline")

    def delete(self, collection, doc_id):
        self.calls.append("delete")
        raise StoreError("offline")


# --- Fixtures ---------------------------------------------------------------

@pytest.fixture()
def tasks_vm(qapp, store):
    vm = TasksViewModel(store)
    vm.start()
    yield vm
    vm.stop()


@pytest.fixture()
def budget_vm(qapp, store):
    vm = BudgetViewModel(store)
    vm.start()
    yield vm
    vm.stop()


@pytest.fixture()
def notes_vm(qapp, store):
    vm = NotesViewModel(store)
    vm.start()
    yield vm
    vm.stop()


# --- Collection behaviour ---------------------------------------------------

def test_start_loads_and_emits(qapp, store):
    store.create("tasks", {"title": "Seeded", "inCharge": ["Ana"], "projectId": "lantern", "createdAt": 1})
    vm = TasksViewModel(store)
    seen: List[list] = []
    loading: List[bool] = []
    vm.itemsReloaded.connect(seen.append)
    vm.loadingChanged.connect(loading.append)
    assert vm.loading is True
    vm.start()
    assert vm.loading is False
    assert loading == [False]
    assert [t.title for t in seen[-1]] == ["Seeded"]
    vm.stop()


def test_malformed_documents_are_skipped(qapp, store, caplog):
    store.create("tasks", {"title": "ok", "inCharge": ["Ana"], "projectId": "p"})
    store.create("tasks", {"title": "bad", "createdAt": "yesterday"})
    vm = TasksViewModel(store)
    with caplog.at_level(logging.WARNING):
        vm.start()
    assert [t.title for t in vm.items] == ["ok"]
    assert "Skipping malformed" in caplog.text


def test_store_failures_are_logged_not_raised(qapp, caplog):
    broken = _BrokenStore()
    vm = TasksViewModel(broken)
    with caplog.at_level(logging.ERROR):
        vm.start()
        assert vm.add_task(title="X", in_charge=["Ana"], project_id="p") is None
        vm.change_status("t1", "Completed")
        vm.delete_task("t1")
    assert vm.loading is False
    assert vm.items == []
    assert broken.calls == ["subscribe", "create", "update", "delete"]
    assert "create on tasks failed" in caplog.text
    assert "delete on tasks failed" in caplog.text


# --- Tasks ------------------------------------------------------------------

def test_add_task_and_history(tasks_vm):
    tid = tasks_vm.add_task(title="Buy paper", in_charge=["Ana"], project_id="lantern", first_update="Called shop")
    task = tasks_vm.get(tid)
    assert [u.text for u in task.updates] == ["Called shop"]

    tasks_vm.add_update(tid, "Bought 20 sheets")
    assert [u.text for u in tasks_vm.get(tid).updates] == ["Bought 20 sheets", "Called shop"]

    tasks_vm.change_status(tid, "In Progress")
    assert tasks_vm.get(tid).status == "In Progress"


def test_add_task_validation_writes_nothing(tasks_vm, store):
    with pytest.raises(TaskValidationError):
        tasks_vm.add_task(title="  ", in_charge=["Ana"], project_id="lantern")
    assert store.list_documents("tasks") == []


def test_toggle_assignee_keeps_someone_in_charge(tasks_vm):
    tid = tasks_vm.add_task(title="T", in_charge=["Ana"], project_id="lantern")
    tasks_vm.toggle_assignee(tid, "Bea")
    assert tasks_vm.get(tid).in_charge == ["Ana", "Bea"]
    tasks_vm.toggle_assignee(tid, "Ana")
    assert tasks_vm.get(tid).in_charge == ["Bea"]
    with pytest.raises(LastAssigneeError):
        tasks_vm.toggle_assignee(tid, "Bea")
    assert tasks_vm.get(tid).in_charge == ["Bea"]


def test_visible_tasks_are_per_project(tasks_vm):
    tasks_vm.add_task(title="L", in_charge=["Ana"], project_id="lantern")
    tasks_vm.add_task(title="H", in_charge=["Bea"], project_id="hiphop")
    assert [t.title for t in tasks_vm.visible_tasks("lantern")] == ["L"]
    assert [t.title for t in tasks_vm.visible_tasks("hiphop", people=["Ana"])] == []


def test_legacy_task_documents_render(tasks_vm, store):
    store.create("tasks", {"title": "Old", "inCharge": "Ana", "latestUpdate": "legacy note",
                           "projectId": "lantern", "createdAt": 3})
    task = tasks_vm.visible_tasks("lantern")[0]
    assert task.in_charge == ["Ana"]
    assert [u.text for u in task.updates] == ["legacy note"]

    # the first edit writes the canonical shape back
    tasks_vm.add_update(task.id, "new note")
    doc = store.get("tasks", task.id)
    assert [u["text"] for u in doc["updates"]] == ["new note", "legacy note"]


# --- Budget -----------------------------------------------------------------

def _scenario_item(budget_vm) -> str:
    return budget_vm.add_item(
        name="Big lantern", project_id="lantern", cost=100, quantity=2, other_fee=50,
        has_labor_fee=True, labor_fee=75,
    )


def test_budget_end_to_end(budget_vm, store):
    iid = _scenario_item(budget_vm)
    assert budget_vm.get(iid).total == 325

    budget_vm.select_all_payers(iid, ["Ana", "Bea", "Carlo"])
    payers = budget_vm.get(iid).payers
    assert [p.amount_to_pay for p in payers] == pytest.approx([108.33] * 3, abs=0.005)

    budget_vm.record_payment(iid, "Ana", payers[0].amount_to_pay)
    assert budget_vm.get(iid).payers[0].status == "paid"

    budget_vm.remove_payer(iid, "Ana")
    payers = budget_vm.get(iid).payers
    assert [p.name for p in payers] == ["Bea", "Carlo"]
    assert [p.amount_to_pay for p in payers] == [162.5, 162.5]
    assert store.get("budget_items", iid)["payers"][0]["amountToPay"] == 162.5


def test_update_item_recomputes_total_in_same_write(budget_vm, store):
    iid = budget_vm.add_item(name="Sticks", project_id="lantern", cost=10, payer_names=["Ana", "Bea"])
    budget_vm.update_item(iid, quantity=5)
    doc = store.get("budget_items", iid)
    assert doc["quantity"] == 5
    assert doc["total"] == 50
    assert [p["amountToPay"] for p in doc["payers"]] == [25, 25]


def test_update_item_rejects_unknown_fields(budget_vm):
    iid = budget_vm.add_item(name="Sticks", project_id="lantern")
    with pytest.raises(BudgetValidationError):
        budget_vm.update_item(iid, colour="red")


def test_update_item_rejects_a_hand_written_total(budget_vm, store):
    iid = budget_vm.add_item(name="Sticks", project_id="lantern", cost=100, quantity=2)
    with pytest.raises(BudgetValidationError):
        budget_vm.update_item(iid, total=999.0)
    assert store.get("budget_items", iid)["total"] == 200


def test_rename_keeps_hand_set_status_on_old_documents(budget_vm, store):
    iid = store.create("budget_items", {
        "name": "Banner", "type": "prop", "cost": 200, "quantity": 1, "otherFee": 0,
        "hasLaborFee": False, "laborFee": 0, "total": 200, "projectId": "lantern", "createdAt": 1,
        "payers": [
            {"name": "Ana", "amountToPay": 100, "amountPaid": 0, "status": "paid"},
            {"name": "Bea", "amountToPay": 100, "amountPaid": 0, "status": "due"},
        ],
    })
    # the edit dialog always sends every field
    budget_vm.update_item(
        iid, name="Big banner", type="prop", cost=200.0, quantity=1, other_fee=0.0,
        has_labor_fee=False, labor_fee=0.0, link="",
    )
    doc = store.get("budget_items", iid)
    assert doc["name"] == "Big banner"
    assert [p["status"] for p in doc["payers"]] == ["paid", "due"]

    # a real change to the inputs re-splits but still leaves the hand-set status
    budget_vm.update_item(iid, quantity=2)
    payers = {p.name: p for p in budget_vm.get(iid).payers}
    assert payers["Ana"].amount_to_pay == pytest.approx(200.0)
    assert payers["Ana"].status == "paid"
    assert payers["Bea"].status == "due"


def test_override_then_resplit_keeps_manual_status(budget_vm):
    iid = budget_vm.add_item(name="Paint", project_id="lantern", cost=90, payer_names=["Ana", "Bea"])
    budget_vm.override_status(iid, "Bea", "paid")
    budget_vm.add_payer(iid, "Carlo")
    payers = {p.name: p for p in budget_vm.get(iid).payers}
    assert payers["Bea"].status == "paid"
    assert payers["Bea"].status_override is True
    assert payers["Carlo"].amount_to_pay == pytest.approx(30.0)


def test_payment_type_and_presets(budget_vm):
    iid = budget_vm.add_item(name="Cloth", project_id="lantern", cost=60)
    budget_vm.load_preset(iid, PeoplePreset(id="x", name="Crew", people=["Dani", "Eli"]))
    budget_vm.set_payment_type(iid, "Eli", "cash")
    payers = budget_vm.get(iid).payers
    assert [(p.name, p.payment_type) for p in payers] == [("Dani", "gcash"), ("Eli", "cash")]
    budget_vm.clear_payers(iid)
    assert budget_vm.get(iid).payers == []


def test_summary_and_person_rows(budget_vm):
    a = budget_vm.add_item(name="A", project_id="lantern", cost=100, payer_names=["Ana", "Bea"])
    budget_vm.add_item(name="B", project_id="hiphop", cost=999, payer_names=["Ana"])
    budget_vm.record_payment(a, "Ana", 50)
    s = budget_vm.summary("lantern")
    assert (s.total_budget, s.collected, s.remaining, s.item_count) == (100, 50, 50, 1)
    rows = budget_vm.person_rows("lantern", ["Ana"])
    assert [(r.item_name, r.payer.status) for r in rows] == [("A", "paid")]
    assert budget_vm.people("lantern") == ["Ana", "Bea"]


# --- Notes / presets --------------------------------------------------------

def test_notes_flow(notes_vm):
    nid = notes_vm.add_note(title="Ideas", content="paper", project_id="lantern")
    created = notes_vm.get(nid)
    notes_vm.update_note(nid, title="  ")
    assert notes_vm.get(nid).title == "Untitled"
    assert notes_vm.get(nid).updated_at >= created.updated_at

    notes_vm.toggle_pin(nid)
    assert notes_vm.get(nid).is_pinned is True
    notes_vm.change_color(nid, "yellow")
    assert notes_vm.get(nid).color == "yellow"
    assert [n.id for n in notes_vm.visible_notes("lantern", "PAP")] == [nid]

    notes_vm.delete_note(nid)
    assert notes_vm.items == []


def test_update_note_validation(notes_vm):
    nid = notes_vm.add_note(title="x", content="", project_id="p")
    with pytest.raises(NoteValidationError):
        notes_vm.change_color(nid, "orange")
    with pytest.raises(NoteValidationError):
        notes_vm.update_note(nid, projectId="other")


def test_presets_sorted_and_shared(qapp, store):
    vm = PresetsViewModel(store)
    vm.start()
    vm.add_preset("zeta", ["Ana"])
    vm.add_preset("Alpha", ["Bea", "Carlo"])
    assert [p.name for p in vm.items] == ["Alpha", "zeta"]
    vm.delete_preset(vm.items[0].id)
    assert [p.name for p in vm.items] == ["zeta"]
    vm.stop()


def test_two_viewmodels_share_one_store(qapp, store):
    first, second = BudgetViewModel(store), BudgetViewModel(store)
    first.start()
    second.start()
    iid = first.add_item(name="Shared", project_id="lantern", cost=10)
    assert second.get(iid).name == "Shared"
    first.stop()
    second.stop()
