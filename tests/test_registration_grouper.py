"""Unit tests for registration grouping."""
from __future__ import annotations

import pytest

from employee_directory.models.alerts import EmployeeContact, Registration
from employee_directory.services.registration_grouper import (
    group_registrations,
    iter_recipient_groups,
)


def _employee(key: str) -> EmployeeContact:
    return EmployeeContact(id=ord(key), email=f"{key.lower()}@example.com", name=key)


def _registration(base: str, targets: list[str], employee: str, reg_id: int | None = None) -> Registration:
    return Registration(base=base, target=frozenset(targets), employee=_employee(employee), id=reg_id)


def test_scenario_groups_by_base_then_exact_target_set():
    a = _registration("USD", ["INR"], "A", 1)
    b = _registration("USD", ["INR"], "B", 2)
    c = _registration("USD", ["GBP"], "C", 3)

    grouped = group_registrations([a, b, c])

    assert list(grouped) == ["USD"]
    assert grouped["USD"] == {
        frozenset({"INR"}): [a, b],
        frozenset({"GBP"}): [c],
    }


def test_target_sets_compare_independent_of_order():
    first = Registration(base="EUR", target=["INR", "GBP", "JPY"], employee=_employee("A"))
    second = Registration(base="EUR", target=["JPY", "INR", "GBP"], employee=_employee("B"))

    grouped = group_registrations([first, second])

    assert grouped["EUR"] == {frozenset({"GBP", "INR", "JPY"}): [first, second]}


def test_differing_target_element_or_base_splits_groups():
    regs = [
        _registration("EUR", ["INR", "GBP"], "A"),
        _registration("EUR", ["INR", "JPY"], "B"),
        _registration("EUR", ["INR"], "C"),
        _registration("USD", ["INR", "GBP"], "D"),
    ]

    groups = list(iter_recipient_groups(group_registrations(regs)))

    assert len(groups) == 4
    assert all(len(group.registrations) == 1 for group in groups)


def test_grouping_partitions_without_overlap_or_omission():
    regs = [
        _registration(base, targets, emp, idx)
        for idx, (base, targets, emp) in enumerate(
            [
                ("USD", ["INR"], "A"),
                ("USD", ["GBP", "INR"], "B"),
                ("EUR", ["INR"], "C"),
                ("USD", ["INR"], "D"),
                ("EUR", ["INR"], "E"),
                ("USD", ["INR", "GBP"], "F"),
                ("GBP", ["JPY"], "G"),
            ]
        )
    ]

    groups = list(iter_recipient_groups(group_registrations(regs)))
    flattened = [reg for group in groups for reg in group.registrations]

    assert sorted(r.id for r in flattened) == sorted(r.id for r in regs)
    assert len(flattened) == len(set(r.id for r in flattened))
    for group in groups:
        assert all(r.base == group.base and r.target == group.targets for r in group.registrations)


def test_duplicate_registration_stays_duplicated():
    first = _registration("USD", ["INR"], "A", 1)
    again = _registration("USD", ["INR"], "A", 2)

    (group,) = iter_recipient_groups(group_registrations([first, again]))

    assert group.recipients == ["a@example.com", "a@example.com"]


def test_empty_registrations_give_empty_mapping():
    assert group_registrations([]) == {}
    assert list(iter_recipient_groups({})) == []


@pytest.mark.parametrize(
    "base, targets",
    [
        ("usd", ["INR"]),
        ("US", ["INR"]),
        ("USD", []),
        ("USD", ["inr"]),
        ("USD", ["INRR"]),
    ],
)
def test_registration_rejects_invalid_codes(base, targets):
    with pytest.raises(ValueError):
        Registration(base=base, target=targets, employee=_employee("A"))
