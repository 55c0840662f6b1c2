"""Group alert registrations so each (base, target set) pair is fetched once."""
from __future__ import annotations

import logging
from typing import Iterable, Iterator, Mapping, Sequence

from employee_directory.models.alerts import RecipientGroup, Registration


logger = logging.getLogger(__name__)

GroupedRegistrations = dict[str, dict[frozenset[str], list[Registration]]]


def group_registrations(registrations: Iterable[Registration]) -> GroupedRegistrations:
    """
    Two-level grouping: by base currency, then by target currency set.

    Target sets compare by value, so ``{"INR", "GBP"}`` and ``{"GBP", "INR"}``
    share a group. Input order is preserved both for the groups (first seen)
    and for the registrations inside each group.

    Args:
        registrations: Snapshot of every stored registration

    Returns:
        Mapping base -> (target set -> registrations); empty for empty input
    """
    grouped: GroupedRegistrations = {}
    for registration in registrations:
        by_target = grouped.setdefault(registration.base, {})
        by_target.setdefault(frozenset(registration.target), []).append(registration)

    logger.debug(
        "Grouped registrations into %d base(s), %d group(s)",
        len(grouped),
        sum(len(by_target) for by_target in grouped.values()),
    )
    return grouped


def iter_recipient_groups(
    grouped: Mapping[str, Mapping[frozenset[str], Sequence[Registration]]],
) -> Iterator[RecipientGroup]:
    """Flatten a grouped mapping into RecipientGroup values."""
    for base, by_target in grouped.items():
        for targets, members in by_target.items():
            yield RecipientGroup(base=base, targets=targets, registrations=list(members))
