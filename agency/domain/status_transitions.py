from __future__ import annotations

from dataclasses import dataclass

from agency.errors import InvalidTransitionError


@dataclass(frozen=True, slots=True)
class StatusMachine:
    """Allowed status changes for a record type.

    Statuses missing from ``transitions`` (or mapped to an empty set) are
    terminal. Re-applying the current status is not a transition.
    """

    entity: str
    transitions: dict[str, frozenset[str]]

    @property
    def statuses(self) -> frozenset[str]:
        found = set(self.transitions)
        for targets in self.transitions.values():
            found |= targets
        return frozenset(found)

    def can_transition(self, current: str, new: str) -> bool:
        return new in self.transitions.get(current, frozenset())

    def ensure_transition(self, current: str, new: str) -> None:
        if new not in self.statuses:
            raise InvalidTransitionError(f"Unknown {self.entity} status '{new}'")
        if not self.can_transition(current, new):
            raise InvalidTransitionError(
                f"Cannot change {self.entity} status from '{current}' to '{new}'"
            )


CHEQUE_STATUS = StatusMachine(
    entity="cheque",
    transitions={
        "pending": frozenset({"cleared", "returned", "cancelled"}),
        "cleared": frozenset(),
        "returned": frozenset(),
        "cancelled": frozenset(),
    },
)

AGENT_TRANSACTION_STATUS = StatusMachine(
    entity="agent transaction",
    transitions={
        "pending": frozenset({"settled", "cancelled"}),
        "settled": frozenset(),
        "cancelled": frozenset(),
    },
)
