from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date

from agency.errors import DomainValidationError


def add_years(start: date, years: int) -> date:
    """Shift a date by whole years; Feb 29 falls back to Feb 28 in non-leap years."""
    year = start.year + years
    day = min(start.day, calendar.monthrange(year, start.month)[1])
    return start.replace(year=year, day=day)


@dataclass(frozen=True, slots=True)
class CoveragePeriod:
    """Start/end dates of a policy. ``end_date`` is inclusive."""

    start_date: date
    end_date: date

    @classmethod
    def resolve(
        cls,
        *,
        today: date,
        term_years: int,
        previous_end: date | None = None,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> "CoveragePeriod":
        """Pick the coverage period for a new policy.

        Explicit dates win. Otherwise a new policy starts where the vehicle's
        previous policy ended (or today if there is none) and runs for
        ``term_years``.
        """
        if start_date is None:
            if end_date is not None:
                raise DomainValidationError(
                    "start_date must be provided when end_date is provided"
                )
            start_date = previous_end if previous_end is not None else today
        if end_date is None:
            end_date = add_years(start_date, term_years)
        if end_date < start_date:
            raise DomainValidationError(
                f"End date ({end_date}) cannot precede start date ({start_date})"
            )
        return cls(start_date=start_date, end_date=end_date)
