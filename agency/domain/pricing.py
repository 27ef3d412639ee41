"""Pricing rules as a tagged union keyed by pricing type.

- comprehensive / third_party: :class:`MatrixRule`, a table of
  (vehicle type, driver age group, offer amount range) -> price
- accident_fee_waiver: :class:`FixedAmountRule`
- compulsory / road_service: :class:`NoRule` (manual entry, or the separate
  road-service table)

Matrix rows are evaluated in stored order and the first matching row wins,
even when a later row has a narrower range.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Union

from agency.errors import (
    DomainValidationError,
    NoMatchingRuleError,
    PricingTypeNotApplicableError,
)

COMPULSORY = "compulsory"
THIRD_PARTY = "third_party"
COMPREHENSIVE = "comprehensive"
ROAD_SERVICE = "road_service"
ACCIDENT_FEE_WAIVER = "accident_fee_waiver"

PRICING_TYPES = (COMPULSORY, THIRD_PARTY, COMPREHENSIVE, ROAD_SERVICE, ACCIDENT_FEE_WAIVER)
MATRIX_PRICING_TYPES = frozenset({THIRD_PARTY, COMPREHENSIVE})
FIXED_AMOUNT_PRICING_TYPES = frozenset({ACCIDENT_FEE_WAIVER})

NOT_APPLICABLE_MESSAGES = {
    COMPULSORY: "Compulsory insurance has no pricing rules - value should be entered manually",
    ROAD_SERVICE: "Road services pricing should be fetched from the company's road services",
}

DEFAULT_ROAD_SERVICE_CUTOFF_YEAR = 2007


@dataclass(frozen=True, slots=True)
class MatrixRow:
    vehicle_type: str
    driver_age_group: str
    offer_amount_min: int
    offer_amount_max: int | None
    price: int

    def matches(self, vehicle_type: str, driver_age_group: str, offer_amount: int) -> bool:
        return (
            self.vehicle_type == vehicle_type
            and self.driver_age_group == driver_age_group
            and offer_amount >= self.offer_amount_min
            and (self.offer_amount_max is None or offer_amount <= self.offer_amount_max)
        )


@dataclass(frozen=True, slots=True)
class MatrixRule:
    rows: tuple[MatrixRow, ...]

    def to_payload(self) -> dict[str, Any]:
        return {"matrix": [asdict(row) for row in self.rows]}


@dataclass(frozen=True, slots=True)
class FixedAmountRule:
    amount: int

    def to_payload(self) -> dict[str, Any]:
        return {"fixed_amount": self.amount}


@dataclass(frozen=True, slots=True)
class NoRule:
    pricing_type: str

    def to_payload(self) -> dict[str, Any]:
        return {}


ParsedRule = Union[MatrixRule, FixedAmountRule, NoRule]


@dataclass(frozen=True, slots=True)
class QuoteParams:
    vehicle_type: str | None = None
    driver_age_group: str | None = None
    offer_amount: int | None = None


@dataclass(frozen=True, slots=True)
class Quote:
    price: int
    matched_row: MatrixRow | None = None


def _require_int(value: Any, field: str, *, allow_none: bool = False) -> int | None:
    if value is None and allow_none:
        return None
    # bool is an int subclass; a flag is never a price.
    if isinstance(value, bool) or not isinstance(value, int):
        raise DomainValidationError(f"'{field}' must be an integer")
    if value < 0:
        raise DomainValidationError(f"'{field}' must be >= 0")
    return value


def _parse_matrix_row(index: int, raw: Any) -> MatrixRow:
    if not isinstance(raw, dict):
        raise DomainValidationError(f"Matrix entry {index} must be an object")
    for field in ("vehicle_type", "driver_age_group"):
        if not isinstance(raw.get(field), str) or not raw[field].strip():
            raise DomainValidationError(
                "Each matrix entry must have: vehicle_type, driver_age_group, "
                "offer_amount_min, price"
            )
    if "offer_amount_min" not in raw or "price" not in raw:
        raise DomainValidationError(
            "Each matrix entry must have: vehicle_type, driver_age_group, "
            "offer_amount_min, price"
        )

    minimum = _require_int(raw["offer_amount_min"], "offer_amount_min")
    maximum = _require_int(raw.get("offer_amount_max"), "offer_amount_max", allow_none=True)
    if maximum is not None and maximum < minimum:
        raise DomainValidationError(
            f"Matrix entry {index}: offer_amount_max ({maximum}) is below "
            f"offer_amount_min ({minimum})"
        )
    return MatrixRow(
        vehicle_type=raw["vehicle_type"].strip(),
        driver_age_group=raw["driver_age_group"].strip(),
        offer_amount_min=minimum,
        offer_amount_max=maximum,
        price=_require_int(raw["price"], "price"),
    )


def parse_rules(pricing_type: str, payload: dict[str, Any] | None) -> ParsedRule:
    """Turn a stored or submitted rules payload into its typed variant."""
    if pricing_type not in PRICING_TYPES:
        raise DomainValidationError(f"Unknown pricing type '{pricing_type}'")

    payload = payload or {}
    if pricing_type in MATRIX_PRICING_TYPES:
        matrix = payload.get("matrix")
        if not isinstance(matrix, list) or not matrix:
            raise DomainValidationError(
                "Matrix-based pricing types require a non-empty rules.matrix array"
            )
        return MatrixRule(rows=tuple(_parse_matrix_row(i, raw) for i, raw in enumerate(matrix)))

    if pricing_type in FIXED_AMOUNT_PRICING_TYPES:
        if "fixed_amount" not in payload:
            raise DomainValidationError(
                "Accident fee waiver requires rules.fixed_amount (number)"
            )
        return FixedAmountRule(amount=_require_int(payload["fixed_amount"], "fixed_amount"))

    return NoRule(pricing_type=pricing_type)


def calculate_price(rule: ParsedRule, params: QuoteParams) -> Quote:
    """Quote a price from a pricing rule. Pure and deterministic."""
    if isinstance(rule, NoRule):
        raise PricingTypeNotApplicableError(NOT_APPLICABLE_MESSAGES[rule.pricing_type])

    if isinstance(rule, FixedAmountRule):
        return Quote(price=rule.amount)

    if params.vehicle_type is None or params.driver_age_group is None or params.offer_amount is None:
        raise DomainValidationError(
            "vehicle_type, driver_age_group and offer_amount are required for matrix pricing"
        )
    for row in rule.rows:
        if row.matches(params.vehicle_type, params.driver_age_group, params.offer_amount):
            return Quote(price=row.price, matched_row=row)
    raise NoMatchingRuleError("No matching pricing rule found for the provided parameters")


def road_service_price(
    *, normal_price: int, old_car_price: int, cutoff_year: int, vehicle_year: int
) -> tuple[int, bool]:
    """Return ``(price, is_old_car)``. Vehicles built before the cutoff year are old."""
    is_old_car = vehicle_year < cutoff_year
    return (old_car_price if is_old_car else normal_price), is_old_car
