from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any

from arqueo_app.formatting import format_currency, format_plain, to_decimal

DENOMINATIONS: tuple[int, ...] = (20000, 10000, 2000, 1000)
REST_KEY = "rest"


class VarianceTag(str, Enum):
    SURPLUS = "surplus"
    SHORTFALL = "shortfall"
    EXACT = "exact"

    @property
    def css_class(self) -> str:
        return {"surplus": "positive", "shortfall": "negative", "exact": "neutral"}[self.value]


def classify_variance(variance: Decimal) -> VarianceTag:
    if variance > 0:
        return VarianceTag.SURPLUS
    if variance < 0:
        return VarianceTag.SHORTFALL
    return VarianceTag.EXACT


@dataclass(frozen=True)
class Reconciliation:
    counted_total: Decimal
    expected: Decimal
    variance: Decimal
    tag: VarianceTag
    breakdown: str
    subtotals: dict[str, Decimal]

    @property
    def explanation(self) -> str:
        return f"{format_currency(self.counted_total)} - {format_currency(self.expected)} = {format_currency(self.variance)}"

    def render(self) -> dict[str, Any]:
        return {
            "counted_total": format_currency(self.counted_total),
            "expected": format_currency(self.expected),
            "variance": format_currency(self.variance),
            "variance_class": self.tag.css_class,
            "tag": self.tag.value,
            "breakdown": self.breakdown,
            "explanation": self.explanation,
            "subtotals": {key: format_currency(value) for key, value in self.subtotals.items()},
        }


def _zero_counts() -> dict[int, int]:
    return {denomination: 0 for denomination in DENOMINATIONS}


@dataclass
class BillCounter:
    """Denomination counts for the closing cash count.

    Counts are clamped to non-negative values on input; nothing here is
    persisted, the result only feeds the withdrawal step of the close flow.
    """

    expected: Decimal = Decimal("0")
    counts: dict[int, int] = field(default_factory=_zero_counts)
    rest: Decimal = Decimal("0")

    def reset(self, expected: Any = None) -> None:
        if expected is not None:
            self.expected = to_decimal(expected)
        self.counts = _zero_counts()
        self.rest = Decimal("0")

    def set_count(self, denomination: int, value: Any) -> int:
        if denomination not in self.counts:
            raise KeyError(f"Unknown denomination: {denomination}")
        try:
            parsed = int(Decimal(str(value).strip() or "0"))
        except (InvalidOperation, ValueError, OverflowError):
            parsed = 0
        self.counts[denomination] = max(0, parsed)
        return self.counts[denomination]

    def increment(self, denomination: int) -> int:
        return self.set_count(denomination, self.counts[denomination] + 1)

    def decrement(self, denomination: int) -> int:
        return self.set_count(denomination, self.counts[denomination] - 1)

    def set_rest(self, value: Any) -> Decimal:
        try:
            parsed = to_decimal(str(value).strip().replace(",", ".") or "0")
        except InvalidOperation:
            parsed = Decimal("0")
        if not parsed.is_finite():
            parsed = Decimal("0")
        self.rest = max(Decimal("0"), parsed)
        return self.rest

    def recompute(self) -> Reconciliation:
        subtotals: dict[str, Decimal] = {}
        parts: list[str] = []
        total = Decimal("0")
        for denomination in DENOMINATIONS:
            count = self.counts.get(denomination, 0)
            value = Decimal(denomination) * count
            subtotals[str(denomination)] = value
            total += value
            parts.append(f"{format_plain(denomination)} × {count}")
        subtotals[REST_KEY] = self.rest
        if self.rest > 0:
            parts.append(f"Resto {format_plain(self.rest)}")
            total += self.rest
        variance = total - self.expected
        breakdown = " + ".join(parts) + f" = {format_currency(total)}"
        return Reconciliation(
            counted_total=total,
            expected=self.expected,
            variance=variance,
            tag=classify_variance(variance),
            breakdown=breakdown,
            subtotals=subtotals,
        )
