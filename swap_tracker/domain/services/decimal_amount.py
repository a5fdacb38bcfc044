from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, getcontext


getcontext().prec = 50


def quantize_places(value: Decimal, places: int) -> str:
    exponent = Decimal(1).scaleb(-places)
    return format(value.quantize(exponent, rounding=ROUND_HALF_UP), "f")


@dataclass(frozen=True)
class DecimalAmount:
    """An on-chain integer amount together with its mint's decimal count."""

    raw: int
    decimals: int

    @classmethod
    def one(cls, decimals: int) -> "DecimalAmount":
        return cls(raw=10**decimals, decimals=decimals)

    def to_decimal(self) -> Decimal:
        return Decimal(self.raw).scaleb(-self.decimals)

    def to_fixed(self, places: int) -> str:
        return quantize_places(self.to_decimal(), places)
