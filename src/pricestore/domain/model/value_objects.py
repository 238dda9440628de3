"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation, localcontext

from pricestore.domain.exceptions import PriceParseError


@dataclass(frozen=True)
class Money:
    """Monetary amount in the store's single implied currency.

    Uses Decimal so that prices survive parsing and persistence without
    floating-point drift. Negative amounts are representable; rejecting
    them is the caller's decision.
    """

    amount: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise TypeError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if not self.amount.is_finite():
            raise PriceParseError(str(self.amount))

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    # --- Display --------------------------------------------------------------

    def plain(self) -> str:
        """Two-decimal rendering without the currency sign, e.g. ``50.00``."""
        with localcontext() as ctx:
            ctx.rounding = ROUND_HALF_EVEN
            return f"{self.amount:.2f}"

    def __str__(self) -> str:
        return f"${self.plain()}"

    # --- Factories ------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> Money:
        """Read a price from request text such as ``"5"`` or ``"12.50"``."""
        if text is None or not text.strip():
            raise PriceParseError(text or "")
        try:
            amount = Decimal(text.strip())
        except InvalidOperation as exc:
            raise PriceParseError(text) from exc
        if not amount.is_finite():
            raise PriceParseError(text)
        return cls(amount)

    @classmethod
    def of(cls, amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        if isinstance(amount, Decimal):
            return cls(amount)
        return cls.parse(str(amount))
