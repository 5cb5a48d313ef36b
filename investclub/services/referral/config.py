"""
Referral system configuration.

Commission rates travel as an explicit value object instead of module
state, so a run always uses one consistent set of rates.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from investclub.config.business_constants import (
    COMMISSION_QUANTUM,
    DEFAULT_REFERRAL_RATES,
    REFERRAL_DEPTH,
)
from investclub.config.settings import Settings


@dataclass(frozen=True)
class CommissionRates:
    """Commission percent paid to each referral level."""

    level_1: Decimal = DEFAULT_REFERRAL_RATES[1]
    level_2: Decimal = DEFAULT_REFERRAL_RATES[2]
    level_3: Decimal = DEFAULT_REFERRAL_RATES[3]

    @classmethod
    def from_settings(cls, settings: Settings) -> "CommissionRates":
        """Build rates from application settings."""
        rates = settings.referral_rates
        return cls(level_1=rates[1], level_2=rates[2], level_3=rates[3])

    def for_level(self, level: int) -> Decimal:
        """
        Get the percent for a referral level.

        Args:
            level: Referral level (1-3)

        Returns:
            Percent, zero for levels outside the program
        """
        return {
            1: self.level_1,
            2: self.level_2,
            3: self.level_3,
        }.get(level, Decimal("0"))

    def as_dict(self) -> dict[int, Decimal]:
        """Rates keyed by level."""
        return {level: self.for_level(level) for level in range(1, REFERRAL_DEPTH + 1)}


def calculate_commission(amount: Decimal, rate_percent: Decimal) -> Decimal:
    """
    Commission on a payout, rounded half-up to whole currency units.

    Args:
        amount: Payout the commission is taken from
        rate_percent: Commission percent

    Returns:
        Whole-unit commission
    """
    raw = Decimal(amount) * Decimal(rate_percent) / Decimal("100")
    return raw.quantize(COMMISSION_QUANTUM, rounding=ROUND_HALF_UP)
