"""
Business constants.

Single source of truth for the fixed rules of the club that are not
meant to be tuned through the environment.
"""

import string
from decimal import Decimal

# Referral codes: 8 characters, upper-case letters and digits
REFERRAL_CODE_LENGTH = 8
REFERRAL_CODE_ALPHABET = string.ascii_uppercase + string.digits

# Commission fan-out walks at most three ancestors
REFERRAL_DEPTH = 3

# Default commission percentages per referral level
DEFAULT_REFERRAL_RATES: dict[int, Decimal] = {
    1: Decimal("15"),
    2: Decimal("8"),
    3: Decimal("5"),
}

# Commissions are paid in whole currency units
COMMISSION_QUANTUM = Decimal("1")

# Ledger transaction id prefixes
TX_PREFIX_DAILY = "DAILY"
TX_PREFIX_COMMISSION = "REFCOMM"
TX_PREFIX_INVEST = "INVEST"
TX_PREFIX_DEPOSIT = "DEPOSIT"
TX_PREFIX_WITHDRAW = "WITHDRAW"

# User roles
ROLE_USER = "user"
ROLE_SUPERADMIN = "superadmin"
