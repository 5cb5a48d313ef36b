"""Investment club back end: referrals, daily returns and the money ledger."""

__version__ = "1.0.0"
