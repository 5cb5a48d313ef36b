"""
Standard type definitions for database models.

Provides consistent types for monetary and percentage fields across all models.
"""

from sqlalchemy import DECIMAL

# Standard money type for amounts, balances, payouts and commissions
# Precision: 18 digits total, 8 after decimal point
# Range: up to 9,999,999,999.99999999
MoneyType = DECIMAL(18, 8)

# Percentage type for plan ROI
# Precision: 7 digits total, 2 after decimal point
# Range: 0.00 to 99999.99
PercentType = DECIMAL(7, 2)
