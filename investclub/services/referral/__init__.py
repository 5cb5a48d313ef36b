"""
Referral services.

Graph linking at registration, commission fan-out on payouts and team
reports.
"""

from investclub.services.referral.code_generator import (
    generate_referral_code,
    generate_unique_referral_code,
    normalize_referral_code,
)
from investclub.services.referral.commission_fanout import (
    CommissionCredit,
    CommissionFanout,
)
from investclub.services.referral.config import CommissionRates, calculate_commission
from investclub.services.referral.graph_builder import ReferralGraphBuilder, ReferralLink
from investclub.services.referral.team_report import (
    TeamLevel,
    TeamReport,
    TeamReportService,
)

__all__ = [
    "CommissionCredit",
    "CommissionFanout",
    "CommissionRates",
    "ReferralGraphBuilder",
    "ReferralLink",
    "TeamLevel",
    "TeamReport",
    "TeamReportService",
    "calculate_commission",
    "generate_referral_code",
    "generate_unique_referral_code",
    "normalize_referral_code",
]
