"""
Ledger transaction id generation.

Ids combine a type prefix, the ids of the parties involved, a nanosecond
timestamp and a random suffix, so two entries created within the same
clock tick still differ.
"""

import secrets
import time


def make_transaction_id(prefix: str, *parts: int | str) -> str:
    """
    Build a unique ledger transaction id.

    Args:
        prefix: Entry kind, e.g. "DAILY" or "REFCOMM"
        *parts: User and plan ids identifying the entry

    Returns:
        Id such as "DAILY_12_3_1760832000000000000_9F1C2A"
    """
    segments = [prefix, *(str(part) for part in parts)]
    segments.append(str(time.time_ns()))
    segments.append(secrets.token_hex(3).upper())
    return "_".join(segments)
