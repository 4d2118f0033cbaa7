"""Shared dependencies for API routes."""

from services.summary import InFlightGuard, get_guard
from services.xp_ledger import XPLedger, ledger


def get_ledger() -> XPLedger:
    return ledger


def get_summary_guard() -> InFlightGuard:
    return get_guard()
