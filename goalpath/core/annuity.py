"""Closed-form annuity helpers shared by every contribution calculation."""

from __future__ import annotations


def future_value_factor(rate: float, periods: float) -> float:
    """Growth of one unit after ``periods`` compounding steps at ``rate``."""
    return (1.0 + rate) ** periods


def annuity_factor(rate: float, periods: float) -> float:
    """
    Future value of a stream of unit payments made at the end of each period.

    Degenerates to ``periods`` for a zero rate and to ``0`` when there are no
    periods left.
    """
    if periods <= 0:
        return 0.0
    if rate == 0:
        return float(periods)
    return (future_value_factor(rate, periods) - 1.0) / rate


def required_payment(remaining_amount: float, rate: float, periods: float) -> float:
    """Constant per-period payment that accumulates ``remaining_amount``."""
    if periods <= 0:
        return 0.0
    if rate == 0:
        return remaining_amount / periods
    factor = annuity_factor(rate, periods)
    if factor == 0:
        return 0.0
    return remaining_amount / factor


def required_monthly_contribution(
    current_value: float,
    goal: float,
    annual_rate: float,
    months_remaining: float,
) -> float:
    """Monthly payment that grows ``current_value`` into ``goal`` in time.

    The result is not clamped; a negative value means the goal is reached
    without further contributions.
    """
    monthly_rate = annual_rate / 12
    remaining = goal - current_value * future_value_factor(monthly_rate, max(months_remaining, 0))
    return required_payment(remaining, monthly_rate, months_remaining)


__all__ = [
    "future_value_factor",
    "annuity_factor",
    "required_payment",
    "required_monthly_contribution",
]
