"""Monthly cost normalization."""

from typing import Union

from ..schemas.subscription import BillingCycle

CYCLE_FACTORS = {
    BillingCycle.MONTHLY: 1,
    BillingCycle.QUARTERLY: 3,
    BillingCycle.ANNUALLY: 12,
}


def cycle_factor(billing_cycle: Union[BillingCycle, str]) -> int:
    """Number of months one charge covers.

    Unknown cycles count as monthly.  Request payloads are validated
    against ``BillingCycle`` before they get here.
    """
    try:
        return CYCLE_FACTORS[BillingCycle(billing_cycle)]
    except ValueError:
        return 1


def compute_monthly_cost(base_cost: float, tax_rate: float, billing_cycle: Union[BillingCycle, str]) -> float:
    """``base_cost * (1 + tax_rate)`` spread over the cycle, unrounded."""
    return base_cost * (1 + tax_rate) / cycle_factor(billing_cycle)


def round_cost(value: float) -> float:
    return round(value, 2)
