from __future__ import annotations

from decimal import Decimal

from payroll_app.core.models import EmployeeTaxProfile, TaxCategory
from payroll_app.core.payroll import limits_2025 as limits

D = Decimal


def child_relief(profile: EmployeeTaxProfile) -> D:
    # Higher-education and disabled children replace the normal child rate.
    normal = max(
        profile.number_of_children - profile.children_in_higher_education - profile.disabled_children,
        0,
    )
    return (
        normal * limits.RELIEF_CHILD_NORMAL
        + profile.children_in_higher_education * limits.RELIEF_CHILD_HIGHER_ED
        + profile.disabled_children * limits.RELIEF_DISABLED_CHILD
    )


def total_reliefs(profile: EmployeeTaxProfile) -> D:
    total = limits.RELIEF_SELF
    spouse_claimable = profile.category == TaxCategory.MARRIED_SPOUSE_NOT_WORKING
    if spouse_claimable:
        total += limits.RELIEF_SPOUSE
    if profile.disabled_self:
        total += limits.RELIEF_DISABLED_SELF
    if spouse_claimable and profile.disabled_spouse:
        total += limits.RELIEF_DISABLED_SPOUSE
    return total + child_relief(profile)
