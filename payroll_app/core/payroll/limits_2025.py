from decimal import Decimal

D = Decimal

PERIODS_PER_YEAR = 12

# EPF statutory defaults (company-overridable through StatutoryRateConfig)
EPF_EMPLOYEE_RATE = D("0.11")
EPF_EMPLOYER_RATE_BELOW = D("0.13")
EPF_EMPLOYER_RATE_ABOVE = D("0.12")
EPF_EMPLOYER_THRESHOLD = D("5000")

# SOCSO / EIS wage ceiling, effective 1 October 2024
SOCSO_MAX_SALARY = D("6000")
EIS_MAX_SALARY = D("6000")

# PCB reliefs (LHDN e-CP39)
RELIEF_SELF = D("9000")
RELIEF_SPOUSE = D("4000")
RELIEF_DISABLED_SELF = D("6000")
RELIEF_DISABLED_SPOUSE = D("5000")
RELIEF_CHILD_NORMAL = D("2000")
RELIEF_CHILD_HIGHER_ED = D("8000")
RELIEF_DISABLED_CHILD = D("6000")
EPF_RELIEF_CAP = D("4000")

# Rebates only apply when chargeable income is at or below the threshold.
REBATE_INCOME_THRESHOLD = D("35000")
TAX_REBATE_INDIVIDUAL = D("400")
TAX_REBATE_SPOUSE = D("400")

NON_RESIDENT_RATE = D("0.30")
PCB_MINIMUM = D("10")
PCB_ROUNDING_STEP = D("0.05")

# Age-based applicability
EPF_SOCSO_MAX_AGE = 60
EIS_MIN_AGE = 18
EIS_MAX_AGE = 60
