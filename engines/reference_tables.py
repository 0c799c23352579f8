"""
Hawaii Growth Calculator: Reference Tables
Every benchmark, multiplier and tier the estimator reads lives here.
New industries, sizes or budget tiers are added as rows, not as formula changes.
Rows can be overridden at start-up from data/config/reference_tables.xlsx (see data_loader).
"""
import logging
import math

# ══════════════════════════════════════════════════════════════
#  ENUMERATIONS (form option sets)
# ══════════════════════════════════════════════════════════════

INDUSTRIES = (
    'Tourism & Hospitality', 'Real Estate', 'Healthcare', 'Retail & E-commerce',
    'Professional Services', 'Construction', 'Agriculture', 'Education',
    'Non-profit', 'Government', 'Finance & Insurance', 'Manufacturing',
    'Technology', 'Other',
)

COMPANY_SIZES = ('1-10', '11-50', '51-100', '100+')

LOCATIONS = (
    'Oahu - Honolulu', 'Oahu - Other', 'Maui', 'Big Island - Kona',
    'Big Island - Hilo', 'Kauai', 'Molokai', 'Lanai', 'Multiple Islands',
)

REVENUE_RANGES = ('under-500k', '500k-1m', '1m-5m', '5m-10m', '10m-50m', '50m+')

GROWTH_STAGES = ('startup', 'growth', 'established', 'enterprise')

PAIN_POINTS = (
    'High software costs', 'Disconnected systems', 'Manual processes',
    'Limited automation', 'Poor data insights', 'Scalability issues',
    'Customer experience gaps', 'Compliance challenges', 'Remote work limitations',
    'Security concerns', 'Staff productivity', 'Integration problems',
)

BUSINESS_OBJECTIVES = (
    'Increase revenue', 'Reduce operational costs', 'Improve customer experience',
    'Scale operations', 'Enter new markets', 'Improve data insights',
    'Automate workflows', 'Enhance security', 'Improve team collaboration',
    'Streamline compliance', 'Digital transformation', 'Competitive advantage',
)

TECH_BARRIERS = (
    'Budget constraints', 'Lack of technical expertise', 'Change resistance',
    'Integration complexity', 'Time constraints', 'Vendor lock-in',
    'Data migration concerns', 'Security requirements', 'Compliance requirements',
    'Limited IT resources',
)

PRIORITY_AREAS = (
    'Sales & Marketing', 'Customer Service', 'Operations', 'Finance & Accounting',
    'HR & Payroll', 'Inventory Management', 'Data Analytics', 'Communication',
    'Project Management', 'E-commerce', 'Security', 'Compliance',
)

BUDGET_RANGES = ('under-5k', '5k-15k', '15k-50k', '50k+')

TIMELINES = ('immediate', '3-months', '6-months', '12-months')

IMPLEMENTATION_TYPES = ('diy', 'guided', 'full-service')

DECISION_MAKERS = (
    'CEO/Owner', 'CFO', 'CTO/IT Director', 'COO', 'Department Head',
    'Board of Directors', 'External Consultant',
)

TECH_BUDGET_PERCENTAGES = ('less_than_1', '1_to_3', '3_to_5', 'more_than_5')

# Defaults used whenever an enum value is missing or unrecognised
DEFAULT_INDUSTRY = 'Other'
DEFAULT_COMPANY_SIZE = '1-10'
DEFAULT_BUDGET_RANGE = 'under-5k'
DEFAULT_IMPLEMENTATION_TYPE = 'guided'
DEFAULT_LOCATION = 'Oahu'


# ══════════════════════════════════════════════════════════════
#  REGIONAL MARKET FACTORS (applied uniformly to every island)
# ══════════════════════════════════════════════════════════════

MARKET_FACTORS = {
    'costPremium': 1.10,           # island costs run ~10% above mainland
    'implementationSpeed': 0.90,   # logistics slow rollouts ~10%
    'localSupportValue': 1.35,
    'remoteWorkAdoption': 1.4,
    'tourismDependency': 0.7,
    'overheadMultiplier': 1.0,
    'laborCostPremium': 1.25,      # labour 25% dearer, so automation is worth more
}


# ══════════════════════════════════════════════════════════════
#  INDUSTRY BENCHMARKS
# ══════════════════════════════════════════════════════════════

INDUSTRY_BENCHMARKS = {
    'Tourism & Hospitality': {'techSpendPercent': 0.035, 'efficiencyPotential': 0.28, 'avgSavingsPercent': 0.22, 'implementationMonths': 3},
    'Real Estate':           {'techSpendPercent': 0.025, 'efficiencyPotential': 0.25, 'avgSavingsPercent': 0.20, 'implementationMonths': 3},
    'Healthcare':            {'techSpendPercent': 0.045, 'efficiencyPotential': 0.20, 'avgSavingsPercent': 0.16, 'implementationMonths': 5},
    'Retail & E-commerce':   {'techSpendPercent': 0.04,  'efficiencyPotential': 0.35, 'avgSavingsPercent': 0.28, 'implementationMonths': 2},
    'Professional Services': {'techSpendPercent': 0.03,  'efficiencyPotential': 0.32, 'avgSavingsPercent': 0.25, 'implementationMonths': 2},
    'Construction':          {'techSpendPercent': 0.02,  'efficiencyPotential': 0.20, 'avgSavingsPercent': 0.15, 'implementationMonths': 4},
    'Agriculture':           {'techSpendPercent': 0.015, 'efficiencyPotential': 0.22, 'avgSavingsPercent': 0.18, 'implementationMonths': 5},
    'Education':             {'techSpendPercent': 0.035, 'efficiencyPotential': 0.14, 'avgSavingsPercent': 0.08, 'implementationMonths': 7},
    'Non-profit':            {'techSpendPercent': 0.025, 'efficiencyPotential': 0.25, 'avgSavingsPercent': 0.20, 'implementationMonths': 3},
    'Government':            {'techSpendPercent': 0.03,  'efficiencyPotential': 0.10, 'avgSavingsPercent': 0.06, 'implementationMonths': 12},
    'Finance & Insurance':   {'techSpendPercent': 0.05,  'efficiencyPotential': 0.16, 'avgSavingsPercent': 0.12, 'implementationMonths': 8},
    'Manufacturing':         {'techSpendPercent': 0.025, 'efficiencyPotential': 0.18, 'avgSavingsPercent': 0.14, 'implementationMonths': 9},
    'Technology':            {'techSpendPercent': 0.08,  'efficiencyPotential': 0.18, 'avgSavingsPercent': 0.15, 'implementationMonths': 2},
    'Other':                 {'techSpendPercent': 0.03,  'efficiencyPotential': 0.20, 'avgSavingsPercent': 0.16, 'implementationMonths': 4},
}


# ══════════════════════════════════════════════════════════════
#  COMPANY SIZE
# ══════════════════════════════════════════════════════════════

SIZE_MULTIPLIERS = {
    '1-10':   {'cost': 1.0, 'complexity': 1.0, 'timeline': 1.0},
    '11-50':  {'cost': 1.5, 'complexity': 1.3, 'timeline': 1.2},
    '51-100': {'cost': 2.2, 'complexity': 1.8, 'timeline': 1.5},
    '100+':   {'cost': 3.5, 'complexity': 2.5, 'timeline': 2.0},
}

# Setup & Configuration phase length in weeks
SETUP_WEEKS = {'100+': 4, '51-100': 3}
DEFAULT_SETUP_WEEKS = 2


# ══════════════════════════════════════════════════════════════
#  CURRENT SPEND ESTIMATION (used when no monthly total is reported)
# ══════════════════════════════════════════════════════════════

SIZE_BASE_SPEND = {'1-10': 500, '11-50': 2500, '51-100': 7500, '100+': 15000}
DEFAULT_BASE_SPEND = 1000

# Revenue range midpoints (annual $)
REVENUE_MIDPOINTS = {
    'under-500k': 250000, '500k-1m': 750000, '1m-5m': 3000000,
    '5m-10m': 7500000, '10m-50m': 30000000, '50m+': 75000000,
}
DEFAULT_REVENUE = 1000000

TECH_BUDGET_SHARE = {'less_than_1': 0.005, '1_to_3': 0.02, '3_to_5': 0.04, 'more_than_5': 0.06}
DEFAULT_TECH_BUDGET_SHARE = 0.02

AVG_COST_PER_TOOL = 200


# ══════════════════════════════════════════════════════════════
#  BUDGET -> SOLUTION TIERS
# ══════════════════════════════════════════════════════════════

BUDGET_SOLUTIONS = {
    'under-5k': {
        'solutionName': 'Essential Hawaii Business Suite',
        'features': [
            'Core CRM & customer management', 'Basic automation workflows',
            'Financial tracking & reporting', 'Email marketing tools',
            'Local payment processing', 'Mobile-first design',
        ],
        'monthlyInvestment': 950,
    },
    '5k-15k': {
        'solutionName': 'Hawaii Growth Accelerator Platform',
        'features': [
            'Advanced CRM with AI insights', 'Marketing automation suite',
            'Inventory & supply chain management', 'Advanced analytics & BI',
            'Multi-location support', 'Custom integrations', 'Priority local support',
        ],
        'monthlyInvestment': 2500,
    },
    '15k-50k': {
        'solutionName': 'Enterprise Hawaii Solution',
        'features': [
            'Full enterprise CRM', 'Complete automation platform',
            'Advanced AI & predictive analytics', 'Custom application development',
            'Dedicated implementation team', 'White-glove onboarding',
            '24/7 priority support', 'Compliance & security suite',
        ],
        'monthlyInvestment': 5500,
    },
    '50k+': {
        'solutionName': 'Custom Enterprise Transformation',
        'features': [
            'Fully customized platform', 'Enterprise architecture design',
            'Complete digital transformation', 'Dedicated development team',
            'Executive consulting', 'Change management program',
            'Unlimited scaling', 'White-label options',
        ],
        'monthlyInvestment': 12000,
    },
}

DIY_SOLUTION = {
    'solutionName': 'Hawaii DIY Digital Transformation Kit',
    'features': [
        'Self-paced implementation guides', 'Pre-configured tool templates',
        'Video training library (Hawaii-specific)', 'Monthly group coaching calls',
        'Community support forum', 'Basic email support',
        'Quarterly strategy reviews', 'Local vendor recommendations',
    ],
    'monthlyInvestment': 99,
}

STARTER_SOLUTION_NAME = 'Hawaii Business Starter Package'
GROWTH_SOLUTION_NAME = 'Hawaii Business Growth Package'

# Spend thresholds ($/month) for the scaling rules in estimator
MICRO_SPEND_THRESHOLD = 1000
SMALL_SPEND_THRESHOLD = 2000
MEDIUM_SPEND_THRESHOLD = 5000
SMALL_INVESTMENT_SHARE = 0.50
SMALL_INVESTMENT_FLOOR = 299
SMALL_RELABEL_RATIO = 0.60
MEDIUM_INVESTMENT_SHARE = 0.75
MEDIUM_RELABEL_RATIO = 0.80


# ══════════════════════════════════════════════════════════════
#  MODEL COEFFICIENTS
# ══════════════════════════════════════════════════════════════

MODEL = {
    'maxSatisfaction': 5,
    'neutralSatisfaction': 3,
    'inefficiencyCeiling': 0.35,
    'priorityAreaBoost': 0.01,
    'painPointBoost': 0.04,
    'savingsCap': 0.40,
    'conservatismFactor': 0.90,
    'revenueShare': 0.25,
    'efficiencyToRevenue': 0.70,
    'laborShare': 0.20,
    'upfrontMonths': 2,
    'horizonMonths': 36,
    'enterpriseCostDifference': -65,
    'enterpriseTimelineFactor': 3,
    'growthFromEfficiency': 1.5,
    'riskFromSavings': 2.0,
    'maxBenefits': 6,
}

NEVER_PAYBACK = 999


def default_tables():
    """Bundle every table into the mapping the estimator expects.

    Returns fresh containers so a caller (e.g. the workbook loader) can layer
    overrides without touching the module constants.
    """
    return {
        'marketFactors': dict(MARKET_FACTORS),
        'industries': {k: dict(v) for k, v in INDUSTRY_BENCHMARKS.items()},
        'sizes': {k: dict(v) for k, v in SIZE_MULTIPLIERS.items()},
        'budgets': {k: {**v, 'features': list(v['features'])} for k, v in BUDGET_SOLUTIONS.items()},
        'sizeBaseSpend': dict(SIZE_BASE_SPEND),
        'revenueMidpoints': dict(REVENUE_MIDPOINTS),
        'techBudgetShare': dict(TECH_BUDGET_SHARE),
        'model': dict(MODEL),
    }


def resolve_key(table, key, default_key, label=None):
    """``key`` when ``table`` has a row for it, else ``default_key``."""
    if key in table:
        return key
    if label and key:
        logging.warning(f"Unknown {label} '{key}', using '{default_key}' row")
    return default_key


def lookup(table, key, default_key, label=None):
    """Resolve ``key`` in ``table``; unknown or missing keys fall to ``default_key``."""
    return table[resolve_key(table, key, default_key, label)]


def round_half_up(value):
    """Whole-number rounding with .5 always going up (-2.5 -> -2), as on the results page."""
    return int(math.floor(value + 0.5))
