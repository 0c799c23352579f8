"""
Hawaii Growth Calculator: Estimation Engine
Maps a validated questionnaire response to a recommended solution, a financial
projection, a competitive comparison and a phased implementation timeline.

Pure and deterministic: no I/O, no shared state, never raises for unknown
enum values (they resolve to the default table rows).

  current spend → solution scaling → inefficiency + savings % → monthly savings
  → implementation cost / payback / 3-year ROI
"""
import math
from engines.reference_tables import (
    default_tables, lookup, resolve_key, round_half_up, DIY_SOLUTION, NEVER_PAYBACK,
    DEFAULT_INDUSTRY, DEFAULT_COMPANY_SIZE, DEFAULT_BUDGET_RANGE,
    DEFAULT_IMPLEMENTATION_TYPE, DEFAULT_LOCATION, LOCATIONS,
    DEFAULT_BASE_SPEND, DEFAULT_REVENUE, DEFAULT_TECH_BUDGET_SHARE, AVG_COST_PER_TOOL,
    STARTER_SOLUTION_NAME, GROWTH_SOLUTION_NAME,
    MICRO_SPEND_THRESHOLD, SMALL_SPEND_THRESHOLD, MEDIUM_SPEND_THRESHOLD,
    SMALL_INVESTMENT_SHARE, SMALL_INVESTMENT_FLOOR, SMALL_RELABEL_RATIO,
    MEDIUM_INVESTMENT_SHARE, MEDIUM_RELABEL_RATIO,
)
from engines.narrative import build_description, build_benefits
from engines.timeline import build_timeline

_DEFAULT_TABLES = default_tables()


def calculate(response, tables=None):
    """Run the full estimate for one questionnaire response.

    Args:
        response: dict with companyInfo, techAssessment, growthGoals, preferences
                  (contactInfo is ignored here). Not modified.
        tables: reference tables from data_loader.load_reference_tables();
                built-in tables when omitted.

    Returns:
        dict with recommendedSolution, financials, competitiveAnalysis, timeline
    """
    tables = tables or _DEFAULT_TABLES
    company = response.get('companyInfo') or {}
    tech = response.get('techAssessment') or {}
    goals = response.get('growthGoals') or {}
    prefs = response.get('preferences') or {}
    market = tables['marketFactors']; model = tables['model']

    industry = resolve_key(tables['industries'], company.get('industry'), DEFAULT_INDUSTRY, 'industry')
    benchmark = tables['industries'][industry]
    size = company.get('companySize') or DEFAULT_COMPANY_SIZE
    size_mult = lookup(tables['sizes'], company.get('companySize'), DEFAULT_COMPANY_SIZE, 'company size')
    base_solution = lookup(tables['budgets'], prefs.get('budgetRange'), DEFAULT_BUDGET_RANGE, 'budget range')

    current_spend = estimate_monthly_spend(tech, company, tables)
    solution = scale_solution(base_solution, current_spend)
    investment = solution['monthlyInvestment']

    # ── Savings model ──
    avg_sat = average_satisfaction(tech.get('satisfactionScores'), model['neutralSatisfaction'])
    inefficiency_cost = inefficiency(current_spend, avg_sat, model)

    n_priorities = len(goals.get('priorityAreas') or [])
    n_pain_points = len(company.get('currentPainPoints') or [])
    efficiency_gains = benchmark['efficiencyPotential'] * (1 + n_priorities * model['priorityAreaBoost'])
    savings_pct = savings_percent(benchmark['avgSavingsPercent'], n_pain_points, model)

    direct_savings = (current_spend + inefficiency_cost) * savings_pct * model['conservatismFactor']
    revenue_impact = current_spend * model['revenueShare'] * (1 + efficiency_gains * model['efficiencyToRevenue'])
    labor_savings = current_spend * model['laborShare'] * market['laborCostPremium']
    total_monthly = direct_savings + revenue_impact + labor_savings
    net_monthly = total_monthly - investment

    # ── Investment, timeline, payback, ROI ──
    implementation_cost = investment * size_mult['cost'] * market['costPremium']
    timeline_months = math.ceil(benchmark['implementationMonths'] * size_mult['timeline'])
    payback = payback_months(implementation_cost, investment, net_monthly, model['upfrontMonths'])

    horizon = model['horizonMonths']
    gross_3yr = total_monthly * horizon
    invest_3yr = implementation_cost + investment * horizon
    net_3yr = gross_3yr - invest_3yr
    roi = (net_3yr / invest_3yr) * 100 if invest_3yr > 0 else 0

    location = company.get('location')
    if location not in LOCATIONS:
        location = DEFAULT_LOCATION
    impl_type = prefs.get('implementationType') or DEFAULT_IMPLEMENTATION_TYPE

    return {
        'recommendedSolution': {
            'title': solution['solutionName'],
            'description': build_description(solution['solutionName'], industry, location),
            'features': list(solution['features']),
            'benefits': build_benefits(company, goals, efficiency_gains, savings_pct, model['maxBenefits']),
        },
        'financials': {
            'estimatedMonthlySavings': round_half_up(total_monthly),
            'estimatedAnnualSavings': round_half_up(total_monthly * 12),
            'implementationCost': round_half_up(implementation_cost),
            'monthlyInvestment': investment,
            'paybackPeriodMonths': payback,
            'threeYearROIPercent': round_half_up(roi),
            'totalThreeYearValue': max(0, round_half_up(net_3yr)),
        },
        'competitiveAnalysis': {
            'vsEnterprise': {
                'costDifferencePercent': model['enterpriseCostDifference'],
                'timeToImplement': f"{timeline_months} months vs {timeline_months * model['enterpriseTimelineFactor']} months",
                'flexibility': 'High - Hawaii-focused vs Generic',
            },
            'vsStatusQuo': {
                'efficiencyGainsPercent': round_half_up(efficiency_gains * 100),
                'growthPotentialPercent': round_half_up(efficiency_gains * model['growthFromEfficiency'] * 100),
                'riskReductionPercent': round_half_up(savings_pct * model['riskFromSavings'] * 100),
            },
        },
        'timeline': build_timeline(timeline_months, impl_type, size),
    }


# ══════════════════════════════════════════════════════════════
#  CURRENT SPEND
# ══════════════════════════════════════════════════════════════

def estimate_monthly_spend(tech, company, tables=None):
    """Reported monthly total when present, otherwise a multi-signal estimate.

    Estimate = size base spend, replaced by revenue × tech-budget share / 12 when
    the revenue range is known, raised to tool count × $200 when that is higher,
    then scaled by the island cost premium.
    """
    tables = tables or _DEFAULT_TABLES
    reported = tech.get('totalMonthlyCost')
    if reported:
        return reported

    size = company.get('companySize')
    base = tables['sizeBaseSpend'].get(size, DEFAULT_BASE_SPEND)

    revenue_range = company.get('revenueRange')
    if revenue_range:
        revenue = tables['revenueMidpoints'].get(revenue_range, DEFAULT_REVENUE)
        share_key = tech.get('techBudgetPercentage')
        if share_key:
            share = tables['techBudgetShare'].get(share_key, DEFAULT_TECH_BUDGET_SHARE)
        else:
            share = lookup(tables['industries'], company.get('industry'), DEFAULT_INDUSTRY)['techSpendPercent']
        base = revenue * share / 12

    from_tools = _tool_count(tech) * AVG_COST_PER_TOOL
    base = max(base, from_tools)

    return round_half_up(base * tables['marketFactors']['costPremium'])


def _tool_count(tech):
    software = tech.get('currentSoftware')
    if isinstance(software, (list, tuple)):
        return len(software)
    tools = tech.get('currentTools') or {}
    return sum(1 for entries in tools.values() for t in (entries or []) if t.get('name'))


# ══════════════════════════════════════════════════════════════
#  SOLUTION SCALING RULES (first match wins)
# ══════════════════════════════════════════════════════════════

def _micro(base, spend):
    return {
        'solutionName': DIY_SOLUTION['solutionName'],
        'features': list(DIY_SOLUTION['features']),
        'monthlyInvestment': DIY_SOLUTION['monthlyInvestment'],
    }


def _capped(share, floor, relabel_ratio, relabel_name):
    def apply(base, spend):
        base_inv = base['monthlyInvestment']
        investment = min(base_inv, max(spend * share, floor))
        name = relabel_name if investment < base_inv * relabel_ratio else base['solutionName']
        return {'solutionName': name, 'features': list(base['features']),
                'monthlyInvestment': round_half_up(investment)}
    return apply


def _unchanged(base, spend):
    return {'solutionName': base['solutionName'], 'features': list(base['features']),
            'monthlyInvestment': round_half_up(base['monthlyInvestment'])}


SCALING_RULES = [
    {'id': 'micro', 'applies': lambda spend: spend < MICRO_SPEND_THRESHOLD, 'apply': _micro},
    {'id': 'small', 'applies': lambda spend: spend < SMALL_SPEND_THRESHOLD,
     'apply': _capped(SMALL_INVESTMENT_SHARE, SMALL_INVESTMENT_FLOOR, SMALL_RELABEL_RATIO, STARTER_SOLUTION_NAME)},
    {'id': 'medium', 'applies': lambda spend: spend < MEDIUM_SPEND_THRESHOLD,
     'apply': _capped(MEDIUM_INVESTMENT_SHARE, 0, MEDIUM_RELABEL_RATIO, GROWTH_SOLUTION_NAME)},
    {'id': 'standard', 'applies': lambda spend: True, 'apply': _unchanged},
]


def scale_solution(base_solution, current_spend):
    """Fit the budget tier to what the business actually spends today."""
    for rule in SCALING_RULES:
        if rule['applies'](current_spend):
            return rule['apply'](base_solution, current_spend)


# ══════════════════════════════════════════════════════════════
#  MODEL TERMS
# ══════════════════════════════════════════════════════════════

def average_satisfaction(scores, neutral=3):
    values = list((scores or {}).values())
    if not values:
        return neutral
    return sum(values) / len(values)


def inefficiency(current_spend, avg_satisfaction, model):
    top = model['maxSatisfaction']
    return current_spend * ((top - avg_satisfaction) / top) * model['inefficiencyCeiling']


def savings_percent(base_pct, n_pain_points, model):
    return min(base_pct * (1 + n_pain_points * model['painPointBoost']), model['savingsCap'])


def payback_months(implementation_cost, investment, net_monthly, upfront_months=2):
    if net_monthly <= 0:
        return NEVER_PAYBACK
    return math.ceil((implementation_cost + investment * upfront_months) / net_monthly)
