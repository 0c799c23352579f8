"""
Hawaii Growth Calculator: Narrative Text
Solution descriptions and the benefit list shown on the results page.
"""

from engines.reference_tables import round_half_up

DESCRIPTIONS = {
    'Hawaii DIY Digital Transformation Kit':
        'Perfect for growing {industry} businesses in {location}. This self-service kit provides essential '
        'tools, templates, and training to modernize your operations at your own pace while keeping costs minimal.',
    'Hawaii Business Starter Package':
        'Ideal for small {industry} businesses in {location} ready to digitize. Core tools with guided '
        'implementation help you streamline operations and improve efficiency without breaking the budget.',
    'Hawaii Business Growth Package':
        'Designed for expanding {industry} companies in {location}. Comprehensive tools with professional '
        'support to scale your operations and compete more effectively in the local market.',
    'Essential Hawaii Business Suite':
        'Perfect for growing {industry} businesses in {location}. This suite provides core tools to streamline '
        'operations, improve customer relationships, and boost efficiency while keeping costs manageable.',
    'Hawaii Growth Accelerator Platform':
        'Designed for established {industry} companies ready to scale across Hawaii. Advanced automation and '
        'AI-powered insights help you compete with larger competitors while maintaining local agility.',
    'Enterprise Hawaii Solution':
        'Comprehensive platform for large {industry} organizations in {location}. Full digital transformation '
        "with enterprise features tailored to Hawaii's unique business environment.",
    'Custom Enterprise Transformation':
        'Bespoke solution for {industry} leaders in Hawaii. Complete digital ecosystem designed around your '
        'specific needs with unlimited customization and scaling potential.',
}
DEFAULT_DESCRIPTION = 'Essential Hawaii Business Suite'

# (source section, field, trigger value, benefit), evaluated in order
CONDITIONAL_BENEFITS = [
    ('companyInfo', 'currentPainPoints', 'High software costs', 'Consolidated platform reducing vendor costs'),
    ('companyInfo', 'currentPainPoints', 'Manual processes', 'Automated workflows saving 10+ hours per week'),
    ('companyInfo', 'currentPainPoints', 'Poor data insights', 'Real-time dashboards for data-driven decisions'),
    ('growthGoals', 'businessObjectives', 'Scale operations', 'Scalable infrastructure for multi-island expansion'),
    ('growthGoals', 'businessObjectives', 'Improve customer experience', 'Omnichannel customer engagement tools'),
    ('companyInfo', 'industry', 'Tourism & Hospitality', 'Tourism-specific booking and guest management'),
    ('companyInfo', 'industry', 'Real Estate', 'MLS integration and property management tools'),
]


def build_description(solution_name, industry, location):
    industry_name = industry.lower().replace(' & ', ' and ')
    location_name = location.capitalize()
    template = DESCRIPTIONS.get(solution_name, DESCRIPTIONS[DEFAULT_DESCRIPTION])
    return template.format(industry=industry_name, location=location_name)


def build_benefits(company, goals, efficiency_gains, savings_pct, limit=6):
    """Three baseline benefits, then the triggered ones, capped at ``limit``."""
    benefits = [
        f'{round_half_up(efficiency_gains * 100)}% increase in operational efficiency',
        f'{round_half_up(savings_pct * 100)}% reduction in technology costs',
        'Local Hawaii-based support team',
    ]
    sections = {'companyInfo': company or {}, 'growthGoals': goals or {}}
    for section, field, trigger, benefit in CONDITIONAL_BENEFITS:
        value = sections[section].get(field)
        hit = value == trigger if isinstance(value, str) else trigger in (value or [])
        if hit:
            benefits.append(benefit)
    return benefits[:limit]
