"""
Hawaii Growth Calculator: Implementation Timeline
Always four phases in fixed order; only the durations react to the input.
"""
from engines.reference_tables import SETUP_WEEKS, DEFAULT_SETUP_WEEKS

PHASES = [
    {'name': 'Discovery & Planning',
     'milestones': ['Business process analysis', 'Technical requirements gathering',
                    'Stakeholder alignment', 'Project roadmap creation']},
    {'name': 'Setup & Configuration',
     'milestones': ['Platform provisioning', 'Initial configuration',
                    'Data migration planning', 'Integration setup']},
    {'name': 'Implementation & Training',
     'milestones': ['Core features deployment', 'Staff training sessions',
                    'Process optimization', 'Testing & refinement']},
    {'name': 'Go-Live & Support',
     'milestones': ['Production launch', 'Performance monitoring',
                    'Issue resolution', 'Success measurement']},
]

GO_LIVE_WEEKS = 2


def phase_weeks(total_months, implementation_type, company_size):
    discovery = 2 if implementation_type == 'full-service' else 1
    setup = SETUP_WEEKS.get(company_size, DEFAULT_SETUP_WEEKS)
    implementation = max(total_months - 1, 1) * 3
    return [discovery, setup, implementation, GO_LIVE_WEEKS]


def build_timeline(total_months, implementation_type, company_size):
    weeks = phase_weeks(total_months, implementation_type, company_size)
    return [
        {'name': p['name'],
         'duration': f"{w} week" if w == 1 else f"{w} weeks",
         'milestones': list(p['milestones'])}
        for p, w in zip(PHASES, weeks)
    ]
