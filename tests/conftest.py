"""Shared fixtures: a complete, valid questionnaire submission."""

import copy
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

BASE_SUBMISSION = {
    "companyInfo": {
        "companyName": "Aloha Widgets",
        "industry": "Technology",
        "companySize": "1-10",
        "location": "Oahu - Honolulu",
        "revenueRange": "500k-1m",
        "growthStage": "growth",
        "currentPainPoints": ["Manual processes"],
    },
    "techAssessment": {
        "currentTools": {
            "crm": [{"name": "HubSpot Starter", "monthlyCost": 300, "satisfaction": 3}],
            "accounting": [{"name": "QuickBooks", "monthlyCost": 200, "satisfaction": 3}],
        },
        "totalMonthlyCost": 500,
        "satisfactionScores": {},
    },
    "growthGoals": {
        "businessObjectives": ["Increase revenue"],
        "techBarriers": ["Budget constraints"],
        "priorityAreas": ["Operations"],
    },
    "preferences": {
        "budgetRange": "under-5k",
        "timeline": "3-months",
        "implementationType": "guided",
        "decisionMakers": ["CEO/Owner"],
    },
    "contactInfo": {
        "firstName": "Leilani",
        "lastName": "Kahale",
        "email": "Leilani@AlohaWidgets.com",
        "phone": "808-555-0100",
        "title": "Owner",
        "marketingConsent": True,
    },
}


def build_submission(**sections):
    """Deep copy of BASE_SUBMISSION with per-section field overrides.

    build_submission(companyInfo={"industry": "Healthcare"}) replaces just that field.
    """
    data = copy.deepcopy(BASE_SUBMISSION)
    for name, fields in sections.items():
        data[name].update(fields)
    return data


@pytest.fixture
def submission():
    return build_submission()
