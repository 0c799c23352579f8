"""Tests for submission validation and normalisation."""

import pytest

from conftest import build_submission
from engines.intake import IntakeError, SECTIONS, validate_section, validate_submission


class TestMissingSections:
    @pytest.mark.parametrize("section", SECTIONS)
    def test_each_section_required(self, submission, section):
        del submission[section]
        with pytest.raises(IntakeError) as exc:
            validate_submission(submission)
        assert exc.value.missing_sections == [section]
        assert str(exc.value) == "Missing required fields"

    def test_non_dict_payload(self):
        with pytest.raises(IntakeError) as exc:
            validate_submission(["not", "a", "form"])
        assert exc.value.missing_sections == list(SECTIONS)

    def test_empty_section_counts_as_missing(self, submission):
        submission["growthGoals"] = {}
        with pytest.raises(IntakeError) as exc:
            validate_submission(submission)
        assert exc.value.missing_sections == ["growthGoals"]


class TestFieldRules:
    def test_valid_submission_passes(self, submission):
        data = validate_submission(submission)
        assert data["companyInfo"]["industry"] == "Technology"

    def test_errors_are_keyed_by_section_and_field(self):
        data = build_submission(
            companyInfo={"companyName": "A", "currentPainPoints": []},
            contactInfo={"email": "not-an-email"},
        )
        with pytest.raises(IntakeError) as exc:
            validate_submission(data)
        errors = exc.value.errors
        assert set(errors) == {"companyInfo.companyName", "companyInfo.currentPainPoints", "contactInfo.email"}
        assert exc.value.to_dict()["missingSections"] == []

    def test_negative_costs_rejected(self):
        data = build_submission(techAssessment={
            "totalMonthlyCost": -1,
            "currentTools": {"crm": [{"name": "X", "monthlyCost": -5, "satisfaction": 3}]},
        })
        with pytest.raises(IntakeError) as exc:
            validate_submission(data)
        assert "techAssessment.totalMonthlyCost" in exc.value.errors
        assert "techAssessment.currentTools.crm[0]" in exc.value.errors

    @pytest.mark.parametrize("score", [0, 6, "4", True])
    def test_satisfaction_range(self, score):
        errors = validate_section("techAssessment", {"satisfactionScores": {"crm": score}})
        assert "satisfactionScores.crm" in errors

    @pytest.mark.parametrize("phone", ["808-555-0100", "(808) 555-0100", "+1 808.555.0100", "", None])
    def test_phone_accepted(self, phone):
        data = build_submission(contactInfo={"phone": phone})
        validate_submission(data)

    def test_bad_phone_rejected(self):
        errors = validate_section("contactInfo", {**build_submission()["contactInfo"], "phone": "12"})
        assert errors == {"phone": "Please enter a valid phone number"}

    def test_consent_must_be_boolean(self):
        errors = validate_section("contactInfo", {**build_submission()["contactInfo"], "marketingConsent": "yes"})
        assert "marketingConsent" in errors

    def test_unknown_enum_values_pass_through(self):
        data = validate_submission(build_submission(companyInfo={"industry": "Space Mining"}))
        assert data["companyInfo"]["industry"] == "Space Mining"

    def test_unknown_section_name(self):
        with pytest.raises(KeyError):
            validate_section("billing", {})

    def test_section_must_be_object(self):
        assert validate_section("preferences", None) == {"preferences": "Section must be an object"}


class TestNormalisation:
    def test_total_derived_from_tools(self):
        data = build_submission()
        del data["techAssessment"]["totalMonthlyCost"]
        assert validate_submission(data)["techAssessment"]["totalMonthlyCost"] == 500

    def test_supplied_total_kept(self):
        data = build_submission(techAssessment={"totalMonthlyCost": 1234})
        assert validate_submission(data)["techAssessment"]["totalMonthlyCost"] == 1234

    def test_email_lowercased(self, submission):
        assert validate_submission(submission)["contactInfo"]["email"] == "leilani@alohawidgets.com"

    def test_original_untouched(self, submission):
        validate_submission(submission)
        assert submission["contactInfo"]["email"] == "Leilani@AlohaWidgets.com"
