"""Tests for loading reference-table overrides from an Excel workbook."""

import openpyxl
import pytest

from conftest import build_submission
from engines.data_loader import load_reference_tables, read_xlsx_sheet
from engines.estimator import calculate
from engines.reference_tables import INDUSTRY_BENCHMARKS, MARKET_FACTORS, default_tables


def _write_workbook(path, sheets):
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, rows in sheets.items():
        ws = wb.create_sheet(name)
        for row in rows:
            ws.append(row)
    wb.save(path)
    return str(path)


@pytest.fixture
def workbook(tmp_path):
    return _write_workbook(tmp_path / "reference_tables.xlsx", {
        "Industries": [
            ["Industry", "Tech Spend %", "Efficiency Potential", "Avg Savings %", "Implementation Months"],
            ["Technology", None, 0.30, "0.2", 3],
            ["Aquaculture", 0.02, 0.24, 0.19, 6],
        ],
        "Company Sizes": [
            ["Company Size", "Cost Multiplier", "Complexity Multiplier", "Timeline Multiplier", "Base Spend"],
            ["11-50", 2.0, None, None, 3000],
        ],
        "Budgets": [
            ["Budget Range", "Solution", "Monthly Investment", "Features"],
            ["under-5k", "Island Essentials", 900, "CRM; Invoicing ;  ; Payroll"],
        ],
        "Market Factors": [
            ["Parameter", "Value"],
            ["Cost Premium", 1.0],
            ["Unknown Knob", 9],
        ],
    })


class TestLoadReferenceTables:
    def test_missing_file_returns_defaults(self, tmp_path):
        assert load_reference_tables(str(tmp_path / "nope.xlsx")) == default_tables()
        assert load_reference_tables(None) == default_tables()

    def test_industry_override_and_addition(self, workbook):
        tables = load_reference_tables(workbook)
        tech = tables["industries"]["Technology"]
        assert tech["efficiencyPotential"] == 0.30
        assert tech["avgSavingsPercent"] == 0.2
        assert tech["implementationMonths"] == 3
        assert tech["techSpendPercent"] == INDUSTRY_BENCHMARKS["Technology"]["techSpendPercent"]
        assert tables["industries"]["Aquaculture"]["implementationMonths"] == 6

    def test_size_override(self, workbook):
        tables = load_reference_tables(workbook)
        assert tables["sizes"]["11-50"]["cost"] == 2.0
        assert tables["sizes"]["11-50"]["timeline"] == 1.2
        assert tables["sizeBaseSpend"]["11-50"] == 3000

    def test_budget_override(self, workbook):
        budget = load_reference_tables(workbook)["budgets"]["under-5k"]
        assert budget["solutionName"] == "Island Essentials"
        assert budget["monthlyInvestment"] == 900
        assert budget["features"] == ["CRM", "Invoicing", "Payroll"]

    def test_market_factors(self, workbook):
        factors = load_reference_tables(workbook)["marketFactors"]
        assert factors["costPremium"] == 1.0
        assert "Unknown Knob" not in factors

    def test_defaults_not_mutated(self, workbook):
        load_reference_tables(workbook)
        assert MARKET_FACTORS["costPremium"] == 1.10
        assert INDUSTRY_BENCHMARKS["Technology"]["efficiencyPotential"] == 0.18

    def test_percent_strings_are_fractions(self, tmp_path):
        path = _write_workbook(tmp_path / "pct.xlsx", {
            "Industries": [
                ["Industry", "Tech Spend %", "Efficiency Potential", "Avg Savings %", "Implementation Months"],
                ["Technology", "8%", "18%", " 15 % ", 2],
            ],
        })
        tech = load_reference_tables(path)["industries"]["Technology"]
        assert tech["techSpendPercent"] == pytest.approx(0.08)
        assert tech["efficiencyPotential"] == pytest.approx(0.18)
        assert tech["avgSavingsPercent"] == pytest.approx(0.15)

    def test_percent_strings_flow_into_benefits(self, tmp_path):
        path = _write_workbook(tmp_path / "pct.xlsx", {
            "Industries": [
                ["Industry", "Tech Spend %", "Efficiency Potential", "Avg Savings %", "Implementation Months"],
                ["Technology", "8%", "18%", "15%", 2],
            ],
        })
        result = calculate(build_submission(), load_reference_tables(path))
        assert result["recommendedSolution"]["benefits"][0] == "18% increase in operational efficiency"

    def test_partial_workbook(self, tmp_path):
        path = _write_workbook(tmp_path / "partial.xlsx", {
            "Market Factors": [["Parameter", "Value"], ["Labor Cost Premium", "1.5"]],
        })
        tables = load_reference_tables(path)
        assert tables["marketFactors"]["laborCostPremium"] == 1.5
        assert tables["industries"] == default_tables()["industries"]


class TestOverridesFlowIntoEngine:
    def test_cost_premium_changes_implementation_cost(self, workbook):
        tables = load_reference_tables(workbook)
        data = build_submission(techAssessment={"totalMonthlyCost": 9000})
        # 900 x 1.0 size x 1.0 premium
        fin = calculate(data, tables)["financials"]
        assert fin["monthlyInvestment"] == 900
        assert fin["implementationCost"] == 900

    def test_new_industry_used(self, workbook):
        tables = load_reference_tables(workbook)
        data = build_submission(companyInfo={"industry": "Aquaculture"}, techAssessment={"totalMonthlyCost": 9000})
        result = calculate(data, tables)
        assert result["competitiveAnalysis"]["vsStatusQuo"]["efficiencyGainsPercent"] == 24
        assert "aquaculture" in result["recommendedSolution"]["description"]


class TestReadSheet:
    def test_blank_rows_skipped(self, tmp_path):
        path = _write_workbook(tmp_path / "s.xlsx", {"Data": [["A", "B"], [1, 2], [None, None], [3, 4]]})
        assert read_xlsx_sheet(path, "Data") == [{"A": 1, "B": 2}, {"A": 3, "B": 4}]

    def test_missing_sheet(self, tmp_path):
        path = _write_workbook(tmp_path / "s.xlsx", {"Data": [["A"], [1]]})
        assert read_xlsx_sheet(path, "Other") == []
