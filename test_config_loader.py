import os
import tempfile
import unittest
from datetime import date

from tax_engine.config_loader import load_config, parse_filing_status, tax_return_from_dict
from tax_engine.models import FilingStatus, CapitalGainTransaction, TaxReturn
from tax_engine.validation import validate_tax_return, holding_period_is_long_term

EXAMPLE_PROFILE = os.path.join(os.path.dirname(__file__), "config", "tax_profile.example.yaml")


class TestParseFilingStatus(unittest.TestCase):
    def test_aliases(self):
        self.assertEqual(parse_filing_status("married_jointly"), FilingStatus.MARRIED_FILING_JOINTLY)
        self.assertEqual(parse_filing_status("Married Filing Separately"), FilingStatus.MARRIED_FILING_SEPARATELY)
        self.assertEqual(parse_filing_status("head-of-household"), FilingStatus.HEAD_OF_HOUSEHOLD)
        self.assertEqual(
            parse_filing_status("qualifying_surviving_spouse"),
            FilingStatus.QUALIFYING_SURVIVING_SPOUSE,
        )

    def test_unknown_falls_back_to_single(self):
        self.assertEqual(parse_filing_status(None), FilingStatus.SINGLE)
        with self.assertLogs("tax_engine.config_loader", level="WARNING"):
            self.assertEqual(parse_filing_status("widowed"), FilingStatus.SINGLE)


class TestTaxReturnFromDict(unittest.TestCase):
    def test_nested_sections(self):
        tax_return = tax_return_from_dict({
            "tax_year": 2024,
            "taxpayer": {"name": "Pat", "filing_status": "head_of_household", "age": 70,
                         "spouse": {"age": 68, "is_blind": True}},
            "w2_forms": [{"wages": "85000", "federal_withheld": 14000}],
            "self_employment": {"gross_receipts": 5000, "expenses": {"meals": 200}},
            "itemized_deductions": {"mortgage_interest": 9000},
            "hsa": {"contributions": 1000},
        })
        self.assertEqual(tax_return.tax_year, 2024)
        self.assertEqual(tax_return.filing_status, FilingStatus.HEAD_OF_HOUSEHOLD)
        self.assertEqual(tax_return.taxpayer.age, 70)
        self.assertTrue(tax_return.taxpayer.spouse.is_blind)
        self.assertEqual(tax_return.total_wages, 85_000)
        self.assertEqual(tax_return.self_employment.expenses.meals, 200)
        self.assertEqual(tax_return.itemized_deductions.mortgage_interest, 9_000)
        self.assertEqual(tax_return.hsa.contributions, 1_000)
        self.assertIsNone(tax_return.traditional_ira)
        self.assertIsNone(tax_return.form_8606)

    def test_empty_dict_is_default_return(self):
        self.assertEqual(tax_return_from_dict({}), TaxReturn())

    def test_bad_amount_raises(self):
        with self.assertRaises(ValueError) as ctx:
            tax_return_from_dict({"w2_forms": [{"wages": "lots"}]})
        self.assertIn("wages", str(ctx.exception))

    def test_bad_date_raises(self):
        with self.assertRaises(ValueError):
            tax_return_from_dict({"capital_gains": [{"date_sold": "07/15/2025"}]})

    def test_not_a_mapping(self):
        with self.assertRaises(ValueError):
            tax_return_from_dict(["w2"])

    def test_string_flags_parsed(self):
        tax_return = tax_return_from_dict({
            "taxpayer": {"is_blind": "false", "spouse": {"is_blind": "Yes"}},
            "dependents": [{"is_qualifying_child_for_ctc": "false"},
                           {"is_qualifying_child_for_ctc": "true"}],
            "traditional_ira": {"amount": 7000, "is_deductible": "false"},
            "hsa": {"contributions": 1000, "is_family": 1},
            "education_expenses": [{"tuition_and_fees": 4000, "is_first_four_years": "no"}],
            "capital_gains": [{"proceeds": 10, "is_long_term": "false"}],
        })
        self.assertFalse(tax_return.taxpayer.is_blind)
        self.assertTrue(tax_return.taxpayer.spouse.is_blind)
        self.assertEqual([d.is_qualifying_child_for_ctc for d in tax_return.dependents], [False, True])
        self.assertFalse(tax_return.traditional_ira.is_deductible)
        self.assertTrue(tax_return.hsa.is_family)
        self.assertFalse(tax_return.education_expenses[0].is_first_four_years)
        self.assertFalse(tax_return.capital_gains[0].is_long_term)

    def test_unrecognized_flag_raises(self):
        with self.assertRaises(ValueError) as ctx:
            tax_return_from_dict({"traditional_ira": {"is_deductible": "maybe"}})
        self.assertIn("is_deductible", str(ctx.exception))

    def test_long_term_flag_derived_from_dates(self):
        tax_return = tax_return_from_dict({"capital_gains": [
            {"date_acquired": "2024-01-01", "date_sold": "2025-01-02", "proceeds": 10, "cost_basis": 5},
            {"date_acquired": "2024-01-01", "date_sold": "2024-12-31", "proceeds": 10, "cost_basis": 5},
            {"date_acquired": "2024-01-01", "date_sold": "2024-06-01", "is_long_term": True},
        ]})
        flags = [t.is_long_term for t in tax_return.capital_gains]
        self.assertEqual(flags, [True, False, True])


class TestLoadConfig(unittest.TestCase):
    def test_example_profile(self):
        tax_return = load_config(EXAMPLE_PROFILE)
        self.assertIsNotNone(tax_return)
        self.assertEqual(tax_return.filing_status, FilingStatus.MARRIED_FILING_JOINTLY)
        self.assertEqual(tax_return.dependents[0].birth_date, date(2015, 4, 12))
        self.assertTrue(tax_return.capital_gains[0].is_long_term)
        self.assertEqual(validate_tax_return(tax_return), [])

    def test_yaml_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "profile.yaml")
            with open(path, "w", encoding="utf-8") as f:
                f.write(
                    "taxpayer:\n"
                    "  filing_status: single\n"
                    "w2_forms:\n"
                    "  - wages: 85000\n"
                    "    federal_withheld: 14000\n"
                )
            tax_return = load_config(path)
        self.assertEqual(tax_return.total_federal_withheld, 14_000)

    def test_missing_file(self):
        self.assertIsNone(load_config("/nonexistent/profile.yaml"))

    def test_invalid_amount_returns_none(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "profile.yaml")
            with open(path, "w", encoding="utf-8") as f:
                f.write("estimated_tax_payments: some\n")
            self.assertIsNone(load_config(path))


class TestValidation(unittest.TestCase):
    def test_holding_period(self):
        self.assertFalse(holding_period_is_long_term(date(2024, 1, 1), date(2024, 12, 31)))
        self.assertTrue(holding_period_is_long_term(date(2024, 1, 1), date(2025, 1, 2)))

    def test_negative_amount_reported(self):
        tax_return = tax_return_from_dict({"w2_forms": [{"wages": -5}]})
        issues = validate_tax_return(tax_return)
        self.assertEqual([i.field for i in issues], ["tax_return.w2_forms[0].wages"])

    def test_sale_before_acquisition(self):
        tax_return = TaxReturn(capital_gains=[CapitalGainTransaction(
            date_acquired=date(2025, 5, 1), date_sold=date(2025, 4, 1),
        )])
        issues = validate_tax_return(tax_return)
        self.assertEqual(len(issues), 1)
        self.assertTrue(issues[0].field.endswith("date_sold"))

    def test_long_term_flag_mismatch(self):
        tax_return = TaxReturn(capital_gains=[CapitalGainTransaction(
            date_acquired=date(2025, 1, 1), date_sold=date(2025, 4, 1), is_long_term=True,
        )])
        issues = validate_tax_return(tax_return)
        self.assertEqual(issues[0].field, "tax_return.capital_gains[0].is_long_term")

    def test_dependent_months(self):
        tax_return = tax_return_from_dict({"dependents": [{"months_lived_with_taxpayer": 13}]})
        issues = validate_tax_return(tax_return)
        self.assertEqual(len(issues), 1)
        self.assertIn("between 0 and 12", issues[0].message)


if __name__ == "__main__":
    unittest.main()
