import unittest

from tax_engine.credits import CreditCalculator, linear_phaseout
from tax_engine.models import (
    FilingStatus, TaxpayerInfo, TaxReturn, Dependent, EducationExpense,
    TraditionalIRAContribution, RothIRAContribution,
)
from tax_engine.tax_tables import PhaseoutRange, get_tax_tables


def _calculator(status=FilingStatus.SINGLE, year=2025):
    return CreditCalculator(status, get_tax_tables(year))


def _children(count):
    return [Dependent(name=f"Child {i}", is_qualifying_child_for_ctc=True) for i in range(count)]


class TestLinearPhaseout(unittest.TestCase):
    def test_boundaries(self):
        phaseout = PhaseoutRange(80_000, 90_000)
        self.assertEqual(linear_phaseout(2_500, 80_000, phaseout), 2_500)
        self.assertEqual(linear_phaseout(2_500, 85_000, phaseout), 1_250)
        self.assertEqual(linear_phaseout(2_500, 90_000, phaseout), 0)
        self.assertEqual(linear_phaseout(2_500, 150_000, phaseout), 0)

    def test_never_increases_with_agi(self):
        phaseout = PhaseoutRange(160_000, 180_000)
        previous = linear_phaseout(2_000, 0, phaseout)
        for agi in range(150_000, 190_001, 1_250):
            current = linear_phaseout(2_000, agi, phaseout)
            self.assertLessEqual(current, previous)
            previous = current


class TestChildTaxCredit(unittest.TestCase):
    def test_full_credit_below_threshold(self):
        calc = _calculator(FilingStatus.MARRIED_FILING_JOINTLY)
        self.assertEqual(calc.child_tax_credit(_children(2), 100_000), 4_000)

    def test_non_qualifying_dependents_ignored(self):
        calc = _calculator()
        dependents = _children(1) + [Dependent(name="Parent", relationship="mother")]
        self.assertEqual(calc.child_tax_credit(dependents, 50_000), 2_000)

    def test_partial_thousand_counts_as_full_step(self):
        calc = _calculator()
        # 10,500 over the threshold is 11 steps of $50
        self.assertEqual(calc.child_tax_credit(_children(1), 210_500), 1_450)
        self.assertEqual(calc.child_tax_credit(_children(1), 200_000), 2_000)

    def test_phaseout_floors_at_zero(self):
        calc = _calculator()
        self.assertEqual(calc.child_tax_credit(_children(1), 300_000), 0)

    def test_joint_threshold(self):
        calc = _calculator(FilingStatus.MARRIED_FILING_JOINTLY)
        self.assertEqual(calc.child_tax_credit(_children(1), 400_000), 2_000)
        self.assertEqual(calc.child_tax_credit(_children(1), 401_000), 1_950)


class TestEducationCredits(unittest.TestCase):
    def test_aotc_base(self):
        self.assertEqual(CreditCalculator.aotc_base_credit(4_000), 2_500)
        self.assertEqual(CreditCalculator.aotc_base_credit(10_000), 2_500)
        self.assertEqual(CreditCalculator.aotc_base_credit(3_000), 2_250)
        self.assertEqual(CreditCalculator.aotc_base_credit(1_500), 1_500)
        self.assertEqual(CreditCalculator.aotc_base_credit(0), 0)

    def test_aotc_phaseout_boundaries(self):
        calc = _calculator()
        expenses = [EducationExpense(tuition_and_fees=4_000, is_first_four_years=True)]
        self.assertEqual(calc.education_credits(expenses, 80_000), 2_500)
        self.assertEqual(calc.education_credits(expenses, 85_000), 1_250)
        self.assertEqual(calc.education_credits(expenses, 90_000), 0)

    def test_aotc_per_student(self):
        calc = _calculator(FilingStatus.MARRIED_FILING_JOINTLY)
        expenses = [
            EducationExpense(student_name="A", tuition_and_fees=4_000, is_first_four_years=True),
            EducationExpense(student_name="B", tuition_and_fees=4_000, is_first_four_years=True),
        ]
        self.assertEqual(calc.education_credits(expenses, 100_000), 5_000)

    def test_lifetime_learning_capped_once_per_return(self):
        calc = _calculator()
        expenses = [
            EducationExpense(student_name="A", tuition_and_fees=6_000),
            EducationExpense(student_name="B", tuition_and_fees=6_000),
        ]
        self.assertEqual(calc.education_credits(expenses, 50_000), 2_000)
        self.assertEqual(calc.education_credits(expenses[:1], 50_000), 1_200)

    def test_married_separately_uses_single_range(self):
        calc = _calculator(FilingStatus.MARRIED_FILING_SEPARATELY)
        expenses = [EducationExpense(tuition_and_fees=4_000, is_first_four_years=True)]
        self.assertEqual(calc.education_credits(expenses, 100_000), 0)

    def test_no_expenses(self):
        self.assertEqual(_calculator().education_credits([], 10_000), 0)


class TestSaversCredit(unittest.TestCase):
    def test_rate_brackets(self):
        calc = _calculator()
        self.assertEqual(calc.savers_rate(23_750), 0.50)
        self.assertEqual(calc.savers_rate(25_000), 0.20)
        self.assertEqual(calc.savers_rate(39_500), 0.10)
        self.assertEqual(calc.savers_rate(39_501), 0.0)

    def test_contribution_capped(self):
        calc = _calculator()
        self.assertEqual(calc.savers_credit(2_500, 20_000, 30), 1_000)

        joint = _calculator(FilingStatus.MARRIED_FILING_JOINTLY)
        self.assertEqual(joint.savers_credit(5_000, 50_000, 30), 800)

    def test_under_minimum_age(self):
        self.assertEqual(_calculator().savers_credit(2_000, 10_000, 17), 0)

    def test_income_too_high(self):
        self.assertEqual(_calculator().savers_credit(2_000, 40_000, 30), 0)

    def test_calculate_sums_ira_contributions(self):
        tax_return = TaxReturn(
            taxpayer=TaxpayerInfo(age=25),
            traditional_ira=TraditionalIRAContribution(amount=1_500),
            roth_ira=RothIRAContribution(amount=1_000),
            dependents=_children(1),
        )
        result = _calculator().calculate(tax_return, 20_000)
        self.assertEqual(result.savers_credit, 1_000)
        self.assertEqual(result.child_tax_credit, 2_000)
        self.assertEqual(result.total, 3_000)


if __name__ == "__main__":
    unittest.main()
