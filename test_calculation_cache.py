import dataclasses
import unittest

from tax_engine.calculation_cache import CalculationCache, fingerprint
from tax_engine.federal_tax import calculate_federal_tax
from tax_engine.models import TaxReturn, W2Data, Dependent


class FakeClock:
    def __init__(self):
        self.now = 1_000.0

    def __call__(self):
        return self.now


def _return():
    return TaxReturn(w2_forms=[W2Data(wages=85_000, federal_withheld=14_000)])


class TestFingerprint(unittest.TestCase):
    def test_equal_returns_share_a_key(self):
        self.assertEqual(fingerprint(_return()), fingerprint(_return()))

    def test_any_field_change_changes_the_key(self):
        base = _return()
        changed = _return()
        changed.dependents.append(Dependent(name="Kid", is_qualifying_child_for_ctc=True))
        self.assertNotEqual(fingerprint(base), fingerprint(changed))

        changed = _return()
        changed.w2_forms[0].federal_withheld = 14_001
        self.assertNotEqual(fingerprint(base), fingerprint(changed))


class TestCalculationCache(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.cache = CalculationCache(ttl=5, clock=self.clock)
        self.calls = 0

    def _compute(self, tax_return):
        self.calls += 1
        return calculate_federal_tax(tax_return)

    def test_hit_within_ttl(self):
        first = self.cache.get_or_compute(_return(), self._compute)
        self.clock.now += 4
        second = self.cache.get_or_compute(_return(), self._compute)
        self.assertIs(first, second)
        self.assertEqual(self.calls, 1)
        self.assertEqual(len(self.cache), 1)

    def test_expired_entry_recomputed(self):
        first = self.cache.get_or_compute(_return(), self._compute)
        self.clock.now += 6
        second = self.cache.get_or_compute(_return(), self._compute)
        self.assertIsNot(first, second)
        self.assertEqual(first, second)
        self.assertEqual(self.calls, 2)

    def test_changed_return_misses(self):
        self.cache.get_or_compute(_return(), self._compute)
        changed = _return()
        changed.estimated_tax_payments = 1_000
        result = self.cache.get_or_compute(changed, self._compute)
        self.assertEqual(self.calls, 2)
        self.assertEqual(result.estimated_payments, 1_000)
        self.assertEqual(len(self.cache), 2)

    def test_expired_entries_purged_on_store(self):
        for wages in range(1_000, 201_000, 1_000):
            tax_return = TaxReturn(w2_forms=[W2Data(wages=wages)])
            calculate_federal_tax(tax_return, cache=self.cache)
            self.clock.now += 10
            self.assertLessEqual(len(self.cache), 1)

    def test_fresh_entries_survive_purge(self):
        self.cache.get_or_compute(_return(), self._compute)
        self.clock.now += 3
        other = _return()
        other.estimated_tax_payments = 500
        self.cache.get_or_compute(other, self._compute)
        self.assertEqual(len(self.cache), 2)

        self.clock.now += 3
        third = _return()
        third.estimated_tax_payments = 900
        self.cache.get_or_compute(third, self._compute)
        # The first entry is now 6 seconds old and is dropped
        self.assertEqual(len(self.cache), 2)
        self.assertIsNone(self.cache.get(fingerprint(_return())))

    def test_expired_lookup_twice_does_not_raise(self):
        tax_return = _return()
        self.cache.get_or_compute(tax_return, self._compute)
        self.clock.now += 6
        key = fingerprint(tax_return)
        self.assertIsNone(self.cache.get(key))
        self.assertIsNone(self.cache.get(key))

    def test_invalidate_and_clear(self):
        tax_return = _return()
        self.cache.get_or_compute(tax_return, self._compute)
        self.cache.invalidate(fingerprint(tax_return))
        self.assertIsNone(self.cache.get(fingerprint(tax_return)))

        self.cache.get_or_compute(tax_return, self._compute)
        self.cache.clear()
        self.assertEqual(len(self.cache), 0)

    def test_calculate_federal_tax_uses_cache(self):
        first = calculate_federal_tax(_return(), cache=self.cache)
        second = calculate_federal_tax(_return(), cache=self.cache)
        self.assertIs(first, second)

    def test_no_cache_always_recomputes(self):
        first = calculate_federal_tax(_return())
        second = calculate_federal_tax(_return())
        self.assertIsNot(first, second)
        self.assertEqual(first, second)


class TestTaxCalculationImmutable(unittest.TestCase):
    def test_result_cannot_be_mutated(self):
        calc = calculate_federal_tax(_return())
        with self.assertRaises(dataclasses.FrozenInstanceError):
            calc.total_tax = 0

    def test_to_dict(self):
        data = calculate_federal_tax(_return()).to_dict()
        self.assertEqual(data["filing_status"], "single")
        self.assertEqual(data["taxable_income"], 70_000)


if __name__ == "__main__":
    unittest.main()
