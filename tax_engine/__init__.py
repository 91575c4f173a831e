"""Federal income tax computation engine."""

from .calculation_cache import CalculationCache
from .federal_tax import FederalTaxCalculator, calculate_federal_tax
from .models import FilingStatus, TaxReturn, TaxCalculation

__all__ = [
    "CalculationCache",
    "FederalTaxCalculator",
    "calculate_federal_tax",
    "FilingStatus",
    "TaxReturn",
    "TaxCalculation",
]
