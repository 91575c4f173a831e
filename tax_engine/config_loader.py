"""Load a tax return from a YAML profile or a plain dict (JSON payload)."""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import yaml

from .models import (
    FilingStatus, TaxpayerInfo, SpouseInfo, Dependent, TaxReturn,
    W2Data, Form1099Int, Form1099Div, CapitalGainTransaction,
    SelfEmploymentIncome, ScheduleCExpenses, RentalProperty, RentalExpenses,
    AboveTheLineDeductions, HSAData, TraditionalIRAContribution, RothIRAContribution,
    Form8606Data, ItemizedDeductions, EducationExpense,
)
from .tax_tables import LATEST_TAX_YEAR
from .validation import holding_period_is_long_term, validate_tax_return

logger = logging.getLogger(__name__)

# Map config / CLI filing status strings to enum
STATUS_MAP = {
    "single": FilingStatus.SINGLE,
    "married_jointly": FilingStatus.MARRIED_FILING_JOINTLY,
    "married_filing_jointly": FilingStatus.MARRIED_FILING_JOINTLY,
    "married_separately": FilingStatus.MARRIED_FILING_SEPARATELY,
    "married_filing_separately": FilingStatus.MARRIED_FILING_SEPARATELY,
    "head_of_household": FilingStatus.HEAD_OF_HOUSEHOLD,
    "qualifying_surviving_spouse": FilingStatus.QUALIFYING_SURVIVING_SPOUSE,
}


def parse_filing_status(value: Optional[str]) -> FilingStatus:
    """Unknown or missing statuses fall back to single."""
    key = (value or "single").strip().lower().replace(" ", "_").replace("-", "_")
    status = STATUS_MAP.get(key)
    if status is None:
        logger.warning("Unknown filing status %r; using single", value)
        return FilingStatus.SINGLE
    return status


def _amount(raw: Dict[str, Any], key: str, default: float = 0.0) -> float:
    value = raw.get(key)
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{key} must be a number, got {value!r}")


_TRUE_STRINGS = {"true", "yes", "y", "1"}
_FALSE_STRINGS = {"false", "no", "n", "0", ""}


def _flag(raw: Dict[str, Any], key: str, default: bool = False) -> bool:
    value = raw.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
    raise ValueError(f"{key} must be true or false, got {value!r}")


def _int(raw: Dict[str, Any], key: str, default: int = 0) -> int:
    return int(_amount(raw, key, default))


def _date(raw: Dict[str, Any], key: str) -> Optional[date]:
    value = raw.get(key)
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValueError(f"{key} must be a YYYY-MM-DD date, got {value!r}")


def _records(raw: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    items = raw.get(key) or []
    if not isinstance(items, list):
        raise ValueError(f"{key} must be a list")
    return [item for item in items if isinstance(item, dict)]


def _section(raw: Dict[str, Any], key: str) -> Optional[Dict[str, Any]]:
    value = raw.get(key)
    return value if isinstance(value, dict) else None


def _numeric_fields(cls, raw: Optional[Dict[str, Any]]):
    """Build a dataclass whose fields are all amounts from a dict."""
    raw = raw or {}
    names = cls.__dataclass_fields__.keys()
    return cls(**{name: _amount(raw, name) for name in names})


def _taxpayer(raw: Dict[str, Any]) -> TaxpayerInfo:
    spouse_raw = _section(raw, "spouse")
    spouse = None
    if spouse_raw is not None:
        spouse = SpouseInfo(
            name=spouse_raw.get("name", ""),
            age=_int(spouse_raw, "age", 30),
            is_blind=_flag(spouse_raw, "is_blind"),
        )
    return TaxpayerInfo(
        name=raw.get("name", "Taxpayer"),
        filing_status=parse_filing_status(raw.get("filing_status")),
        age=_int(raw, "age", 30),
        is_blind=_flag(raw, "is_blind"),
        spouse=spouse,
    )


def _capital_gain(raw: Dict[str, Any]) -> CapitalGainTransaction:
    acquired = _date(raw, "date_acquired")
    sold = _date(raw, "date_sold")
    if raw.get("is_long_term") is None:
        is_long_term = bool(acquired and sold and holding_period_is_long_term(acquired, sold))
    else:
        is_long_term = _flag(raw, "is_long_term")
    return CapitalGainTransaction(
        description=raw.get("description", ""),
        date_acquired=acquired,
        date_sold=sold,
        proceeds=_amount(raw, "proceeds"),
        cost_basis=_amount(raw, "cost_basis"),
        is_long_term=is_long_term,
    )


def _self_employment(raw: Optional[Dict[str, Any]]) -> Optional[SelfEmploymentIncome]:
    if raw is None:
        return None
    return SelfEmploymentIncome(
        business_name=raw.get("business_name", ""),
        business_code=str(raw.get("business_code", "")),
        gross_receipts=_amount(raw, "gross_receipts"),
        returns=_amount(raw, "returns"),
        cost_of_goods_sold=_amount(raw, "cost_of_goods_sold"),
        expenses=_numeric_fields(ScheduleCExpenses, _section(raw, "expenses")),
    )


def tax_return_from_dict(raw: Dict[str, Any]) -> TaxReturn:
    """
    Build a TaxReturn from a nested dict.

    Args:
        raw: Parsed YAML or JSON with the sections of a tax return.

    Returns:
        TaxReturn populated from raw.

    Raises:
        ValueError: raw is not a mapping, or an amount or date is malformed.
    """
    if not isinstance(raw, dict):
        raise ValueError("Tax return must be a mapping")

    hsa_raw = _section(raw, "hsa")
    trad_raw = _section(raw, "traditional_ira")
    roth_raw = _section(raw, "roth_ira")
    itemized_raw = _section(raw, "itemized_deductions")
    form_8606_raw = _section(raw, "form_8606")

    return TaxReturn(
        taxpayer=_taxpayer(_section(raw, "taxpayer") or {}),
        tax_year=_int(raw, "tax_year", LATEST_TAX_YEAR),
        dependents=[
            Dependent(
                name=d.get("name", ""),
                relationship=d.get("relationship", ""),
                birth_date=_date(d, "birth_date"),
                is_qualifying_child_for_ctc=_flag(d, "is_qualifying_child_for_ctc"),
                months_lived_with_taxpayer=_int(d, "months_lived_with_taxpayer", 12),
            )
            for d in _records(raw, "dependents")
        ],
        w2_forms=[
            W2Data(
                employer_name=w.get("employer_name", ""),
                employer_ein=w.get("employer_ein"),
                wages=_amount(w, "wages"),
                federal_withheld=_amount(w, "federal_withheld"),
                social_security_wages=_amount(w, "social_security_wages"),
                social_security_tax=_amount(w, "social_security_tax"),
                medicare_wages=_amount(w, "medicare_wages"),
                medicare_tax=_amount(w, "medicare_tax"),
            )
            for w in _records(raw, "w2_forms")
        ],
        form_1099_int=[
            Form1099Int(payer_name=f.get("payer_name", ""), interest_income=_amount(f, "interest_income"))
            for f in _records(raw, "form_1099_int")
        ],
        form_1099_div=[
            Form1099Div(
                payer_name=f.get("payer_name", ""),
                ordinary_dividends=_amount(f, "ordinary_dividends"),
                qualified_dividends=_amount(f, "qualified_dividends"),
            )
            for f in _records(raw, "form_1099_div")
        ],
        capital_gains=[_capital_gain(t) for t in _records(raw, "capital_gains")],
        self_employment=_self_employment(_section(raw, "self_employment")),
        rental_properties=[
            RentalProperty(
                address=p.get("address", ""),
                property_type=p.get("property_type", "single-family"),
                rental_income=_amount(p, "rental_income"),
                expenses=_numeric_fields(RentalExpenses, _section(p, "expenses")),
            )
            for p in _records(raw, "rental_properties")
        ],
        above_the_line=_numeric_fields(AboveTheLineDeductions, _section(raw, "above_the_line")),
        hsa=HSAData(
            contributions=_amount(hsa_raw, "contributions"),
            is_family=_flag(hsa_raw, "is_family"),
        ) if hsa_raw is not None else None,
        traditional_ira=TraditionalIRAContribution(
            amount=_amount(trad_raw, "amount"),
            is_deductible=_flag(trad_raw, "is_deductible"),
        ) if trad_raw is not None else None,
        roth_ira=RothIRAContribution(
            amount=_amount(roth_raw, "amount"),
        ) if roth_raw is not None else None,
        itemized_deductions=(
            _numeric_fields(ItemizedDeductions, itemized_raw) if itemized_raw is not None else None
        ),
        education_expenses=[
            EducationExpense(
                student_name=e.get("student_name", ""),
                institution=e.get("institution", ""),
                tuition_and_fees=_amount(e, "tuition_and_fees"),
                is_first_four_years=_flag(e, "is_first_four_years"),
            )
            for e in _records(raw, "education_expenses")
        ],
        form_8606=(
            _numeric_fields(Form8606Data, form_8606_raw) if form_8606_raw is not None else None
        ),
        estimated_tax_payments=_amount(raw, "estimated_tax_payments"),
    )


def load_config(path: str) -> Optional[TaxReturn]:
    """
    Load a tax return from a YAML file.

    Args:
        path: Path to the YAML config file.

    Returns:
        TaxReturn if successful, None otherwise.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except FileNotFoundError:
        print(f"Config file not found: {path}")
        return None
    except (OSError, yaml.YAMLError) as e:
        print(f"Error reading config file: {e}")
        return None

    if not raw:
        return None

    try:
        tax_return = tax_return_from_dict(raw)
    except ValueError as e:
        print(f"Invalid config file {path}: {e}")
        return None

    for issue in validate_tax_return(tax_return):
        logger.warning("%s: %s", issue.field, issue.message)

    return tax_return
