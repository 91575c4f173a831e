"""Federal rate and threshold tables, keyed by tax year.

Pure data. Bracket lists are (upper_limit, rate) pairs in ascending order;
the top bracket's upper limit is infinity.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

from .models import FilingStatus

logger = logging.getLogger(__name__)

_S = FilingStatus.SINGLE
_MFJ = FilingStatus.MARRIED_FILING_JOINTLY
_MFS = FilingStatus.MARRIED_FILING_SEPARATELY
_HOH = FilingStatus.HEAD_OF_HOUSEHOLD
_QSS = FilingStatus.QUALIFYING_SURVIVING_SPOUSE

INF = float('inf')

# Year-independent constants
MEDICAL_AGI_FLOOR_RATE = 0.075  # 7.5% of AGI
SALT_CAP = 10_000
CAPITAL_LOSS_LIMIT = 3_000
MEALS_DEDUCTION_RATE = 0.50

SE_INCOME_FACTOR = 0.9235  # 92.35% of net profit is subject to SE tax
SE_MINIMUM_PROFIT = 400
SE_SOCIAL_SECURITY_RATE = 0.124  # 12.4%
SE_MEDICARE_RATE = 0.029  # 2.9%

ADDITIONAL_MEDICARE_RATE = 0.009
ADDITIONAL_MEDICARE_THRESHOLD = {
    _S: 200_000,
    _MFJ: 250_000,
    _MFS: 125_000,
    _HOH: 200_000,
    _QSS: 200_000,
}

AMT_PHASEOUT_RATE = 0.25  # 25 cents per dollar over the threshold
AMT_LOW_RATE = 0.26
AMT_HIGH_RATE = 0.28

CTC_PER_CHILD = 2_000
CTC_PHASEOUT_STEP = 1_000
CTC_PHASEOUT_PER_STEP = 50
CTC_PHASEOUT_THRESHOLD = {
    _S: 200_000,
    _MFJ: 400_000,
    _MFS: 200_000,
    _HOH: 200_000,
    _QSS: 200_000,
}

AOTC_FULL_RATE_EXPENSES = 2_000  # 100% of the first $2,000
AOTC_PARTIAL_RATE_EXPENSES = 2_000  # 25% of the next $2,000
AOTC_PARTIAL_RATE = 0.25
AOTC_MAX_CREDIT = 2_500
LLC_RATE = 0.20
LLC_MAX_EXPENSES = 10_000
LLC_MAX_CREDIT = 2_000

SAVERS_MAX_CONTRIBUTION = 2_000
SAVERS_MAX_CONTRIBUTION_JOINT = 4_000
SAVERS_MINIMUM_AGE = 18

QBI_RATE = 0.20


@dataclass(frozen=True)
class PhaseoutRange:
    start: float
    end: float


@dataclass(frozen=True)
class TaxYearTables:
    """All year-scoped lookup data for one tax year."""
    tax_year: int
    brackets: Dict[FilingStatus, List[Tuple[float, float]]]
    standard_deduction: Dict[FilingStatus, float]
    additional_deduction_married: float
    additional_deduction_unmarried: float
    social_security_wage_base: float
    amt_exemption: Dict[FilingStatus, float]
    amt_phaseout_threshold: Dict[FilingStatus, float]
    amt_rate_threshold: float
    # Education credits share one range per family; married = MFJ/QSS
    aotc_phaseout_single: PhaseoutRange
    aotc_phaseout_joint: PhaseoutRange
    llc_phaseout_single: PhaseoutRange
    llc_phaseout_joint: PhaseoutRange
    # (max_agi, rate) pairs; AGI above the last ceiling earns 0%
    savers_brackets: Dict[FilingStatus, List[Tuple[float, float]]]
    qbi_threshold_single: float
    qbi_threshold_joint: float
    qbi_phase_in_single: float
    qbi_phase_in_joint: float

    def additional_deduction(self, filing_status: FilingStatus) -> float:
        if filing_status.is_married:
            return self.additional_deduction_married
        return self.additional_deduction_unmarried


_BRACKETS_2025 = {
    _S: [
        (11_925, 0.10),
        (48_475, 0.12),
        (103_350, 0.22),
        (197_300, 0.24),
        (250_525, 0.32),
        (626_350, 0.35),
        (INF, 0.37),
    ],
    _MFJ: [
        (23_850, 0.10),
        (96_950, 0.12),
        (206_700, 0.22),
        (394_600, 0.24),
        (501_050, 0.32),
        (751_600, 0.35),
        (INF, 0.37),
    ],
    _MFS: [
        (11_925, 0.10),
        (48_475, 0.12),
        (103_350, 0.22),
        (197_300, 0.24),
        (250_525, 0.32),
        (375_800, 0.35),
        (INF, 0.37),
    ],
    _HOH: [
        (17_000, 0.10),
        (64_850, 0.12),
        (103_350, 0.22),
        (197_300, 0.24),
        (250_500, 0.32),
        (626_350, 0.35),
        (INF, 0.37),
    ],
}
_BRACKETS_2025[_QSS] = _BRACKETS_2025[_MFJ]

_BRACKETS_2024 = {
    _S: [
        (11_600, 0.10),
        (47_150, 0.12),
        (100_525, 0.22),
        (191_950, 0.24),
        (243_725, 0.32),
        (609_350, 0.35),
        (INF, 0.37),
    ],
    _MFJ: [
        (23_200, 0.10),
        (94_300, 0.12),
        (201_050, 0.22),
        (383_900, 0.24),
        (487_450, 0.32),
        (731_200, 0.35),
        (INF, 0.37),
    ],
    _MFS: [
        (11_600, 0.10),
        (47_150, 0.12),
        (100_525, 0.22),
        (191_950, 0.24),
        (243_725, 0.32),
        (365_600, 0.35),
        (INF, 0.37),
    ],
    _HOH: [
        (16_550, 0.10),
        (63_100, 0.12),
        (100_500, 0.22),
        (191_950, 0.24),
        (243_700, 0.32),
        (609_350, 0.35),
        (INF, 0.37),
    ],
}
_BRACKETS_2024[_QSS] = _BRACKETS_2024[_MFJ]

_SAVERS_2025 = {
    _S: [(23_750, 0.50), (25_750, 0.20), (39_500, 0.10)],
    _MFJ: [(47_500, 0.50), (51_500, 0.20), (79_000, 0.10)],
    _HOH: [(35_625, 0.50), (38_625, 0.20), (59_250, 0.10)],
}
_SAVERS_2025[_MFS] = _SAVERS_2025[_S]
_SAVERS_2025[_QSS] = _SAVERS_2025[_MFJ]

_SAVERS_2024 = {
    _S: [(23_000, 0.50), (25_000, 0.20), (38_250, 0.10)],
    _MFJ: [(46_000, 0.50), (50_000, 0.20), (76_500, 0.10)],
    _HOH: [(34_500, 0.50), (37_500, 0.20), (57_375, 0.10)],
}
_SAVERS_2024[_MFS] = _SAVERS_2024[_S]
_SAVERS_2024[_QSS] = _SAVERS_2024[_MFJ]

_EDUCATION_SINGLE = PhaseoutRange(80_000, 90_000)
_EDUCATION_JOINT = PhaseoutRange(160_000, 180_000)


# Inflation adjustments from Rev. Proc. 2024-40
TAX_TABLES_2025 = TaxYearTables(
    tax_year=2025,
    brackets=_BRACKETS_2025,
    standard_deduction={
        _S: 15_000,
        _MFJ: 30_000,
        _MFS: 15_000,
        _HOH: 22_500,
        _QSS: 30_000,
    },
    additional_deduction_married=1_600,
    additional_deduction_unmarried=2_000,
    social_security_wage_base=176_100,
    amt_exemption={
        _S: 88_100,
        _HOH: 88_100,
        _MFJ: 137_000,
        _QSS: 137_000,
        _MFS: 68_500,
    },
    amt_phaseout_threshold={
        _S: 626_350,
        _HOH: 626_350,
        _MFJ: 1_252_700,
        _QSS: 1_252_700,
        _MFS: 626_350,
    },
    amt_rate_threshold=239_100,
    aotc_phaseout_single=_EDUCATION_SINGLE,
    aotc_phaseout_joint=_EDUCATION_JOINT,
    llc_phaseout_single=_EDUCATION_SINGLE,
    llc_phaseout_joint=_EDUCATION_JOINT,
    savers_brackets=_SAVERS_2025,
    qbi_threshold_single=197_300,
    qbi_threshold_joint=394_600,
    qbi_phase_in_single=50_000,
    qbi_phase_in_joint=100_000,
)

# Inflation adjustments from Rev. Proc. 2023-34
TAX_TABLES_2024 = TaxYearTables(
    tax_year=2024,
    brackets=_BRACKETS_2024,
    standard_deduction={
        _S: 14_600,
        _MFJ: 29_200,
        _MFS: 14_600,
        _HOH: 21_900,
        _QSS: 29_200,
    },
    additional_deduction_married=1_550,
    additional_deduction_unmarried=1_950,
    social_security_wage_base=168_600,
    amt_exemption={
        _S: 85_700,
        _HOH: 85_700,
        _MFJ: 133_300,
        _QSS: 133_300,
        _MFS: 66_650,
    },
    amt_phaseout_threshold={
        _S: 609_350,
        _HOH: 609_350,
        _MFJ: 1_218_700,
        _QSS: 1_218_700,
        _MFS: 609_350,
    },
    amt_rate_threshold=232_600,
    aotc_phaseout_single=_EDUCATION_SINGLE,
    aotc_phaseout_joint=_EDUCATION_JOINT,
    llc_phaseout_single=_EDUCATION_SINGLE,
    llc_phaseout_joint=_EDUCATION_JOINT,
    savers_brackets=_SAVERS_2024,
    qbi_threshold_single=191_950,
    qbi_threshold_joint=383_900,
    qbi_phase_in_single=50_000,
    qbi_phase_in_joint=100_000,
)

TAX_TABLES = {
    2024: TAX_TABLES_2024,
    2025: TAX_TABLES_2025,
}

LATEST_TAX_YEAR = max(TAX_TABLES)


def get_tax_tables(tax_year: int = LATEST_TAX_YEAR) -> TaxYearTables:
    """Return the tables for a tax year, falling back to the latest year."""
    tables = TAX_TABLES.get(tax_year)
    if tables is None:
        logger.warning(
            "No tax tables for %s; using %s", tax_year, LATEST_TAX_YEAR
        )
        tables = TAX_TABLES[LATEST_TAX_YEAR]
    return tables
