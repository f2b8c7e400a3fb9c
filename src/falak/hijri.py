"""Tabular Islamic (Hijri) calendar, Kuwaiti algorithm.

The year is split into 30-year cycles of 10631 days; 11 years of each cycle
carry a 30th day in Ḏū ʾl-Ḥijjah. Months alternate 30/29 days. Results are
arithmetic approximations and can differ by a day or two from a sighted
calendar, which is what ``offset_days`` corrects for.
"""

import math
from datetime import date

from falak.i18n import t
from falak.julian import julian_day_number
from falak.models import HijriDate, HijriExplanation, HijriOutOfRange

CYCLE_DAYS = 10631  # 30 Islamic years
AVERAGE_YEAR = CYCLE_DAYS / 30
EPOCH = 1948084  # Kuwaiti epoch; JDNs before it have no Hijri date
SHIFT = 8.01 / 60

WEEKDAY_NAMES: tuple[str, ...] = (
    "al-ʾAḥad",
    "al-ʾIthnayn",
    "ath-Thulāthāʾ",
    "al-ʾArbiʿāʾ",
    "al-Khamīs",
    "al-Jumuʿah",
    "al-Sabt",
)

MONTH_NAMES: tuple[str, ...] = (
    "al-Muḥarram",
    "Ṣafar",
    "Rabīʿ al-ʾAwwal",
    "Rabīʿ al-ʾĀkhir",
    "Jumadā al-ʾŪlā",
    "Jumādā al-ʾĀkhirah",
    "Rajab",
    "Shaʿbān",
    "Ramaḍān",
    "Shawwāl",
    "Ḏū ʾl-Qaʿdah",
    "Ḏū ʾl-Ḥijjah",
)


def weekday_index(julian_day_number: int) -> int:
    """0 = Sunday … 6 = Saturday."""
    return (julian_day_number + 1) % 7


def explain(julian_day_number: int, offset_days: int = 0) -> HijriExplanation:
    """Convert a JDN to a Hijri date, keeping every intermediate value.

    The weekday always belongs to the unshifted civil day; ``offset_days``
    only moves the Hijri date.

    Raises:
        HijriOutOfRange: If the shifted JDN precedes the Islamic epoch.
    """
    shifted = julian_day_number + offset_days
    if shifted < EPOCH:
        raise HijriOutOfRange(
            f"Julian Day Number {shifted} precedes the Islamic epoch {EPOCH}"
        )

    offset_from_epoch = shifted - EPOCH
    cycle_index = offset_from_epoch // CYCLE_DAYS
    remainder_days = offset_from_epoch - CYCLE_DAYS * cycle_index
    years_into_cycle = math.floor((remainder_days - SHIFT) / AVERAGE_YEAR)
    year = 30 * cycle_index + years_into_cycle
    remainder_after_years = remainder_days - math.floor(years_into_cycle * AVERAGE_YEAR + SHIFT)

    raw_month = min(math.floor((remainder_after_years + 28.5001) / 29.5), 12)
    day = remainder_after_years - math.floor(29.5001 * raw_month - 29)
    month_index = raw_month - 1

    return HijriExplanation(
        julian_day_number=shifted,
        offset_from_epoch=offset_from_epoch,
        cycle_index=cycle_index,
        remainder_days=remainder_days,
        years_into_cycle=years_into_cycle,
        remainder_after_years=remainder_after_years,
        raw_month=raw_month,
        date=HijriDate(
            day=day,
            month_index=month_index,
            month_name=MONTH_NAMES[month_index],
            year=year,
            weekday_name=WEEKDAY_NAMES[weekday_index(julian_day_number)],
        ),
    )


def convert(julian_day_number: int, offset_days: int = 0) -> HijriDate:
    """Convert a Julian Day Number to a Hijri date.

    Args:
        julian_day_number: Integer JDN of the civil day.
        offset_days: Sighting adjustment, typically -2..+2.

    Returns:
        HijriDate snapshot.

    Raises:
        HijriOutOfRange: If the shifted JDN precedes the Islamic epoch.
    """
    return explain(julian_day_number, offset_days).date


def hijri_date(civil_date: date, offset_days: int = 0) -> HijriDate:
    """Hijri date of a Gregorian civil date."""
    return convert(julian_day_number(civil_date), offset_days)


def format_hijri_date(hijri: HijriDate, lang: str = "en") -> str:
    """Format like "al-ʾIthnayn, 2 Ramaḍān 1445 AH"."""
    return f"{hijri.weekday_name}, {hijri.day} {hijri.month_name} {hijri.year} {t('hijri_suffix', lang)}"
