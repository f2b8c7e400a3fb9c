"""Calculation method presets.

A closed enumeration: each member carries its own constants, so an unknown
method name cannot reach the calculator.
"""

from enum import Enum

from falak.models import (
    CalculationParameters,
    EventKind,
    HighLatitudeRule,
    Madhab,
    Shafaq,
)

_METHOD_TOLERANCE = 0.01


class CalculationMethod(Enum):
    """Named presets: (label, fajr angle, isha angle, isha interval, adjustments, seasonal)."""

    OTHER = "Other"
    MUSLIM_WORLD_LEAGUE = "MuslimWorldLeague"
    EGYPTIAN = "Egyptian"
    KARACHI = "Karachi"
    UMM_AL_QURA = "UmmAlQura"
    DUBAI = "Dubai"
    MOONSIGHTING_COMMITTEE = "MoonsightingCommittee"
    NORTH_AMERICA = "NorthAmerica"
    KUWAIT = "Kuwait"
    QATAR = "Qatar"
    SINGAPORE = "Singapore"
    TURKEY = "Turkey"

    @property
    def label(self) -> str:
        return _PRESETS[self][0]

    @property
    def fajr_angle(self) -> float:
        return _PRESETS[self][1]

    @property
    def isha_angle(self) -> float:
        return _PRESETS[self][2]

    @property
    def isha_interval_minutes(self) -> float:
        return _PRESETS[self][3]

    @property
    def adjustments(self) -> dict[EventKind, float]:
        return dict(_PRESETS[self][4])

    @property
    def seasonal_twilight(self) -> bool:
        return _PRESETS[self][5]

    def parameters(
        self,
        time_zone: str,
        madhab: Madhab = Madhab.SHAFI,
        high_latitude_rule: HighLatitudeRule = HighLatitudeRule.MIDDLE_OF_THE_NIGHT,
        shafaq: Shafaq = Shafaq.GENERAL,
        fajr_angle: float | None = None,
        isha_angle: float | None = None,
        isha_interval_minutes: float | None = None,
    ) -> CalculationParameters:
        """Build validated parameters from this preset.

        Explicit angle/interval arguments override the preset's values. An
        Isha angle is stored as given even when a positive interval makes the
        calculator ignore it.

        Raises:
            InvalidParameterCombination: If an override is out of range.
        """
        interval = (
            self.isha_interval_minutes if isha_interval_minutes is None else isha_interval_minutes
        )
        isha = self.isha_angle if isha_angle is None else isha_angle
        return CalculationParameters(
            fajr_angle=self.fajr_angle if fajr_angle is None else fajr_angle,
            isha_angle=isha,
            isha_interval_minutes=interval,
            time_zone=time_zone,
            madhab=madhab,
            high_latitude_rule=high_latitude_rule,
            shafaq=shafaq,
            method_name=self.value,
            seasonal_twilight=self.seasonal_twilight,
            adjustments=self.adjustments,
        )


_E = EventKind

_PRESETS: dict[CalculationMethod, tuple[str, float, float, float, dict[EventKind, float], bool]] = {
    CalculationMethod.OTHER: ("Nautical Twilight (12°, 12°)", 12.0, 12.0, 0.0, {}, False),
    CalculationMethod.MUSLIM_WORLD_LEAGUE: (
        "Muslim World League (18°, 17°)", 18.0, 17.0, 0.0, {_E.DHUHR: 1}, False,
    ),
    CalculationMethod.EGYPTIAN: (
        "Egyptian General Authority (19.5°, 17.5°)", 19.5, 17.5, 0.0, {_E.DHUHR: 1}, False,
    ),
    CalculationMethod.KARACHI: (
        "Karachi - University of Islamic Sciences (18°, 18°)", 18.0, 18.0, 0.0,
        {_E.DHUHR: 1}, False,
    ),
    CalculationMethod.UMM_AL_QURA: ("Umm al-Qura - Makkah (18.5°, 90 min)", 18.5, 0.0, 90.0, {}, False),
    CalculationMethod.DUBAI: (
        "Dubai (18.2°, 18.2°)", 18.2, 18.2, 0.0,
        {_E.SUNRISE: -3, _E.DHUHR: 3, _E.ASR: 3, _E.MAGHRIB: 3}, False,
    ),
    CalculationMethod.MOONSIGHTING_COMMITTEE: (
        "Moonsighting Committee Worldwide (18°, 18°)", 18.0, 18.0, 0.0,
        {_E.DHUHR: 5, _E.MAGHRIB: 3}, True,
    ),
    CalculationMethod.NORTH_AMERICA: ("North America - ISNA (15°, 15°)", 15.0, 15.0, 0.0, {_E.DHUHR: 1}, False),
    CalculationMethod.KUWAIT: ("Kuwait (18°, 17.5°)", 18.0, 17.5, 0.0, {}, False),
    CalculationMethod.QATAR: ("Qatar (18°, 90 min)", 18.0, 0.0, 90.0, {}, False),
    CalculationMethod.SINGAPORE: ("Singapore (20°, 18°)", 20.0, 18.0, 0.0, {_E.DHUHR: 1}, False),
    CalculationMethod.TURKEY: (
        "Turkey - Diyanet (18°, 17°)", 18.0, 17.0, 0.0,
        {_E.SUNRISE: -7, _E.DHUHR: 5, _E.ASR: 4, _E.MAGHRIB: 7}, False,
    ),
}


def detect_method(
    fajr_angle: float, isha_angle: float, isha_interval_minutes: float = 0.0
) -> CalculationMethod:
    """Map custom angles back onto the preset they match, or OTHER."""
    for method in CalculationMethod:
        if (
            abs(method.isha_interval_minutes - isha_interval_minutes) < _METHOD_TOLERANCE
            and abs(method.fajr_angle - fajr_angle) < _METHOD_TOLERANCE
            and abs(method.isha_angle - isha_angle) < _METHOD_TOLERANCE
        ):
            return method
    return CalculationMethod.OTHER
