"""Simple two-language (en/ar) label helper for event names and calendar strings."""

from falak.models import EventKind

_STRINGS: dict[str, dict[str, str]] = {
    "fajr": {
        "en": "Fajr",
        "ar": "الفجر",
    },
    "sunrise": {
        "en": "Sunrise",
        "ar": "الشروق",
    },
    "dhuhr": {
        "en": "Dhuhr",
        "ar": "الظهر",
    },
    "asr": {
        "en": "ʿṢr",
        "ar": "العصر",
    },
    "maghrib": {
        "en": "Maġrib",
        "ar": "المغرب",
    },
    "isha": {
        "en": "ʿIshāʾ",
        "ar": "العشاء",
    },
    "middleOfTheNight": {
        "en": "1/2 Night Begins",
        "ar": "منتصف الليل",
    },
    "lastThirdOfTheNight": {
        "en": "Last 1/3 Night Begins",
        "ar": "الثلث الأخير من الليل",
    },
    "hijri_suffix": {
        "en": "AH",
        "ar": "هـ",
    },
    "timetable_title": {
        "en": "Prayer times",
        "ar": "مواقيت الصلاة",
    },
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key


def event_labels(lang: str = "en") -> dict[EventKind, str]:
    """Display name for every event kind in ``lang``."""
    return {kind: t(kind.value, lang) for kind in EventKind}
