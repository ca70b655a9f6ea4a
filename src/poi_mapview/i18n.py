"""Runtime UI localization (gettext, domain ``poi_mapview``)."""

from __future__ import annotations

import gettext
from pathlib import Path
from typing import Optional

DOMAIN = "poi_mapview"
LOCALE_DIR = Path(__file__).with_name("locale")

_translation: gettext.NullTranslations = gettext.NullTranslations()


def set_language(lang: Optional[str]) -> gettext.NullTranslations:
    """Switch the active catalog. Unknown languages fall back to the source strings."""
    global _translation
    languages = [lang] if lang else None
    _translation = gettext.translation(DOMAIN, localedir=LOCALE_DIR, languages=languages, fallback=True)
    return _translation


def _(message: str) -> str:
    return _translation.gettext(message)
