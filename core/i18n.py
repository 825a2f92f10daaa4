"""
VERIDIC - Internationalisation (FR / EN).
Français par défaut. Résolution de clés pointées avec repli sur le français,
puis sur la clé elle-même ; substitution littérale des paramètres {nom}.
"""

import logging
from typing import Any, Mapping, Optional

from core.translations import LANGUAGE_NAMES, TRANSLATIONS

logger = logging.getLogger(__name__)

DEFAULT_LANG = "fr"
LANGUAGES = ("fr", "en")


def is_supported(code) -> bool:
    return isinstance(code, str) and code in LANGUAGES


def normalize_language(code) -> str:
    """Code supporté tel quel, sinon la langue par défaut."""
    return code if is_supported(code) else DEFAULT_LANG


def available_languages() -> list:
    """[(code, libellé)] pour le sélecteur de langue."""
    return [(code, LANGUAGE_NAMES[code]) for code in LANGUAGES]


def _lookup(catalog: Optional[Mapping], key: str) -> Optional[str]:
    """Parcours segment par segment ; None dès qu'un segment manque."""
    node: Any = catalog
    for segment in key.split("."):
        if not segment or not isinstance(node, Mapping) or segment not in node:
            return None
        node = node[segment]
    # chaîne vide = traduction absente
    return node if isinstance(node, str) and node else None


def _interpolate(text: str, params: Mapping) -> str:
    # Remplacements successifs, dans l'ordre des paramètres : une valeur
    # contenant "{autre}" peut être substituée par une entrée suivante.
    for name, value in params.items():
        text = text.replace("{" + str(name) + "}", str(value))
    return text


def has_key(key: str, language: str, catalogs: Mapping = TRANSLATIONS) -> bool:
    """Présence stricte de la clé dans la langue donnée (sans repli)."""
    return _lookup(catalogs.get(language), key) is not None


def resolve(
    key: str,
    language: str = DEFAULT_LANG,
    params: Optional[Mapping] = None,
    catalogs: Mapping = TRANSLATIONS,
) -> str:
    """Retourne la chaîne traduite pour la clé donnée. Ne lève jamais."""
    if not isinstance(key, str):
        return str(key)
    language = normalize_language(language)
    text = _lookup(catalogs.get(language), key)
    if text is None and language != DEFAULT_LANG:
        text = _lookup(catalogs.get(DEFAULT_LANG), key)
        if text is not None:
            logger.debug("Clé %s absente en %s, repli sur %s", key, language, DEFAULT_LANG)
    if text is None:
        logger.debug("Clé de traduction introuvable : %s", key)
        return key
    if params:
        text = _interpolate(text, params)
    return text


# ---------------------------------------------------------------------------
# Raccourcis pour l'UI : contexte construit sur la session runtime
# ---------------------------------------------------------------------------

def _session_context():
    from core.localization import LocalizationContext, SessionLanguageStore
    return LocalizationContext(SessionLanguageStore(), repair=True)


def get_current_lang() -> str:
    """Retourne la langue active (fr ou en). Français par défaut."""
    return _session_context().language


def set_lang(lang: str):
    """Définit la langue (fr ou en). Lève UnsupportedLanguageError sinon."""
    _session_context().set_language(lang)


def t(key: str, params: Optional[Mapping] = None) -> str:
    """Traduit la clé dans la langue de la session courante."""
    return _session_context().t(key, params)
