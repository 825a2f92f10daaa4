"""
VERIDIC - Contexte de localisation.
État possédé et injecté (pas de global) : langue courante, setter, t().
La préférence est lue une seule fois à la construction.
"""

import logging
from typing import Mapping, Optional, Protocol

from core.errors import UnsupportedLanguageError
from core.i18n import DEFAULT_LANG, is_supported, resolve
from core.runtime import get_session
from core.session_keys import SESSION_LANG
from core.translations import TRANSLATIONS

logger = logging.getLogger(__name__)


class LanguagePreferenceStore(Protocol):
    def get(self) -> Optional[str]: ...

    def set(self, value: str) -> None: ...


class SessionLanguageStore:
    """Préférence stockée dans la session runtime (st.session_state ou dict API)."""

    def __init__(self, session=None, key: str = SESSION_LANG):
        self._session = session
        self.key = key

    @property
    def session(self):
        return self._session if self._session is not None else get_session()

    def get(self) -> Optional[str]:
        return self.session.get(self.key)

    def set(self, value: str) -> None:
        self.session[self.key] = value


class MemoryLanguageStore:
    """Préférence en mémoire (tests, scripts)."""

    def __init__(self, value: Optional[str] = None):
        self.value = value

    def get(self) -> Optional[str]:
        return self.value

    def set(self, value: str) -> None:
        self.value = value


class LocalizationContext:
    """Langue courante + traduction liée ; seul écrivain de sa langue."""

    def __init__(self, store: LanguagePreferenceStore, catalogs: Mapping = TRANSLATIONS, repair: bool = False):
        """
        Args:
            store: Stockage de la préférence, lu une seule fois ici
            catalogs: Catalogues de traduction
            repair: Réécrit une préférence invalide avec la langue par défaut
                (l'avertissement n'est alors émis qu'une fois)
        """
        self._store = store
        self._catalogs = catalogs
        stored = store.get()
        if is_supported(stored):
            self._language = stored
        else:
            if stored is not None:
                logger.warning("Préférence de langue invalide %r, repli sur %s", stored, DEFAULT_LANG)
                if repair:
                    store.set(DEFAULT_LANG)
            self._language = DEFAULT_LANG

    @property
    def language(self) -> str:
        return self._language

    def set_language(self, language: str) -> None:
        if not is_supported(language):
            raise UnsupportedLanguageError(language)
        # Persistance d'abord : si elle échoue, la langue en mémoire ne bouge pas
        self._store.set(language)
        self._language = language

    def t(self, key: str, params: Optional[Mapping] = None) -> str:
        return resolve(key, self._language, params, self._catalogs)

    def as_dict(self) -> dict:
        """Vue exposée aux consommateurs : {language, set_language, t}."""
        return {"language": self._language, "set_language": self.set_language, "t": self.t}
