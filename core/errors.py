"""
VERIDIC - Exceptions du coeur (session + localisation).
"""


class VeridicError(Exception):
    """Base des erreurs applicatives."""


class UnsupportedLanguageError(VeridicError, ValueError):
    """Code langue hors de l'énumération supportée (fr, en)."""

    def __init__(self, code):
        self.code = code
        super().__init__(f"Langue non supportée : {code!r}")


class ConfigurationError(VeridicError):
    """Secrets manquants pour construire un backend (Supabase, Google Sheets)."""


__all__ = ["VeridicError", "UnsupportedLanguageError", "ConfigurationError"]
