"""
VERIDIC - Contexte d'exécution (agnostique UI).
L'app Streamlit appelle init() avec st.secrets et st.session_state ;
l'API appelle init() avec des secrets issus de l'environnement et un dict.
"""

import os

_secrets: dict = {}
_session: dict = {}

DEFAULT_BACKEND = "supabase"

# Variables d'environnement lues par l'API (pas de st.secrets hors Streamlit)
_ENV_SECRETS = {
    "backend": "VERIDIC_BACKEND",
    "supabase_url": "SUPABASE_URL",
    "supabase_service_role_key": "SUPABASE_SERVICE_ROLE_KEY",
    "sheet_url": "VERIDIC_SHEET_URL",
    "debug": "VERIDIC_DEBUG",
}


def init(secrets: dict = None, session=None):
    """Injecte les secrets et la session (appelé par app.py ou api)."""
    global _secrets, _session
    _secrets = secrets or {}
    _session = session if session is not None else {}


def get_secrets() -> dict:
    return _secrets


def get_session():
    return _session


def get_secret(path: str, default=None):
    """Récupère un secret par chemin (ex: 'supabase.supabase_url')."""
    keys = path.replace("[", ".").replace("]", "").split(".")
    val = _secrets
    for k in keys:
        val = val.get(k, default) if isinstance(val, dict) else default
        if val is default:
            return default
    return val


def get_backend(secrets: dict = None) -> str:
    """Backend des profils : 'supabase' ou 'sheets'."""
    source = _secrets if secrets is None else secrets
    backend = str(source.get("backend") or DEFAULT_BACKEND).strip().lower()
    return "sheets" if backend in ("sheets", "gsheet", "google_sheets") else "supabase"


def is_debug() -> bool:
    val = get_secret("debug", False)
    if isinstance(val, str):
        return val.strip().lower() in ("1", "true", "yes", "on")
    return bool(val)


def secrets_from_env(environ=None) -> dict:
    """Construit un dict de secrets depuis l'environnement (mode API)."""
    environ = os.environ if environ is None else environ
    out = {}
    for key, env_name in _ENV_SECRETS.items():
        value = environ.get(env_name)
        if value:
            out[key] = value
    return out
