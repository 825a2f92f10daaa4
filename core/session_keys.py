"""
VERIDIC - Clés de session et rôles.
Centralise les noms de clés partagés par l'app Streamlit, l'API et le coeur.
Agnostique UI : utilise core.runtime.get_session().
"""

from core.runtime import get_session

# Authentification
SESSION_AUTHENTICATED = "authenticated"
SESSION_USER_UID = "user_uid"
SESSION_USER_EMAIL = "user_email"
SESSION_USER_ROLE = "user_role"

# Préférence de langue (même clé que le localStorage du frontend)
SESSION_LANG = "language"

# Rôles, du moins au plus privilégié
ROLE_USER = "user"
ROLE_EDITOR = "editor"
ROLE_ADMIN = "admin"
ROLES = (ROLE_USER, ROLE_EDITOR, ROLE_ADMIN)


def normalize_role(role) -> str:
    """Ramène toute valeur inconnue ou vide au rôle 'user'."""
    if isinstance(role, str) and role.strip().lower() in ROLES:
        return role.strip().lower()
    return ROLE_USER


def role_allows(role, required: str) -> bool:
    """admin >= editor >= user."""
    return ROLES.index(normalize_role(role)) >= ROLES.index(required)


def get_current_user_email():
    """Retourne l'email de l'utilisateur connecté (ou None)."""
    return get_session().get(SESSION_USER_EMAIL)


def get_current_role() -> str:
    return normalize_role(get_session().get(SESSION_USER_ROLE, ROLE_USER))


def is_authenticated():
    """Indique si la session est authentifiée."""
    return get_session().get(SESSION_AUTHENTICATED, False)


def is_editor():
    """Éditeur ou admin : accès à la gestion des articles."""
    return role_allows(get_current_role(), ROLE_EDITOR)


def is_admin():
    """Indique si l'utilisateur a le rôle admin."""
    return get_current_role() == ROLE_ADMIN
