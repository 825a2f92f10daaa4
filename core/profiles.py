"""
VERIDIC - Profils (couche autorisation) : lecture asynchrone du rôle par uid.
Un profil absent est un résultat normal (None), pas une erreur.
"""

from typing import Mapping, Optional, Protocol

from core.runtime import get_backend, get_secrets
from core.session_keys import ROLES

ProfileRecord = Mapping

# Champs modifiables via update_profile
PROFILE_FIELDS = ("display_name", "role")


class ProfileStore(Protocol):
    async def get_profile(self, uid: str) -> Optional[ProfileRecord]: ...


def clean_profile_updates(updates: Mapping) -> dict:
    """Filtre les champs modifiables ; ValueError si un rôle est inconnu."""
    cleaned = {k: v for k, v in (updates or {}).items() if k in PROFILE_FIELDS and v is not None}
    if "role" in cleaned:
        role = str(cleaned["role"]).strip().lower()
        if role not in ROLES:
            raise ValueError(f"Rôle inconnu : {cleaned['role']}")
        cleaned["role"] = role
    return cleaned


class MemoryProfileStore:
    """Profils en mémoire, indexés par uid."""

    def __init__(self, profiles: Optional[dict] = None):
        self.profiles = dict(profiles or {})

    async def get_profile(self, uid: str) -> Optional[ProfileRecord]:
        return self.profiles.get(uid)

    async def update_profile(self, uid: str, updates: Mapping) -> bool:
        if uid not in self.profiles:
            return False
        self.profiles[uid] = {**self.profiles[uid], **clean_profile_updates(updates)}
        return True


def get_profile_store(secrets: dict = None) -> ProfileStore:
    """Retourne le ProfileStore (Supabase ou Sheets) selon les secrets."""
    secrets = secrets if secrets is not None else get_secrets()
    if get_backend(secrets) == "sheets":
        from core.auth import SheetProfileStore
        return SheetProfileStore(secrets)
    from core.auth_supabase import SupabaseProfileStore
    return SupabaseProfileStore(secrets=secrets)
