"""
VERIDIC - Authentification et profils via Supabase.
Identité : événements de supabase.auth (on_auth_state_change).
Profils : table users (colonnes uid, role). Lit les secrets via core.runtime.get_secrets().
Secrets : supabase_url, supabase_service_role_key (ou table [supabase]).
"""

import asyncio
import logging
from typing import Optional

from core.errors import ConfigurationError
from core.identity import Identity, IdentityListener, Unsubscribe
from core.profiles import ProfileRecord, clean_profile_updates
from core.runtime import get_secrets
from core.session_keys import ROLE_USER

logger = logging.getLogger(__name__)

# Événements supabase.auth propagés comme transitions d'identité
FORWARDED_EVENTS = ("INITIAL_SESSION", "SIGNED_IN", "USER_UPDATED")


def _pick(secrets: dict, name: str) -> str:
    nested = secrets.get("supabase") or {}
    value = secrets.get(name) or (nested.get(name) if isinstance(nested, dict) else "")
    return (value or "").strip()


def get_client(secrets: dict = None):
    """Crée le client Supabase. Lève ConfigurationError si les secrets manquent."""
    secrets = secrets or get_secrets()
    url = _pick(secrets, "supabase_url")
    key = _pick(secrets, "supabase_service_role_key") or _pick(secrets, "supabase_key")
    if not url or not key:
        raise ConfigurationError("supabase_url ou supabase_service_role_key manquant dans les secrets")
    from supabase import create_client
    return create_client(url, key)


def identity_from_user(user) -> Identity:
    """Convertit un utilisateur supabase.auth en Identity."""
    metadata = getattr(user, "user_metadata", None) or {}
    return Identity(
        uid=str(user.id),
        email=getattr(user, "email", None) or "",
        display_name=metadata.get("display_name") or metadata.get("full_name") or "",
    )


def insert_profile(client, identity: Identity, role: str = ROLE_USER, table: str = "users"):
    """Crée la ligne users d'une identité (rôle 'user' par défaut)."""
    client.table(table).insert({
        "uid": identity.uid,
        "email": identity.email,
        "display_name": identity.display_name,
        "role": role,
    }).execute()


def update_profile_row(client, uid: str, updates: dict, table: str = "users", key_column: str = "uid") -> bool:
    cleaned = clean_profile_updates(updates)
    if not cleaned:
        return False
    r = client.table(table).update(cleaned).eq(key_column, uid).execute()
    return bool(r.data)


class SupabaseProfileStore:
    """Lecture et mise à jour du rôle dans la table users."""

    def __init__(self, client=None, secrets: dict = None, table: str = "users", key_column: str = "uid"):
        self.table = table
        self.key_column = key_column
        self.client = client
        if self.client is None:
            try:
                self.client = get_client(secrets)
            except Exception as e:
                logger.error("Erreur d'initialisation SupabaseProfileStore : %s", e)
                self.client = None

    def _fetch(self, uid: str) -> Optional[ProfileRecord]:
        r = self.client.table(self.table).select("*").eq(self.key_column, uid).limit(1).execute()
        if not r.data:
            return None
        return r.data[0]

    async def get_profile(self, uid: str) -> Optional[ProfileRecord]:
        if not self.client:
            raise ConnectionError("Client Supabase indisponible")
        # client synchrone : exécuté hors de la boucle
        return await asyncio.to_thread(self._fetch, uid)

    async def update_profile(self, uid: str, updates: dict) -> bool:
        """Met à jour display_name / role. ValueError si le rôle est inconnu."""
        if not self.client:
            raise ConnectionError("Client Supabase indisponible")
        return await asyncio.to_thread(update_profile_row, self.client, uid, updates, self.table, self.key_column)


class SupabaseIdentityProvider:
    """Relaye les changements d'état de supabase.auth vers un abonné."""

    def __init__(self, client=None, secrets: dict = None, table: str = "users"):
        self.client = client if client is not None else get_client(secrets)
        self.table = table

    def subscribe(self, on_change: IdentityListener) -> Unsubscribe:
        def _handler(event, session):
            if event == "SIGNED_OUT":
                on_change(None)
            elif event in FORWARDED_EVENTS and session is not None and session.user is not None:
                on_change(identity_from_user(session.user))
            else:
                logger.debug("Événement auth ignoré : %s", event)

        subscription = self.client.auth.on_auth_state_change(_handler)
        return subscription.unsubscribe

    def _ensure_profile(self, user):
        """Crée la ligne users manquante d'un compte existant (rôle 'user')."""
        identity = identity_from_user(user)
        try:
            r = self.client.table(self.table).select("uid").eq("uid", identity.uid).limit(1).execute()
            if not r.data:
                insert_profile(self.client, identity, table=self.table)
                logger.info("Profil créé pour %s", identity.email)
        except Exception as e:
            # la connexion reste valide : rôle 'user' par défaut à la résolution
            logger.error("Erreur de création du profil %s : %s", identity.uid, e)

    def sign_in(self, email: str, password: str) -> bool:
        """Connexion email / mot de passe. La transition arrive via subscribe()."""
        email_norm = (email or "").strip().lower()
        try:
            response = self.client.auth.sign_in_with_password({"email": email_norm, "password": password})
        except Exception as e:
            logger.error("Erreur de connexion Supabase : %s", e)
            raise
        user = getattr(response, "user", None)
        if user is None:
            return False
        self._ensure_profile(user)
        return True

    def sign_out(self):
        try:
            self.client.auth.sign_out()
        except Exception as e:
            logger.error("Erreur de déconnexion Supabase : %s", e)
            raise

    def register(self, email: str, password: str, display_name: str = "") -> Identity:
        """Crée le compte et sa ligne users avec le rôle 'user'."""
        email_norm = (email or "").strip().lower()
        try:
            response = self.client.auth.sign_up({
                "email": email_norm,
                "password": password,
                "options": {"data": {"display_name": display_name}},
            })
            user = getattr(response, "user", None)
            if user is None:
                raise ValueError("Inscription refusée par Supabase")
            identity = identity_from_user(user)
            if display_name and not identity.display_name:
                identity = Identity(uid=identity.uid, email=identity.email, display_name=display_name)
            insert_profile(self.client, identity, table=self.table)
            return identity
        except ValueError:
            raise
        except Exception as e:
            logger.error("Erreur d'inscription Supabase : %s", e)
            raise

    def reset_password(self, email: str):
        """Envoie l'email de réinitialisation du mot de passe."""
        email_norm = (email or "").strip().lower()
        try:
            self.client.auth.reset_password_for_email(email_norm)
        except Exception as e:
            logger.error("Erreur de réinitialisation du mot de passe : %s", e)
            raise

    def update_profile(self, uid: str, updates: dict) -> bool:
        """
        Met à jour la ligne users (display_name, role). Pour l'utilisateur
        connecté, le display_name est aussi recopié dans supabase.auth, ce qui
        déclenche USER_UPDATED.
        """
        try:
            updated = update_profile_row(self.client, uid, updates, self.table)
            display_name = updates.get("display_name")
            if display_name:
                current = self.client.auth.get_user()
                current_user = getattr(current, "user", None)
                if current_user is not None and str(current_user.id) == uid:
                    self.client.auth.update_user({"data": {"display_name": display_name}})
            return updated
        except ValueError:
            raise
        except Exception as e:
            logger.error("Erreur de mise à jour du profil %s : %s", uid, e)
            raise
