"""
VERIDIC - Résolution de session.
Fusionne le flux d'identités (authentification) et la lecture asynchrone du
profil (rôle) en un état unique {user, loading}.

Chaque transition d'identité incrémente un compteur de génération ; le
résultat d'une lecture de profil n'est appliqué que si sa génération est
toujours la génération courante. Une lecture lente lancée pour une identité
précédente ne peut donc jamais écraser l'état d'une identité plus récente.
"""

import asyncio
from dataclasses import dataclass
from typing import Callable, List, Mapping, Optional, Set

from core.identity import Identity, IdentityProvider
from core.logger import ContextLogger, get_logger
from core.profiles import ProfileStore
from core.runtime import get_session, is_debug
from core.session_keys import (
    ROLE_USER,
    SESSION_AUTHENTICATED,
    SESSION_USER_EMAIL,
    SESSION_USER_ROLE,
    SESSION_USER_UID,
    normalize_role,
)


@dataclass(frozen=True)
class AuthUser:
    uid: str
    email: str
    display_name: str
    role: str = ROLE_USER


@dataclass(frozen=True)
class SessionState:
    user: Optional[AuthUser] = None
    loading: bool = True


StateListener = Callable[[SessionState], None]


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def merge_user(identity: Identity, profile: Optional[Mapping]) -> AuthUser:
    """Identité + profil ; rôle 'user' si profil absent ou rôle inconnu."""
    role = profile.get("role") if isinstance(profile, Mapping) else None
    return AuthUser(
        uid=identity.uid,
        email=identity.email,
        display_name=identity.display_name,
        role=normalize_role(role),
    )


def write_session_keys(state: SessionState, session):
    """Reporte l'état résolu dans les clés lues par core.session_keys."""
    user = state.user
    session[SESSION_AUTHENTICATED] = user is not None and not state.loading
    session[SESSION_USER_UID] = user.uid if user else None
    session[SESSION_USER_EMAIL] = user.email if user else None
    session[SESSION_USER_ROLE] = user.role if user else ROLE_USER


class SessionResolver:
    """Seul écrivain de SessionState ; un abonnement au fournisseur d'identité."""

    def __init__(
        self,
        identities: IdentityProvider,
        profiles: ProfileStore,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        log: Optional[ContextLogger] = None,
    ):
        """
        Args:
            identities: Fournisseur d'identité (subscribe -> unsubscribe)
            profiles: Lecture asynchrone des profils
            loop: Boucle propriétaire ; les événements reçus depuis un autre
                thread y sont relayés. Par défaut, la boucle courante.
            log: Logger de contexte (par défaut le logger global)
        """
        self._profiles = profiles
        self._loop = loop
        self._log = log or get_logger(verbose=is_debug())
        self._state = SessionState()
        self._generation = 0
        self._pending: Set[asyncio.Task] = set()
        self._listeners: List[StateListener] = []
        self._closed = False
        self._unsubscribe = identities.subscribe(self._on_identity)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def user(self) -> Optional[AuthUser]:
        return self._state.user

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def generation(self) -> int:
        return self._generation

    def watch(self, listener: StateListener) -> Callable[[], None]:
        """Appelle listener à chaque nouvel état. Retourne la fonction de désinscription."""
        self._listeners.append(listener)

        def unwatch():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unwatch

    def sync_to_session(self, session=None) -> Callable[[], None]:
        """Recopie chaque nouvel état dans la session runtime (clés de core.session_keys)."""

        def _write(state: SessionState):
            write_session_keys(state, session if session is not None else get_session())

        _write(self._state)
        return self.watch(_write)

    def close(self):
        """Libère l'abonnement ; les lectures encore en vol seront ignorées."""
        if self._closed:
            return
        self._closed = True
        self._generation += 1
        self._unsubscribe()
        self._log.debug(f"Résolveur de session fermé (génération {self._generation})")

    async def wait_settled(self):
        """Attend la fin de toutes les lectures de profil en cours."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _on_identity(self, identity: Optional[Identity]):
        running = _running_loop()
        if self._loop is not None and running is not self._loop:
            self._loop.call_soon_threadsafe(self._handle_identity, identity)
            return
        self._handle_identity(identity)

    def _handle_identity(self, identity: Optional[Identity]):
        if self._closed:
            return

        if identity is None:
            self._generation += 1
            self._log.info("Déconnexion : session vidée")
            self._set_state(SessionState(user=None, loading=False))
            return

        # Boucle trouvée avant toute modification d'état
        loop = self._loop or _running_loop()
        self._generation += 1
        generation = self._generation
        log = self._log.with_context(uid=identity.uid, user_email=identity.email)

        if loop is None:
            log.warning(f"Aucune boucle asyncio pour lire le profil, rôle '{ROLE_USER}' par défaut")
            self._set_state(SessionState(user=merge_user(identity, None), loading=False))
            return

        log.debug(f"Nouvelle identité, lecture du profil (génération {generation})")
        self._set_state(SessionState(user=self._state.user, loading=True))
        task = loop.create_task(self._lookup(generation, identity))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _lookup(self, generation: int, identity: Identity):
        log = self._log.with_context(uid=identity.uid, user_email=identity.email)
        try:
            profile = await self._profiles.get_profile(identity.uid)
        except Exception as e:
            log.warning(f"Lecture du profil impossible, rôle '{ROLE_USER}' par défaut : {e}")
            profile = None

        if generation != self._generation:
            log.debug(f"Résultat périmé ignoré (génération {generation}, courante {self._generation})")
            return

        user = merge_user(identity, profile)
        self._set_state(SessionState(user=user, loading=False))
        log.info(f"Session résolue (rôle {user.role})")

    def _set_state(self, state: SessionState):
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception as e:
                self._log.error(f"Erreur dans un observateur de session : {e}")
