"""
VERIDIC - Identité (couche authentification, indépendante des rôles).
Un fournisseur d'identité émet Identity | None à chaque transition
(connexion, déconnexion, mise à jour du profil d'auth).
"""

from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol


@dataclass(frozen=True)
class Identity:
    uid: str
    email: str = ""
    display_name: str = ""


IdentityListener = Callable[[Optional[Identity]], None]
Unsubscribe = Callable[[], None]


class IdentityProvider(Protocol):
    def subscribe(self, on_change: IdentityListener) -> Unsubscribe: ...


class IdentityChannel:
    """Fournisseur en mémoire : le flux de connexion (ou un test) appelle emit()."""

    def __init__(self, initial: Optional[Identity] = None, replay: bool = False):
        """
        Args:
            initial: Identité courante au démarrage
            replay: Rejoue l'identité courante à chaque nouvel abonné
        """
        self.current = initial
        self.replay = replay
        self._listeners: List[IdentityListener] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, on_change: IdentityListener) -> Unsubscribe:
        self._listeners.append(on_change)

        def unsubscribe():
            if on_change in self._listeners:
                self._listeners.remove(on_change)

        if self.replay:
            on_change(self.current)
        return unsubscribe

    def emit(self, identity: Optional[Identity]):
        """Diffuse une transition, dans l'ordre d'abonnement."""
        self.current = identity
        for listener in list(self._listeners):
            listener(identity)
