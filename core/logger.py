"""
Logging structuré avec contexte utilisateur (uid, email) pour le pipeline de session.
"""
import sys
import logging
from typing import Optional, Callable, List
from datetime import datetime


class ContextLogger:
    """Logger avec contexte de session (uid, user_email)."""

    def __init__(
        self,
        name: str = "veridic",
        uid: Optional[str] = None,
        user_email: Optional[str] = None,
        callback: Optional[Callable[[str], None]] = None,
        verbose: bool = False,
        buffer: Optional[List[str]] = None,
        echo: bool = True,
    ):
        """
        Initialise le logger.

        Args:
            name: Nom du logger Python sous-jacent
            uid: Identifiant de l'utilisateur (pour traçabilité)
            user_email: Email utilisateur (pour traçabilité)
            callback: Fonction de callback pour les logs (ex: st.toast)
            verbose: Mode verbose (logs DEBUG)
            buffer: Buffer partagé (loggers dérivés via with_context)
            echo: Recopie sur stdout
        """
        self.name = name
        self.uid = uid
        self.user_email = user_email
        self.callback = callback
        self.verbose = verbose
        self.echo = echo
        self.logs_buffer = buffer if buffer is not None else []

        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    def with_context(self, uid: Optional[str] = None, user_email: Optional[str] = None) -> "ContextLogger":
        """Logger dérivé partageant buffer, callback et niveau."""
        return ContextLogger(
            name=self.name,
            uid=uid,
            user_email=user_email,
            callback=self.callback,
            verbose=self.verbose,
            buffer=self.logs_buffer,
            echo=self.echo,
        )

    def _format_message(self, level: str, message: str) -> str:
        """Formate un message avec contexte."""
        timestamp = datetime.now().strftime("%H:%M:%S")
        context_parts = [timestamp]

        if self.uid:
            context_parts.append(f"[{self.uid[:8]}]")
        if self.user_email:
            context_parts.append(f"[{self.user_email.split('@')[0]}]")

        level_str = f"[{level}]" if level != "INFO" else ""
        context = " ".join(filter(None, context_parts + [level_str]))

        return f"{context} {message}" if context else message

    def info(self, message: str):
        formatted = self._format_message("INFO", message)
        self._output(formatted)
        self.logger.info(formatted)

    def debug(self, message: str):
        """Log au niveau DEBUG (seulement si verbose)."""
        if self.verbose:
            formatted = self._format_message("DEBUG", message)
            self._output(formatted)
            self.logger.debug(formatted)

    def warning(self, message: str):
        formatted = self._format_message("⚠️ WARNING", message)
        self._output(formatted)
        self.logger.warning(formatted)

    def error(self, message: str):
        formatted = self._format_message("❌ ERROR", message)
        self._output(formatted)
        self.logger.error(formatted)

    def _output(self, message: str):
        """Affiche le message via stdout et callback."""
        if self.echo:
            print(message, file=sys.stdout, flush=True)
        self.logs_buffer.append(message)

        if self.callback:
            self.callback(message)

    def get_logs(self, limit: int = 100) -> list:
        """Récupère les logs récents."""
        return self.logs_buffer[-limit:]

    def clear_logs(self):
        # del [:] et non une nouvelle liste : le buffer est partagé
        del self.logs_buffer[:]


# Global logger (contexte par défaut)
_default_logger: Optional[ContextLogger] = None


def get_logger(
    uid: Optional[str] = None,
    user_email: Optional[str] = None,
    callback: Optional[Callable] = None,
    verbose: bool = False,
) -> ContextLogger:
    """Récupère ou crée le logger par défaut."""
    global _default_logger
    if _default_logger is None:
        _default_logger = ContextLogger(
            uid=uid,
            user_email=user_email,
            callback=callback,
            verbose=verbose,
        )
    return _default_logger


def set_default_logger(logger: Optional[ContextLogger]):
    """Définit (ou réinitialise avec None) le logger par défaut global."""
    global _default_logger
    _default_logger = logger
