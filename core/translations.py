"""
VERIDIC - Catalogues de traduction (FR / EN).
Arbres imbriqués, feuilles = chaînes, adressés par chemin pointé ("home.title").
Gelés à l'import (MappingProxyType) : aucune mutation possible à l'exécution.
"""

from types import MappingProxyType
from typing import Mapping


def freeze_catalog(tree: Mapping) -> Mapping:
    """Copie profonde en lecture seule d'un arbre de traductions."""
    return MappingProxyType({
        str(k): freeze_catalog(v) if isinstance(v, Mapping) else v
        for k, v in tree.items()
    })


_FR = {
    "nav": {
        "home": "Accueil",
        "articles": "Articles",
        "verify": "Vérifier",
        "admin": "Administration",
        "profile": "Mon profil",
    },
    "home": {
        "title": "Vérifiez l'information avant de la partager",
        "subtitle": "Des articles sourcés, relus et notés par notre rédaction.",
        "welcome": "Bonjour {name}",
        "latest": "Dernières vérifications",
    },
    "search": {
        "placeholder": "Rechercher un article, une source, un auteur...",
        "noResults": "Aucun résultat pour « {query} »",
    },
    "verification": {
        "verified": "Vérifié",
        "misleading": "Trompeur",
        "false": "Faux",
        "pending": "En cours de vérification",
        "methodology": "Notre méthodologie de vérification",
    },
    "articles": {
        "create": "Nouvel article",
        "edit": "Modifier l'article",
        "delete": "Supprimer",
        "confirmDelete": "Supprimer « {title} » ?",
        "by": "Par {author}, le {date}",
    },
    "auth": {
        "login": "Connexion",
        "logout": "Déconnexion",
        "email": "Adresse email",
        "password": "Mot de passe",
        "forgotPassword": "Mot de passe oublié ?",
        "loading": "Chargement de la session...",
        "signedInAs": "Connecté en tant que {email} ({role})",
        "invalidCredentials": "Identifiants invalides.",
    },
    "roles": {
        "user": "Lecteur",
        "editor": "Éditeur",
        "admin": "Administrateur",
    },
    "admin": {
        "title": "Tableau de bord",
        "users": "Utilisateurs",
        "settings": "Paramètres",
        "forbidden": "Accès réservé aux administrateurs.",
    },
    "language": {
        "label": "Langue",
        "changed": "Langue mise à jour : {language}",
    },
    "footer": {
        "rights": "Tous droits réservés.",
        "legal": "Mentions légales",
    },
    "errors": {
        "error": "Erreur",
        "generic": "Une erreur est survenue. Réessayez plus tard.",
    },
}

_EN = {
    "nav": {
        "home": "Home",
        "articles": "Articles",
        "verify": "Verify",
        "admin": "Administration",
        "profile": "My profile",
    },
    "home": {
        "title": "Check the facts before you share them",
        "subtitle": "Sourced articles, reviewed and rated by our newsroom.",
        "welcome": "Hello {name}",
        "latest": "Latest fact-checks",
    },
    "search": {
        "placeholder": "Search an article, a source, an author...",
        "noResults": "No results for \"{query}\"",
    },
    "verification": {
        "verified": "Verified",
        "misleading": "Misleading",
        "false": "False",
        "pending": "Being verified",
    },
    "articles": {
        "create": "New article",
        "edit": "Edit article",
        "delete": "Delete",
        "confirmDelete": "Delete \"{title}\"?",
        "by": "By {author}, on {date}",
    },
    "auth": {
        "login": "Sign in",
        "logout": "Sign out",
        "email": "Email address",
        "password": "Password",
        "forgotPassword": "Forgot your password?",
        "loading": "Loading session...",
        "signedInAs": "Signed in as {email} ({role})",
        "invalidCredentials": "Invalid credentials.",
    },
    "roles": {
        "user": "Reader",
        "editor": "Editor",
        "admin": "Administrator",
    },
    "admin": {
        "title": "Dashboard",
        "users": "Users",
        "settings": "Settings",
        "forbidden": "Administrators only.",
    },
    "language": {
        "label": "Language",
        "changed": "Language updated: {language}",
    },
    "footer": {
        "rights": "All rights reserved.",
    },
    "errors": {
        "error": "Error",
        "generic": "Something went wrong. Please try again later.",
    },
}

TRANSLATIONS: Mapping[str, Mapping] = freeze_catalog({"fr": _FR, "en": _EN})

# Libellés affichés dans le sélecteur de langue
LANGUAGE_NAMES = MappingProxyType({"fr": "Français", "en": "English"})

__all__ = ["TRANSLATIONS", "LANGUAGE_NAMES", "freeze_catalog"]
