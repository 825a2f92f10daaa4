# =============================================================================
# VERIDIC API - FastAPI
# Expose la localisation et l'état de session sans Streamlit
# =============================================================================

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from pydantic import BaseModel

from core.errors import ConfigurationError, UnsupportedLanguageError
from core.i18n import available_languages, normalize_language, resolve
from core.identity import IdentityChannel, IdentityProvider
from core.localization import LocalizationContext, SessionLanguageStore
from core.profiles import get_profile_store
from core.runtime import get_secrets, init as core_init, secrets_from_env
from core.session import SessionResolver
from version import VERSION

logger = logging.getLogger(__name__)

core_init(secrets=secrets_from_env(), session={})

_localization: Optional[LocalizationContext] = None
_identities: Optional[IdentityProvider] = None
_resolver: Optional[SessionResolver] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _resolver
    yield
    if _resolver is not None:
        _resolver.close()
        _resolver = None


app = FastAPI(title="VERIDIC API", version=VERSION, lifespan=lifespan)


# =============================================================================
# DEPENDENCIES
# =============================================================================
def get_localization() -> LocalizationContext:
    global _localization
    if _localization is None:
        _localization = LocalizationContext(SessionLanguageStore())
    return _localization


def get_identity_provider() -> IdentityProvider:
    """Supabase si configuré, sinon un canal en mémoire (aucune connexion possible)."""
    global _identities
    if _identities is None:
        try:
            from core.auth_supabase import SupabaseIdentityProvider
            _identities = SupabaseIdentityProvider(secrets=get_secrets())
        except ConfigurationError as e:
            logger.warning("Fournisseur d'identité Supabase indisponible : %s", e)
            _identities = IdentityChannel()
    return _identities


async def get_resolver(identities: IdentityProvider = Depends(get_identity_provider)) -> SessionResolver:
    """Résolveur unique du processus, créé dans la boucle de l'API."""
    global _resolver
    if _resolver is None:
        _resolver = SessionResolver(identities, get_profile_store(get_secrets()), loop=asyncio.get_running_loop())
    return _resolver


# =============================================================================
# SCHEMAS
# =============================================================================
class LanguageInfo(BaseModel):
    code: str
    name: str


class LanguageRequest(BaseModel):
    language: str


class LanguageResponse(BaseModel):
    language: str


class TranslationResponse(BaseModel):
    key: str
    language: str
    text: str


class UserResponse(BaseModel):
    uid: str
    email: str
    display_name: str
    role: str


class SessionResponse(BaseModel):
    loading: bool
    user: Optional[UserResponse] = None


class LoginRequest(BaseModel):
    email: str
    password: str


def _session_response(resolver: SessionResolver) -> SessionResponse:
    state = resolver.state
    user = None
    if state.user is not None:
        user = UserResponse(
            uid=state.user.uid,
            email=state.user.email,
            display_name=state.user.display_name,
            role=state.user.role,
        )
    return SessionResponse(loading=state.loading, user=user)


# =============================================================================
# ROUTES
# =============================================================================
@app.get("/health")
def health():
    """Health check."""
    return {"status": "ok", "version": VERSION}


@app.get("/i18n/languages", response_model=list[LanguageInfo])
def list_languages():
    return [LanguageInfo(code=code, name=name) for code, name in available_languages()]


@app.get("/i18n/language", response_model=LanguageResponse)
def current_language(ctx: LocalizationContext = Depends(get_localization)):
    return LanguageResponse(language=ctx.language)


@app.put("/i18n/language", response_model=LanguageResponse)
def change_language(payload: LanguageRequest, ctx: LocalizationContext = Depends(get_localization)):
    """Persiste la préférence ; 400 si la langue n'est pas supportée."""
    try:
        ctx.set_language(payload.language)
    except UnsupportedLanguageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return LanguageResponse(language=ctx.language)


@app.get("/i18n/translate", response_model=TranslationResponse)
def translate(
    request: Request,
    key: str,
    lang: Optional[str] = None,
    ctx: LocalizationContext = Depends(get_localization),
):
    """
    Traduit une clé pointée. Les paramètres de requête autres que key/lang
    servent de paramètres d'interpolation ({name} -> ?name=...).
    """
    params = {k: v for k, v in request.query_params.items() if k not in ("key", "lang")}
    if lang is None:
        text = ctx.t(key, params or None)
        language = ctx.language
    else:
        text = resolve(key, lang, params or None)
        language = normalize_language(lang)
    return TranslationResponse(key=key, language=language, text=text)


@app.get("/session", response_model=SessionResponse)
async def session_state(wait: bool = False, resolver: SessionResolver = Depends(get_resolver)):
    """État de session courant ; wait=true attend la fin des lectures de profil."""
    if wait:
        await resolver.wait_settled()
    return _session_response(resolver)


async def _settle(resolver: SessionResolver) -> SessionResponse:
    # le callback supabase.auth est relayé sur la boucle : un tour pour le traiter
    await asyncio.sleep(0)
    await resolver.wait_settled()
    return _session_response(resolver)


@app.post("/auth/login", response_model=SessionResponse)
async def login(
    payload: LoginRequest,
    identities: IdentityProvider = Depends(get_identity_provider),
    resolver: SessionResolver = Depends(get_resolver),
    ctx: LocalizationContext = Depends(get_localization),
):
    """Connexion email / mot de passe ; renvoie la session résolue (rôle compris)."""
    if not hasattr(identities, "sign_in"):
        raise HTTPException(status_code=503, detail="Fournisseur d'identité indisponible")
    try:
        ok = await asyncio.to_thread(identities.sign_in, payload.email, payload.password)
    except Exception as e:
        logger.warning("Connexion refusée pour %s : %s", payload.email, e)
        ok = False
    if not ok:
        raise HTTPException(status_code=401, detail=ctx.t("auth.invalidCredentials"))
    return await _settle(resolver)


@app.post("/auth/logout", response_model=SessionResponse)
async def logout(
    identities: IdentityProvider = Depends(get_identity_provider),
    resolver: SessionResolver = Depends(get_resolver),
):
    if not hasattr(identities, "sign_out"):
        raise HTTPException(status_code=503, detail="Fournisseur d'identité indisponible")
    await asyncio.to_thread(identities.sign_out)
    return await _settle(resolver)
