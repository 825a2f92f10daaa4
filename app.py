"""
VERIDIC - Application Streamlit
Vérification de contenus : session (identité Supabase + rôle) et interface FR / EN
"""

import asyncio
import threading

import streamlit as st

from version import BUILD_DATE, VERSION
from core.runtime import init as core_init, get_secrets, is_debug
from core.i18n import available_languages, get_current_lang, set_lang, t
from core.logger import ContextLogger, set_default_logger
from core.session import SessionResolver, write_session_keys
from core.session_keys import is_admin, is_authenticated

# =============================================================================
# CONFIGURATION
# =============================================================================
st.set_page_config(
    page_title="Veridic",
    layout="wide",
    initial_sidebar_state="collapsed",
)

SESSION_RESOLVER = "session_resolver"
SESSION_PROVIDER = "identity_provider"
SETTLE_TIMEOUT = 10


@st.cache_resource
def get_session_loop():
    """Boucle asyncio partagée, dédiée aux lectures de profil."""
    loop = asyncio.new_event_loop()
    threading.Thread(target=loop.run_forever, name="veridic-session", daemon=True).start()
    return loop


@st.cache_resource
def get_app_logger():
    """Logger partagé : le journal du backoffice survit aux reruns."""
    return ContextLogger(verbose=is_debug())


def get_resolver():
    """Un SessionResolver par session navigateur, branché sur supabase.auth."""
    if SESSION_RESOLVER not in st.session_state:
        from core.auth_supabase import SupabaseIdentityProvider
        from core.profiles import get_profile_store

        provider = SupabaseIdentityProvider(secrets=get_secrets())
        st.session_state[SESSION_PROVIDER] = provider
        st.session_state[SESSION_RESOLVER] = SessionResolver(
            provider, get_profile_store(), loop=get_session_loop()
        )
    return st.session_state[SESSION_RESOLVER]


def wait_for_session(resolver):
    """Bloque le script jusqu'à la fin des lectures de profil en cours."""
    future = asyncio.run_coroutine_threadsafe(resolver.wait_settled(), get_session_loop())
    future.result(timeout=SETTLE_TIMEOUT)


def sign_out(provider, resolver) -> bool:
    """Déconnexion ; False (message affiché) si supabase ou la session ne répondent pas."""
    try:
        provider.sign_out()
        wait_for_session(resolver)
    except Exception as e:
        st.error(f"{t('errors.error')} : {e}")
        return False
    return True


def _secrets_to_dict(s):
    """Convertit st.secrets en dict pour core (agnostique Streamlit)."""
    if s is None:
        return {}
    try:
        d = {}
        for k in s.keys():
            v = s[k]
            d[k] = _secrets_to_dict(v) if hasattr(v, "keys") and not isinstance(v, str) else v
        return d
    except FileNotFoundError:
        # pas de secrets.toml
        return {}


# =============================================================================
# HEADER
# =============================================================================
def render_language_selector():
    codes = [code for code, _ in available_languages()]
    names = dict(available_languages())
    current = get_current_lang()
    chosen = st.selectbox(
        t("language.label"),
        options=codes,
        index=codes.index(current),
        format_func=lambda c: names[c],
        key="language_select",
    )
    if chosen != current:
        set_lang(chosen)
        st.toast(t("language.changed", {"language": names[chosen]}))
        st.rerun()


def render_login(provider, resolver):
    _, col_login, _ = st.columns([1, 1.2, 1])
    with col_login:
        st.markdown("<div style='padding-top: 60px;'></div>", unsafe_allow_html=True)
        st.markdown("### VERIDIC")
        with st.form("login_form"):
            email = st.text_input(t("auth.email"), placeholder="redaction@veridic.fr")
            password = st.text_input(t("auth.password"), type="password")
            submit = st.form_submit_button(t("auth.login"), use_container_width=True)

            if submit:
                with st.spinner(t("auth.loading")):
                    try:
                        if provider.sign_in(email, password):
                            wait_for_session(resolver)
                            st.rerun()
                        else:
                            st.error(t("auth.invalidCredentials"))
                    except Exception as e:
                        st.error(f"{t('errors.error')} : {e}")


# =============================================================================
# MAIN
# =============================================================================
def main():
    core_init(secrets=_secrets_to_dict(st.secrets), session=st.session_state)
    set_default_logger(get_app_logger())

    col_brand, col_lang = st.columns([5, 1])
    with col_brand:
        st.markdown(f"**VERIDIC** · V {VERSION} — {BUILD_DATE}")
    with col_lang:
        render_language_selector()

    resolver = get_resolver()
    provider = st.session_state[SESSION_PROVIDER]
    state = resolver.state
    write_session_keys(state, st.session_state)

    if state.loading and state.user is None and resolver.generation > 0:
        st.info(t("auth.loading"))
        return

    if not is_authenticated():
        render_login(provider, resolver)
        return

    from views.home import render_home

    tab_labels = [t("nav.home")]
    if is_admin():
        tab_labels.append(t("nav.admin"))
    tabs = st.tabs(tab_labels)

    with tabs[0]:
        render_home(state.user)
    if is_admin():
        with tabs[1]:
            from views.backoffice import render_backoffice_tab
            render_backoffice_tab(resolver)

    if st.button(t("auth.logout"), key="logout_button") and sign_out(provider, resolver):
        st.rerun()

    st.markdown("---")
    st.caption(f"© VERIDIC — {t('footer.rights')} · {t('footer.legal')}")


if __name__ == "__main__":
    main()
