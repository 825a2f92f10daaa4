"""
VERIDIC - Page HOME
Accueil traduit + cartouche de version.
"""

import html
import streamlit as st

from core.i18n import t
from core.session_keys import get_current_role
from version import VERSION, BUILD_DATE

try:
    from version import RELEASE_NOTE
except (ImportError, AttributeError):
    RELEASE_NOTE = ""
try:
    from version import RELEASE_HISTORY
except (ImportError, AttributeError):
    RELEASE_HISTORY = []


def render_home(user=None):
    st.markdown(f"## {html.escape(t('home.title'))}")
    st.caption(t("home.subtitle"))

    if user is not None:
        name = user.display_name or user.email.split("@")[0]
        st.markdown(f"**{html.escape(t('home.welcome', {'name': name}))}**")
        st.caption(t("auth.signedInAs", {"email": user.email, "role": t(f"roles.{get_current_role()}")}))

    # Cartouche version actuelle
    st.markdown(
        '<div style="background:#f8fafc; border:1px solid #e2e8f0; border-radius:8px; padding:1rem 1.5rem; margin:1rem 0 0.5rem 0;">'
        f'<div style="font-size:1.1rem; font-weight:700; color:#0f172a;">V {VERSION} — {BUILD_DATE}</div>'
        f'<div style="font-size:0.85rem; color:#475569; margin-top:0.25rem;">{html.escape(RELEASE_NOTE or "—", quote=True)}</div>'
        '</div>',
        unsafe_allow_html=True,
    )

    for entry in RELEASE_HISTORY:
        v = entry.get("version", "")
        d = entry.get("date", "")
        n = entry.get("note", "—")
        st.markdown(
            f'<span style="font-weight:700; color:#0f172a;">V {v}</span>'
            f'<span style="font-size:0.8rem; color:#64748b; margin-left:0.5rem;">{html.escape(d, quote=True)}</span>'
            f'<div style="font-size:0.85rem; color:#475569;">{html.escape(n, quote=True)}</div>',
            unsafe_allow_html=True,
        )
