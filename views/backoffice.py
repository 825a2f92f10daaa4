# Backoffice VERIDIC : réservé aux administrateurs
# Onglets : Session | Journal

import logging
import streamlit as st

from core.i18n import t
from core.logger import get_logger
from core.session_keys import get_current_user_email, is_admin

logger = logging.getLogger(__name__)


def render_backoffice_tab(resolver):
    """Backoffice : état de session résolu et journal du pipeline de session."""
    if not is_admin():
        st.warning(t("admin.forbidden"))
        return

    logger.info("Backoffice ouvert par %s", get_current_user_email())
    st.markdown(f"## {t('admin.title')}")

    tab_session, tab_logs = st.tabs([t("admin.users"), "Logs"])

    with tab_session:
        state = resolver.state
        st.json({
            "loading": state.loading,
            "generation": resolver.generation,
            "user": None if state.user is None else {
                "uid": state.user.uid,
                "email": state.user.email,
                "display_name": state.user.display_name,
                "role": state.user.role,
            },
        })

    with tab_logs:
        logs = get_logger().get_logs(limit=200)
        if not logs:
            st.info("Journal vide.")
        else:
            st.code("\n".join(reversed(logs)), language="text")
        if st.button("Vider le journal", key="backoffice_clear_logs"):
            get_logger().clear_logs()
            st.rerun()
