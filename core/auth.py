"""
VERIDIC - Profils stockés dans Google Sheets (onglet users : uid, email, role).
Agnostique UI : lit les secrets via core.runtime.
"""

import asyncio
import logging
from typing import Optional

import gspread
from google.oauth2.service_account import Credentials

from core.profiles import ProfileRecord, clean_profile_updates
from core.runtime import get_secrets

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]


class SheetProfileStore:
    """Lecture et mise à jour du rôle dans l'onglet users d'un Google Sheet."""

    def __init__(self, secrets: dict = None, worksheet=None):
        self.users_sheet = worksheet
        if self.users_sheet is not None:
            return
        secrets = secrets or get_secrets()
        try:
            gcp = secrets.get("gcp_service_account")
            if not gcp:
                raise ValueError("gcp_service_account manquant dans les secrets")
            creds = Credentials.from_service_account_info(gcp, scopes=SCOPES)
            client = gspread.authorize(creds)

            sheet_url = secrets.get("sheet_url", "")
            if not sheet_url:
                raise ValueError("URL du Google Sheet manquante dans les secrets")

            self.users_sheet = client.open_by_url(sheet_url).worksheet("users")
        except Exception as e:
            logger.error("Erreur d'initialisation SheetProfileStore : %s", e)
            self.users_sheet = None

    def _fetch(self, uid: str) -> Optional[ProfileRecord]:
        for record in self.users_sheet.get_all_records():
            if str(record.get("uid", "")).strip() == uid:
                return record
        return None

    async def get_profile(self, uid: str) -> Optional[ProfileRecord]:
        if self.users_sheet is None:
            raise ConnectionError("Google Sheet users indisponible")
        return await asyncio.to_thread(self._fetch, uid)

    def _update(self, uid: str, updates: dict) -> bool:
        cleaned = clean_profile_updates(updates)
        all_rows = self.users_sheet.get_all_values()
        if not all_rows or not cleaned:
            return False
        headers = [(h or "").strip() for h in all_rows[0]]
        if "uid" not in headers:
            return False
        uid_col = headers.index("uid")
        for i, row in enumerate(all_rows[1:], start=2):
            if uid_col < len(row) and (row[uid_col] or "").strip() == uid:
                for field, value in cleaned.items():
                    if field in headers:
                        self.users_sheet.update_cell(i, headers.index(field) + 1, value)
                return True
        return False

    async def update_profile(self, uid: str, updates: dict) -> bool:
        """Met à jour display_name / role de la ligne uid. ValueError si le rôle est inconnu."""
        if self.users_sheet is None:
            raise ConnectionError("Google Sheet users indisponible")
        try:
            return await asyncio.to_thread(self._update, uid, updates)
        except ValueError:
            raise
        except Exception as e:
            logger.error("Erreur update_profile GSheet : %s", e)
            raise
