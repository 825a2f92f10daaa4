# VERIDIC : version affichée dans l'app (header + home) et dans l'API
# À chaque release : incrémenter VERSION, mettre à jour RELEASE_NOTE et prépendre à RELEASE_HISTORY.

import datetime

VERSION = "1.2.0"
BUILD_DATE = datetime.datetime.now().strftime("%Y-%m-%d %H:%M")
RELEASE_NOTE = "Session : compteur de génération, une lecture de profil lente ne peut plus écraser une connexion plus récente."

# Historique des notes de version (précédentes uniquement, plus récente en premier)
RELEASE_HISTORY = [
    {"version": "1.1.1", "date": "2026-09-30", "note": "Langue : une préférence invalide (ex. 'xx') retombe sur le français au lieu d'afficher les clés brutes."},
    {"version": "1.1.0", "date": "2026-09-22", "note": "API : routes /i18n/translate, /i18n/language et /session."},
    {"version": "1.0.1", "date": "2026-09-15", "note": "Profils : backend Google Sheets en plus de Supabase (secret backend = \"sheets\")."},
    {"version": "1.0.0", "date": "2026-09-08", "note": "Première version : connexion Supabase, rôles user / editor / admin, interface FR / EN."},
]
