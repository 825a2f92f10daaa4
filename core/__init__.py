# Coeur : session (identité + profil) et localisation
