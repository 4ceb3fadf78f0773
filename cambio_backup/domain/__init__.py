"""
Domain Layer - Coeur metier du moteur de sauvegarde.

Independant de la base de donnees, du systeme de fichiers et
de la librairie de planification.
"""
