"""
Application Layer - Orchestration des operations de sauvegarde.
"""
