"""Application de gestion de projets : contrôle d'accès par rôle"""
