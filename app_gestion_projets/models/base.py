# app_gestion_projets/models/base.py
from sqlmodel import SQLModel, Field, Relationship
from typing import Optional, List
from datetime import date, datetime, timezone
from .enums import *

class TacheUtilisateur(SQLModel, table=True):
    """Affectation d'un utilisateur à une tâche"""
    tache_id: Optional[int] = Field(default=None, foreign_key="tache.id", primary_key=True)
    utilisateur_id: Optional[int] = Field(default=None, foreign_key="user.id", primary_key=True)

class User(SQLModel, table=True):
    """Membre de l'application"""
    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True)
    nom: str
    prenom: str
    fonction: Optional[str] = None
    departement: Optional[str] = Field(default=None, index=True)
    mot_de_passe_hash: str
    role: UserRole = UserRole.UTILISATEUR
    actif: bool = True
    derniere_connexion: Optional[datetime] = None
    cree_le: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Relations
    taches: List["Tache"] = Relationship(back_populates="utilisateurs", link_model=TacheUtilisateur)

class Projet(SQLModel, table=True):
    """Projet suivi par un département"""
    id: Optional[int] = Field(default=None, primary_key=True)
    nom: str
    type_projet: Optional[str] = None
    description: Optional[str] = None
    departement: Optional[str] = Field(default=None, index=True)
    responsable_id: Optional[int] = Field(default=None, foreign_key="user.id")
    date_debut: Optional[date] = None
    date_fin: Optional[date] = None
    statut: StatutProjet = StatutProjet.ACTIF

    # Clôture / réouverture
    date_cloture: Optional[datetime] = None
    cloture_par: Optional[int] = Field(default=None, foreign_key="user.id")
    date_reouverture: Optional[datetime] = None
    reouvert_par: Optional[int] = Field(default=None, foreign_key="user.id")

    cree_le: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    modifie_le: Optional[datetime] = None

    # Relations
    taches: List["Tache"] = Relationship(back_populates="projet")

class Tache(SQLModel, table=True):
    """Tâche d'un projet"""
    id: Optional[int] = Field(default=None, primary_key=True)
    nom: str
    description: Optional[str] = None
    etat: EtatTache = EtatTache.NON_DEBUTEE
    date_realisation: Optional[date] = None
    projet_id: int = Field(foreign_key="projet.id", index=True)

    # Relations
    projet: Optional[Projet] = Relationship(back_populates="taches")
    utilisateurs: List[User] = Relationship(back_populates="taches", link_model=TacheUtilisateur)
