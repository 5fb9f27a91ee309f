"""
Schémas Pydantic pour les projets
"""
from pydantic import BaseModel, ConfigDict
from typing import List, Optional
from datetime import date, datetime
from ..models.enums import EtatTache, StatutProjet


class TacheResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nom: str
    etat: EtatTache
    date_realisation: Optional[date] = None


class ProjetResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    nom: str
    description: Optional[str] = None
    departement: Optional[str] = None
    responsable_id: Optional[int] = None
    statut: StatutProjet
    date_cloture: Optional[datetime] = None
    cloture_par: Optional[int] = None
    date_reouverture: Optional[datetime] = None
    reouvert_par: Optional[int] = None
    taches: List[TacheResponse] = []
