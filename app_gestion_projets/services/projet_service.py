"""
Service de gestion des projets (consultation, clôture, réouverture)
"""
from typing import List, Optional
from sqlmodel import Session, select
from datetime import datetime, timezone
import logging
from ..models.base import User, Projet
from ..models.enums import StatutProjet

logger = logging.getLogger(__name__)


class ProjetService:
    """Service de gestion des projets"""

    @staticmethod
    def get_projets(session: Session, statut: Optional[StatutProjet] = None) -> List[Projet]:
        query = select(Projet)
        if statut:
            query = query.where(Projet.statut == statut)
        return session.exec(query.order_by(Projet.id)).all()

    @staticmethod
    def get_projet(session: Session, projet_id: int) -> Optional[Projet]:
        return session.get(Projet, projet_id)

    @staticmethod
    def cloturer_projet(session: Session, projet: Projet, user: User) -> Projet:
        """Passe le projet au statut clôturé (autorisation vérifiée par l'appelant)"""
        now = datetime.now(timezone.utc)
        projet.statut = StatutProjet.CLOTURE
        projet.date_cloture = now
        projet.cloture_par = user.id
        projet.modifie_le = now
        session.add(projet)
        session.commit()
        session.refresh(projet)
        logger.info("📁 Projet %s clôturé par %s", projet.id, user.email)
        return projet

    @staticmethod
    def reouvrir_projet(session: Session, projet: Projet, user: User) -> Projet:
        """Réactive un projet clôturé (autorisation vérifiée par l'appelant)"""
        now = datetime.now(timezone.utc)
        projet.statut = StatutProjet.ACTIF
        projet.date_reouverture = now
        projet.reouvert_par = user.id
        projet.modifie_le = now
        session.add(projet)
        session.commit()
        session.refresh(projet)
        logger.info("📂 Projet %s réouvert par %s", projet.id, user.email)
        return projet
