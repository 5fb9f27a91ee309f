"""
Service de gestion des membres
"""
from typing import List, Optional
from sqlmodel import Session, select
from sqlalchemy.exc import SQLAlchemyError
import logging
from ..models.base import User
from ..models.enums import UserRole, ActionLogPermission
from ..models.permissions import LogPermission
from ..core.security import get_password_hash, verify_password
from ..core.config import settings

logger = logging.getLogger(__name__)


class UserService:
    """Service de gestion des membres"""

    @staticmethod
    def create_user(session: Session, email: str, nom: str, prenom: str, mot_de_passe: str,
                    role: UserRole = UserRole.UTILISATEUR, departement: Optional[str] = None,
                    fonction: Optional[str] = None) -> User:
        """Crée un nouveau membre"""
        user = User(
            email=email,
            nom=nom,
            prenom=prenom,
            fonction=fonction,
            departement=departement,
            role=role,
            mot_de_passe_hash=get_password_hash(mot_de_passe)
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    @staticmethod
    def get_user_by_email(session: Session, email: str) -> Optional[User]:
        """Récupère un membre par email"""
        return session.exec(select(User).where(User.email == email)).first()

    @staticmethod
    def get_users(session: Session, actifs_seulement: bool = True) -> List[User]:
        """Récupère les membres"""
        query = select(User)
        if actifs_seulement:
            query = query.where(User.actif == True)  # noqa: E712
        return session.exec(query.order_by(User.nom, User.prenom)).all()

    @staticmethod
    def change_role(session: Session, current_user: User, target: User, nouveau_role: UserRole,
                    raison: Optional[str] = None) -> User:
        """
        Change le rôle d'un membre et journalise la modification.
        Les contrôles d'autorisation (permission, interdiction de modifier son propre rôle)
        sont faits par l'appelant.
        """
        ancien_role = target.role.value if isinstance(target.role, UserRole) else target.role
        try:
            target.role = nouveau_role
            session.add(target)
            session.add(LogPermission(
                utilisateur_id=current_user.id,
                utilisateur_cible_id=target.id,
                action=ActionLogPermission.CHANGER_ROLE,
                ancienne_valeur=ancien_role,
                nouvelle_valeur=nouveau_role.value,
                raison=raison
            ))
            session.commit()
            session.refresh(target)
        except SQLAlchemyError:
            session.rollback()
            logger.exception("❌ Erreur lors du changement de rôle de %s", target.email)
            raise

        logger.info("🎭 Rôle de %s: %s -> %s (par %s)", target.email, ancien_role, nouveau_role.value, current_user.email)
        return target

    @staticmethod
    def deactivate_user(session: Session, user: User) -> User:
        """Désactive un compte (les historiques et affectations sont conservés)"""
        user.actif = False
        session.add(user)
        session.commit()
        session.refresh(user)
        logger.info("🗑️ Membre désactivé: %s", user.email)
        return user

    @staticmethod
    def ensure_admin_exists(session: Session) -> bool:
        """Vérifie et crée le super-administrateur si nécessaire"""
        admin_email = settings.MAIL_ADMIN
        admin_password = settings.PASSWORD_ADMIN

        if not admin_email or not admin_password:
            logger.error("❌ Email admin ou mot de passe admin non configuré")
            return False

        existing_admin = UserService.get_user_by_email(session, admin_email)

        if existing_admin:
            if existing_admin.role != UserRole.SUPER_ADMIN:
                logger.warning(f"⚠️ Le compte {admin_email} existe mais n'est pas SUPER_ADMIN")
                return False
            if not verify_password(admin_password, existing_admin.mot_de_passe_hash):
                logger.warning(f"⚠️ Administrateur existe mais mot de passe différent: {admin_email}")
                return False
            logger.info(f"✅ Administrateur existant vérifié: {admin_email}")
            return True

        UserService.create_user(
            session,
            email=admin_email,
            nom=settings.NOM_ADMIN,
            prenom=settings.PRENOM_ADMIN,
            mot_de_passe=admin_password,
            role=UserRole.SUPER_ADMIN,
        )
        logger.info(f"🎉 Nouvel administrateur créé avec succès: {admin_email}")
        return True
