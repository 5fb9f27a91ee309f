"""Surcharges de permissions par utilisateur et journal d'audit."""

from sqlmodel import select

from app_gestion_projets.models import (
    UserRole, PermissionUtilisateur, LogPermission, ActionLogPermission
)
from app_gestion_projets.services import PermissionService, UserService


def _logs(session):
    return session.exec(select(LogPermission).order_by(LogPermission.id)).all()


def test_accorder_puis_revoquer(session, super_admin, utilisateur):
    service = PermissionService(session)
    assert service.has_permission(utilisateur, "members", "delete") is False

    surcharge = service.grant_permission(super_admin, utilisateur.id, "members_delete", "Intérim")
    assert surcharge is not None
    assert surcharge.accordee is True
    assert surcharge.accordee_par == super_admin.id
    assert service.has_permission(utilisateur, "members", "delete") is True

    surcharge = service.revoke_permission(super_admin, utilisateur.id, "members_delete")
    assert surcharge.accordee is False
    assert service.has_permission(utilisateur, "members", "delete") is False


def test_surcharge_limitee_a_son_couple(session, super_admin, utilisateur):
    service = PermissionService(session)
    service.grant_permission(super_admin, utilisateur.id, "members_view")
    assert service.has_permission(utilisateur, "members", "view") is True
    assert service.has_permission(utilisateur, "members", "edit") is False
    assert service.can_access_page(utilisateur, "members") is True


def test_surcharge_hors_table(session, super_admin, admin):
    service = PermissionService(session)
    assert service.has_permission(admin, "tasks", "assign") is False
    service.grant_permission(super_admin, admin.id, "tasks_assign")
    assert service.has_permission(admin, "tasks", "assign") is True


def test_surcharge_ne_retire_jamais_un_droit_du_role(session, super_admin, admin):
    service = PermissionService(session)
    service.grant_permission(super_admin, admin.id, "projects_create")
    service.revoke_permission(super_admin, admin.id, "projects_create")

    assert service.get_user_overrides(admin.id)["projects_create"].accordee is False
    assert service.has_permission(admin, "projects", "create") is True


def test_une_seule_surcharge_par_permission(session, super_admin, utilisateur):
    service = PermissionService(session)
    service.grant_permission(super_admin, utilisateur.id, "budget_view")
    service.revoke_permission(super_admin, utilisateur.id, "budget_view")
    service.grant_permission(super_admin, utilisateur.id, "budget_view")

    surcharges = session.exec(
        select(PermissionUtilisateur).where(PermissionUtilisateur.utilisateur_id == utilisateur.id)
    ).all()
    assert len(surcharges) == 1
    assert surcharges[0].accordee is True


def test_surcharges_propres_a_chaque_utilisateur(session, super_admin, make_user):
    service = PermissionService(session)
    premier = make_user(UserRole.UTILISATEUR)
    second = make_user(UserRole.UTILISATEUR)

    service.grant_permission(super_admin, premier.id, "departments_view")

    assert service.has_permission(premier, "departments", "view") is True
    assert service.has_permission(second, "departments", "view") is False


def test_journal_des_modifications(session, super_admin, utilisateur):
    service = PermissionService(session)
    service.grant_permission(super_admin, utilisateur.id, "comments_delete", "Modération")
    service.revoke_permission(super_admin, utilisateur.id, "comments_delete", "Fin de mission")

    accord, revocation = _logs(session)
    assert accord.action == ActionLogPermission.ACCORDER
    assert accord.utilisateur_id == super_admin.id
    assert accord.utilisateur_cible_id == utilisateur.id
    assert accord.permission_id == "comments_delete"
    assert (accord.ancienne_valeur, accord.nouvelle_valeur) == (None, "true")
    assert accord.raison == "Modération"

    assert revocation.action == ActionLogPermission.REVOQUER
    assert (revocation.ancienne_valeur, revocation.nouvelle_valeur) == ("true", "false")
    assert revocation.raison == "Fin de mission"


def test_permission_inconnue_ignoree(session, super_admin, utilisateur):
    service = PermissionService(session)
    assert service.grant_permission(super_admin, utilisateur.id, "rockets_launch") is None
    assert service.get_user_overrides(utilisateur.id) == {}
    assert _logs(session) == []


def test_revoquer_sans_surcharge_ne_fait_rien(session, super_admin, utilisateur):
    service = PermissionService(session)
    assert service.revoke_permission(super_admin, utilisateur.id, "members_delete") is None
    assert service.get_user_overrides(utilisateur.id) == {}
    assert _logs(session) == []


def test_permissions_effectives_incluent_les_surcharges(session, super_admin, utilisateur):
    service = PermissionService(session)
    service.grant_permission(super_admin, utilisateur.id, "projects_export")
    ids = {p.id for p in service.get_user_effective_permissions(utilisateur)}
    assert "projects_export" in ids
    assert "projects_create" not in ids


def test_changement_de_role_journalise(session, super_admin, admin):
    UserService.change_role(session, super_admin, admin, UserRole.UTILISATEUR, "Réorganisation")

    assert admin.role == UserRole.UTILISATEUR
    (log,) = _logs(session)
    assert log.action == ActionLogPermission.CHANGER_ROLE
    assert log.permission_id is None
    assert (log.ancienne_valeur, log.nouvelle_valeur) == ("ADMIN", "UTILISATEUR")
    assert log.raison == "Réorganisation"


def test_desactivation_membre(session, utilisateur):
    UserService.deactivate_user(session, utilisateur)
    assert utilisateur.actif is False
    assert utilisateur not in UserService.get_users(session)
    assert utilisateur in UserService.get_users(session, actifs_seulement=False)


def test_accords_concurrents_dernier_ecrit_gagne(session, engine, super_admin, make_user, utilisateur):
    from sqlmodel import Session

    admin_concurrent = make_user(UserRole.SUPER_ADMIN)
    service = PermissionService(session)
    lecture_initiale = service._get_override
    appels = {"n": 0}

    def _lecture_avec_insertion_concurrente(target_user_id, permission_id):
        appels["n"] += 1
        if appels["n"] == 1:
            # Une autre requête accorde la même permission entre la lecture et l'écriture
            with Session(engine) as autre_session:
                PermissionService(autre_session).grant_permission(
                    admin_concurrent, target_user_id, permission_id, "Concurrent"
                )
            return None
        return lecture_initiale(target_user_id, permission_id)

    service._get_override = _lecture_avec_insertion_concurrente

    surcharge = service.revoke_permission(super_admin, utilisateur.id, "members_delete", "Dernier")

    assert appels["n"] == 2
    assert surcharge.accordee is False
    assert surcharge.accordee_par == super_admin.id

    surcharges = session.exec(
        select(PermissionUtilisateur).where(PermissionUtilisateur.utilisateur_id == utilisateur.id)
    ).all()
    assert len(surcharges) == 1
    assert service.has_permission(utilisateur, "members", "delete") is False

    accord, revocation = _logs(session)
    assert (accord.action, accord.utilisateur_id) == (ActionLogPermission.ACCORDER, admin_concurrent.id)
    assert revocation.action == ActionLogPermission.REVOQUER
    assert (revocation.ancienne_valeur, revocation.nouvelle_valeur) == ("true", "false")
