"""Tests de la matrice des permissions par rôle et du catalogue."""

import pytest

from app_gestion_projets.models import UserRole
from app_gestion_projets.services.permission_tables import (
    EntreePermission, TablePermissionsRole, TABLE_PERMISSIONS_DEFAUT, ROLE_PERMISSIONS,
    PERMISSIONS_SYSTEME, PERMISSIONS_PAR_ID, PERMISSIONS_PAR_COUPLE, PAGE_PERMISSIONS,
)

SA, AD, UT = "SUPER_ADMIN", "ADMIN", "UTILISATEUR"

# (ressource, action): (SUPER_ADMIN, ADMIN, UTILISATEUR)
TABLE_ATTENDUE = {
    ("dashboard", "view"): (True, True, True),
    ("performance", "view"): (True, True, True),
    ("departments", "view"): (True, True, False),
    ("departments", "create"): (True, True, False),
    ("departments", "edit"): (True, True, False),
    ("departments", "delete"): (True, True, False),
    ("members", "view"): (True, True, False),
    ("members", "create"): (True, True, False),
    ("members", "edit"): (True, True, False),
    ("members", "delete"): (True, True, False),
    ("members", "manage_roles"): (True, False, False),
    ("projects", "view"): (True, True, True),
    ("projects", "create"): (True, True, False),
    ("projects", "edit"): (True, True, False),
    ("projects", "delete"): (True, True, False),
    ("tasks", "view"): (True, True, True),
    ("tasks", "create"): (True, True, True),
    ("tasks", "edit"): (True, True, True),
    ("tasks", "delete"): (True, True, False),
    ("comments", "view"): (True, True, True),
    ("comments", "create"): (True, True, True),
    ("comments", "delete"): (True, True, False),
    ("attachments", "view"): (True, True, True),
    ("attachments", "upload"): (True, True, True),
    ("attachments", "delete"): (True, True, False),
    ("settings", "view"): (True, True, False),
    ("settings", "manage_permissions"): (True, False, False),
    ("budget", "manage_categories"): (True, True, False),
    ("meeting-minutes", "view"): (True, True, True),
    ("meeting-minutes", "create"): (True, True, False),
    ("meeting-minutes", "edit"): (True, True, False),
    ("meeting-minutes", "delete"): (True, True, False),
}


def test_table_couvre_les_trois_roles():
    assert sorted(TABLE_PERMISSIONS_DEFAUT.roles) == sorted([SA, AD, UT])


def test_univers_identique_a_la_table_attendue():
    assert TABLE_PERMISSIONS_DEFAUT.univers == frozenset(TABLE_ATTENDUE)
    for role in (SA, AD, UT):
        assert len(TABLE_PERMISSIONS_DEFAUT.entrees(role)) == len(TABLE_ATTENDUE)


@pytest.mark.parametrize("couple,valeurs", sorted(TABLE_ATTENDUE.items()))
def test_chaque_ligne_de_la_table(couple, valeurs):
    ressource, action = couple
    for role, attendu in zip((SA, AD, UT), valeurs):
        assert TABLE_PERMISSIONS_DEFAUT.lookup(role, ressource, action) is attendu


def test_ordre_des_entrees_conserve():
    couples = [(e.ressource, e.action) for e in TABLE_PERMISSIONS_DEFAUT.entrees(UserRole.ADMIN)]
    assert couples.index(("settings", "view")) < couples.index(("budget", "manage_categories"))
    assert couples.index(("budget", "manage_categories")) < couples.index(("settings", "manage_permissions"))
    assert couples[-1] == ("meeting-minutes", "delete")


def test_lookup_inconnu_retourne_none():
    assert TABLE_PERMISSIONS_DEFAUT.lookup(AD, "rockets", "launch") is None
    assert TABLE_PERMISSIONS_DEFAUT.lookup("INVITE", "dashboard", "view") is None
    assert TABLE_PERMISSIONS_DEFAUT.entrees("INVITE") == ()


def test_lookup_accepte_les_enums():
    from app_gestion_projets.models import TypeRessource, ActionPermission

    assert TABLE_PERMISSIONS_DEFAUT.lookup(
        UserRole.ADMIN, TypeRessource.MEMBRES, ActionPermission.GERER_ROLES
    ) is False
    assert TABLE_PERMISSIONS_DEFAUT.lookup(
        UserRole.ADMIN, TypeRessource.MEMBRES, ActionPermission.SUPPRIMER
    ) is True


def test_matrice_par_role():
    matrice = TABLE_PERMISSIONS_DEFAUT.as_matrix()
    assert matrice[AD]["members:manage_roles"] is False
    assert matrice[SA]["settings:manage_permissions"] is True
    assert matrice[UT]["meeting-minutes:view"] is True
    assert list(matrice[UT])[0] == "dashboard:view"


def test_table_avec_doublon_refusee():
    with pytest.raises(ValueError, match="dupliquée"):
        TablePermissionsRole({
            "ADMIN": [
                EntreePermission("dashboard", "view", True),
                EntreePermission("dashboard", "view", False),
            ],
        })


def test_table_incomplete_refusee():
    with pytest.raises(ValueError, match="incomplète"):
        TablePermissionsRole({
            "ADMIN": [
                EntreePermission("dashboard", "view", True),
                EntreePermission("members", "view", True),
            ],
            "UTILISATEUR": [
                EntreePermission("dashboard", "view", True),
            ],
        })


def test_table_est_immuable():
    with pytest.raises(TypeError):
        TABLE_PERMISSIONS_DEFAUT._index["ADMIN"][("members", "manage_roles")] = True
    # La source de la table n'influence plus la table construite
    assert ROLE_PERMISSIONS[UserRole.ADMIN] is not TABLE_PERMISSIONS_DEFAUT.entrees(UserRole.ADMIN)


def test_catalogue_couvre_toute_la_table():
    for couple in TABLE_ATTENDUE:
        assert couple in PERMISSIONS_PAR_COUPLE


def test_catalogue_identifiants_uniques():
    assert len(PERMISSIONS_PAR_ID) == len(PERMISSIONS_SYSTEME)
    assert PERMISSIONS_PAR_ID["members_roles"].action == "manage_roles"
    assert PERMISSIONS_PAR_ID["settings_permissions"].ressource == "settings"


def test_catalogue_permissions_hors_table():
    hors_table = {
        p.id for p in PERMISSIONS_SYSTEME if (p.ressource, p.action) not in TABLE_ATTENDUE
    }
    assert hors_table == {"projects_export", "tasks_assign", "budget_view", "budget_manage"}


def test_pages_de_navigation():
    for page in ("settings", "settings-general", "settings-budget", "settings-permissions"):
        ressource, action = PAGE_PERMISSIONS[page]
        assert (ressource.value, action.value) == ("settings", "view")
    ressource, action = PAGE_PERMISSIONS["closed-projects"]
    assert (ressource.value, action.value) == ("projects", "view")
    assert "unknown" not in PAGE_PERMISSIONS
