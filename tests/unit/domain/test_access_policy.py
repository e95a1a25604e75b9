"""Tests for credential → scope resolution."""

import pytest

from roleta.domain.policies.access import build_credential_table, resolve_role
from roleta.domain.value_objects.enums import Role

TABLE = build_credential_table([
    {"token": "diretor-secret", "role": "diretor"},
    {"token": "gerente-itapema", "role": "gerente", "cidades": ["Itapema", " Porto Belo "]},
])


def test_director_is_unrestricted():
    scope = resolve_role("diretor-secret", TABLE)
    assert scope is not None
    assert scope.role == Role.DIRETOR
    assert scope.cidades is None


def test_manager_is_scoped_to_cities():
    scope = resolve_role("gerente-itapema", TABLE)
    assert scope.role == Role.GERENTE
    assert scope.cidades == frozenset({"Itapema", "Porto Belo"})


@pytest.mark.parametrize("credential", [None, "", "wrong", "diretor-secre", "diretor-secret "])
def test_unknown_credentials_are_unauthorized(credential):
    assert resolve_role(credential, TABLE) is None


def test_empty_table_rejects_everything():
    assert resolve_role("diretor-secret", []) is None


def test_scoped_role_without_cities_is_rejected():
    with pytest.raises(ValueError, match="requires at least one cidade"):
        build_credential_table([{"token": "t", "role": "gerente", "cidades": []}])


def test_unknown_role_is_rejected():
    with pytest.raises(ValueError):
        build_credential_table([{"token": "t", "role": "superuser"}])


def test_blank_token_is_rejected():
    with pytest.raises(ValueError, match="without token"):
        build_credential_table([{"token": "  ", "role": "diretor"}])
