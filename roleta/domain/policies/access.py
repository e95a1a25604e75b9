"""AccessPolicy — resolve a presented credential to an AccessScope."""

from __future__ import annotations

import hmac
from dataclasses import dataclass

from roleta.domain.value_objects.access_scope import AccessScope
from roleta.domain.value_objects.enums import Role


@dataclass(frozen=True)
class Credential:
    token: str
    scope: AccessScope


def build_credential_table(entries: list[dict]) -> list[Credential]:
    """Build the credential table from config rows.

    Each row has ``token``, ``role`` and, for scoped roles, ``cidades``.

    Raises:
        ValueError: on an unknown role, an empty token or a scoped role
            without cities.
    """
    table = []
    for entry in entries:
        token = (entry.get("token") or "").strip()
        if not token:
            raise ValueError("Credential entry without token")
        role = Role(entry["role"])
        if role == Role.DIRETOR:
            scope = AccessScope.unrestricted()
        else:
            cidades = {c.strip() for c in entry.get("cidades") or [] if c.strip()}
            if not cidades:
                raise ValueError(f"Role '{role.value}' requires at least one cidade")
            scope = AccessScope.for_cities(cidades)
        table.append(Credential(token=token, scope=scope))
    return table


def resolve_role(credential: str | None, table: list[Credential]) -> AccessScope | None:
    """Map a credential to its scope; None means unauthorized.

    Every entry is compared in constant time so timing does not reveal
    which (or whether a) prefix matched.
    """
    if not credential:
        return None
    presented = credential.encode()
    match = None
    for entry in table:
        if hmac.compare_digest(presented, entry.token.encode()) and match is None:
            match = entry.scope
    return match
