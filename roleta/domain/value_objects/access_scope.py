"""AccessScope value object — what a resolved credential may see and edit."""

from __future__ import annotations

from dataclasses import dataclass

from roleta.domain.value_objects.enums import Role


@dataclass(frozen=True)
class AccessScope:
    role: Role
    cidades: frozenset[str] | None = None  # None = unrestricted

    @classmethod
    def unrestricted(cls) -> AccessScope:
        return cls(role=Role.DIRETOR, cidades=None)

    @classmethod
    def for_cities(cls, cidades: set[str] | frozenset[str]) -> AccessScope:
        return cls(role=Role.GERENTE, cidades=frozenset(cidades))

    def allows_city(self, cidade: str) -> bool:
        return self.cidades is None or cidade in self.cidades

    def restrict(self, requested: set[str] | None) -> set[str] | None:
        """Effective city filter for a query.

        Returns None when no filter applies, otherwise the intersection of the
        requested cities with the allowed ones (possibly empty).
        """
        if self.cidades is None:
            return set(requested) if requested else None
        if not requested:
            return set(self.cidades)
        return set(requested) & self.cidades
