"""HistoryUseCase — scoped reads and status edits on assignment records."""

from __future__ import annotations

import logging
from collections import Counter

from roleta.application.ports.indicacao_repo import IndicacaoRepository
from roleta.domain.entities.indicacao import Indicacao
from roleta.domain.errors import AuthorizationFault, InvalidInput, NotFound
from roleta.domain.value_objects.access_scope import AccessScope
from roleta.domain.value_objects.filters import IndicacaoFilter

logger = logging.getLogger(__name__)

MAX_STATUS_LENGTH = 50


class HistoryUseCase:
    def __init__(self, indicacao_repo: IndicacaoRepository):
        self._indicacoes = indicacao_repo

    async def search(self, filters: IndicacaoFilter, scope: AccessScope) -> list[Indicacao]:
        cidades = scope.restrict(set(filters.cidades) if filters.cidades else None)
        if cidades is not None and not cidades:
            return []
        return await self._indicacoes.search(filters.with_cidades(cidades))

    async def update_status(
        self, indicacao_id: int, status: str, scope: AccessScope
    ) -> Indicacao:
        status = status.strip()
        if not status or len(status) > MAX_STATUS_LENGTH:
            raise InvalidInput(f"Status must have 1-{MAX_STATUS_LENGTH} characters")

        current = await self._indicacoes.get_by_id(indicacao_id)
        if current is None:
            raise NotFound(f"Indicacao {indicacao_id} not found")
        if not scope.allows_city(current.cidade):
            raise AuthorizationFault()

        updated = await self._indicacoes.update_status(indicacao_id, status)
        if updated is None:
            raise NotFound(f"Indicacao {indicacao_id} not found")
        logger.info("Indicacao %s status: %s → %s", indicacao_id, current.status, status)
        return updated

    async def summary(self, scope: AccessScope) -> dict:
        """Aggregate counts for the dashboard over the scoped history."""
        rows = await self.search(IndicacaoFilter(), scope)
        return {
            "total": len(rows),
            "by_natureza": dict(Counter(r.natureza for r in rows)),
            "by_cidade": dict(Counter(r.cidade for r in rows)),
            "by_status": dict(Counter(r.status for r in rows)),
            "by_consultor": dict(
                Counter(r.consultor_nome or "(removido)" for r in rows)
            ),
        }
