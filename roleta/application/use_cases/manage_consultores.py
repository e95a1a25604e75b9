"""ManageConsultoresUseCase — scoped registry reads and writes."""

from __future__ import annotations

import logging

from roleta.application.ports.consultor_repo import ConsultorRepository
from roleta.application.ports.indicacao_repo import IndicacaoRepository
from roleta.domain.entities.consultor import EPOCH, Consultor
from roleta.domain.errors import AuthorizationFault, NotFound
from roleta.domain.value_objects.access_scope import AccessScope
from roleta.domain.value_objects.enums import RemovalOutcome
from roleta.domain.value_objects.filters import ConsultorFilter

logger = logging.getLogger(__name__)


class ManageConsultoresUseCase:
    def __init__(
        self,
        consultor_repo: ConsultorRepository,
        indicacao_repo: IndicacaoRepository,
    ):
        self._consultores = consultor_repo
        self._indicacoes = indicacao_repo

    async def list(self, filters: ConsultorFilter, scope: AccessScope) -> list[Consultor]:
        cidades = scope.restrict(set(filters.cidades) if filters.cidades else None)
        if cidades is not None and not cidades:
            return []
        return await self._consultores.search(filters.with_cidades(cidades))

    async def add(
        self,
        nome: str,
        email: str,
        natureza: str,
        cidade: str,
        scope: AccessScope,
        ativo_na_roleta: bool = True,
    ) -> Consultor:
        """Create a consultant at the front of its queue (epoch timestamp)."""
        if not scope.allows_city(cidade):
            raise AuthorizationFault()
        consultor = Consultor(
            id=None,
            nome=nome,
            email=email,
            natureza=natureza,
            cidade=cidade,
            ativo_na_roleta=ativo_na_roleta,
            data_ultima_indicacao=EPOCH,
        )
        await self._consultores.save(consultor)
        logger.info("Consultant %s added to %s/%s", consultor.nome, natureza, cidade)
        return consultor

    async def set_active(self, consultor_id: int, ativo: bool, scope: AccessScope) -> Consultor:
        await self._get_in_scope(consultor_id, scope)
        consultor = await self._consultores.set_active(consultor_id, ativo)
        if consultor is None:
            raise NotFound(f"Consultor {consultor_id} not found")
        logger.info(
            "Consultant %s %s the rotation",
            consultor.nome, "joined" if ativo else "left",
        )
        return consultor

    async def remove(self, consultor_id: int, scope: AccessScope) -> RemovalOutcome:
        """Hard delete without history, otherwise deactivate only."""
        consultor = await self._get_in_scope(consultor_id, scope)
        history = await self._indicacoes.count_by_consultor(consultor_id)
        if history:
            await self._consultores.set_active(consultor_id, False)
            logger.info(
                "Consultant %s has %d indicacoes; deactivated instead of deleted",
                consultor.nome, history,
            )
            return RemovalOutcome.DEACTIVATED

        await self._consultores.delete(consultor_id)
        logger.info("Consultant %s deleted", consultor.nome)
        return RemovalOutcome.DELETED

    async def _get_in_scope(self, consultor_id: int, scope: AccessScope) -> Consultor:
        consultor = await self._consultores.get_by_id(consultor_id)
        if consultor is None:
            raise NotFound(f"Consultor {consultor_id} not found")
        if not scope.allows_city(consultor.cidade):
            raise AuthorizationFault()
        return consultor
