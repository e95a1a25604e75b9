"""SubmitIndicacaoUseCase — allocate a consultant and record the lead."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from roleta.application.ports.indicacao_repo import IndicacaoRepository
from roleta.application.use_cases.allocate import AllocateConsultorUseCase
from roleta.domain.entities.consultor import Consultor
from roleta.domain.entities.indicacao import Indicacao, NovaIndicacao
from roleta.domain.errors import NoEligibleConsultant

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    """A lead that was assigned and recorded."""

    consultor: Consultor
    indicacao: Indicacao


class SubmitIndicacaoUseCase:
    """Allocator → Recorder. Notification is dispatched by the caller
    once the unit of work has been committed."""

    def __init__(
        self,
        allocator: AllocateConsultorUseCase,
        indicacao_repo: IndicacaoRepository,
    ):
        self._allocator = allocator
        self._indicacoes = indicacao_repo

    async def execute(self, lead: NovaIndicacao) -> SubmissionResult | NoEligibleConsultant:
        outcome = await self._allocator.execute(lead.natureza, lead.cidade)
        if isinstance(outcome, NoEligibleConsultant):
            return outcome

        indicacao = await self.record(lead, outcome)
        return SubmissionResult(consultor=outcome, indicacao=indicacao)

    async def record(self, lead: NovaIndicacao, consultor: Consultor) -> Indicacao:
        """Persist the history row for an assignment. Not idempotent."""
        indicacao = Indicacao(
            id=None,
            consultor_id=consultor.id,
            natureza=lead.natureza,
            cidade=lead.cidade,
            nome_cliente=lead.nome_cliente,
            tel_cliente=lead.tel_cliente,
            nome_corretor=lead.nome_corretor,
            unidade_corretor=lead.unidade_corretor,
            descricao_situacao=lead.descricao_situacao,
            consultor_nome=consultor.nome,
        )
        await self._indicacoes.save(indicacao)
        logger.info(
            "Indicacao %s recorded: client=%s → %s",
            indicacao.id, lead.nome_cliente, consultor.nome,
        )
        return indicacao
