"""NotifyAssignmentUseCase — best-effort email after a committed assignment."""

from __future__ import annotations

import logging

from roleta.application.ports.notifier_port import NotifierPort
from roleta.domain.entities.consultor import Consultor
from roleta.domain.entities.indicacao import Indicacao

logger = logging.getLogger(__name__)


def build_subject(consultor: Consultor, indicacao: Indicacao) -> str:
    return (
        f"[INDICAÇÃO CRI/ADIM] {indicacao.natureza} - Cliente: {indicacao.nome_cliente} "
        f"(Atribuído: {consultor.nome})"
    )


def build_body(consultor: Consultor, indicacao: Indicacao) -> str:
    lines = [
        "Nova Indicação Recebida - Prioridade Máxima!",
        f"Atribuído a: {consultor.nome}",
        f"Corretor Indicador: {indicacao.nome_corretor or 'Não Informado'}"
        + (f" ({indicacao.unidade_corretor})" if indicacao.unidade_corretor else ""),
        f"Natureza: {indicacao.natureza} / Cidade: {indicacao.cidade}",
        f"Dados do Cliente: Nome: {indicacao.nome_cliente}, "
        f"Telefone: {indicacao.tel_cliente or 'N/A'}.",
    ]
    if indicacao.descricao_situacao:
        lines.append(f"Situação: {indicacao.descricao_situacao}")
    return "\n".join(lines)


class NotifyAssignmentUseCase:
    """Sends the assignment email. Never raises: failures are only logged."""

    def __init__(self, notifier: NotifierPort, cc: str | None = None):
        self._notifier = notifier
        self._cc = cc or None

    async def execute(self, consultor: Consultor, indicacao: Indicacao) -> bool:
        try:
            await self._notifier.notify(
                to=consultor.email,
                cc=self._cc,
                subject=build_subject(consultor, indicacao),
                body=build_body(consultor, indicacao),
            )
        except Exception:
            logger.exception(
                "Failed to notify %s <%s> about indicacao %s",
                consultor.nome, consultor.email, indicacao.id,
            )
            return False

        logger.info("Assignment email sent to %s for indicacao %s", consultor.nome, indicacao.id)
        return True
