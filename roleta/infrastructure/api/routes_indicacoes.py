"""Lead submission endpoint — the entry point of the rotation."""

from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roleta.adapters.persistence.database import get_session
from roleta.application.use_cases.notify_assignment import NotifyAssignmentUseCase
from roleta.application.use_cases.submit_indicacao import SubmitIndicacaoUseCase
from roleta.domain.entities.indicacao import NovaIndicacao
from roleta.domain.errors import InfrastructureFault, NoEligibleConsultant
from roleta.infrastructure.api.dependencies import (
    get_notify_assignment_uc,
    get_submit_indicacao_uc,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/indicacoes", tags=["indicacoes"])


class IndicacaoIn(BaseModel):
    natureza: str = Field(min_length=1, max_length=100)
    cidade: str = Field(min_length=1, max_length=100)
    nome_cliente: str = Field(min_length=1, max_length=200)
    tel_cliente: str | None = Field(default=None, max_length=50)
    nome_corretor: str | None = Field(default=None, max_length=200)
    unidade_corretor: str | None = Field(default=None, max_length=200)
    descricao_situacao: str | None = None

    model_config = {"str_strip_whitespace": True}

    def to_domain(self) -> NovaIndicacao:
        return NovaIndicacao(**self.model_dump())


@router.post("", status_code=status.HTTP_201_CREATED)
async def submit_indicacao(
    payload: IndicacaoIn,
    background_tasks: BackgroundTasks,
    submit_uc: SubmitIndicacaoUseCase = Depends(get_submit_indicacao_uc),
    notify_uc: NotifyAssignmentUseCase = Depends(get_notify_assignment_uc),
    session: AsyncSession = Depends(get_session),
):
    """Assign the lead to the next consultant of its queue and record it."""
    try:
        outcome = await submit_uc.execute(payload.to_domain())
        if isinstance(outcome, NoEligibleConsultant):
            await session.rollback()
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={
                    "success": False,
                    "message": "Falha: Nenhum consultor ativo para esta fila.",
                },
            )
        await session.commit()
    except (InfrastructureFault, SQLAlchemyError):
        logger.exception(
            "Lead submission failed for queue %s/%s (client %s)",
            payload.natureza, payload.cidade, payload.nome_cliente,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "success": False,
                "message": "Erro interno no servidor ao processar a Roleta.",
            },
        )

    # Runs after the response is sent
    background_tasks.add_task(notify_uc.execute, outcome.consultor, outcome.indicacao)

    return {
        "success": True,
        "message": "Indicação atribuída com sucesso!",
        "consultor_sorteado": outcome.consultor.nome,
        "indicacao_id": outcome.indicacao.id,
    }
