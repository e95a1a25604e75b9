"""Assignment history endpoints — scoped search, summary and status edit."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from roleta.adapters.persistence.database import get_session
from roleta.application.use_cases.history import MAX_STATUS_LENGTH, HistoryUseCase
from roleta.domain.entities.indicacao import Indicacao
from roleta.domain.value_objects.access_scope import AccessScope
from roleta.domain.value_objects.filters import IndicacaoFilter
from roleta.infrastructure.api.dependencies import get_access_scope, get_history_uc

router = APIRouter(prefix="/historico", tags=["historico"])


class StatusUpdate(BaseModel):
    status: str = Field(min_length=1, max_length=MAX_STATUS_LENGTH)

    model_config = {"str_strip_whitespace": True}


@router.get("")
async def list_historico(
    data_inicio: date | None = None,
    data_fim: date | None = None,
    consultor_id: list[int] = Query(default=[]),
    cidade: list[str] = Query(default=[]),
    natureza: str | None = None,
    status: str | None = None,
    scope: AccessScope = Depends(get_access_scope),
    uc: HistoryUseCase = Depends(get_history_uc),
):
    """Assignment records visible to the caller, newest first."""
    filters = IndicacaoFilter(
        data_inicio=data_inicio,
        data_fim=data_fim,
        consultor_ids=frozenset(consultor_id),
        cidades=frozenset(cidade) if cidade else None,
        natureza=natureza,
        status=status,
    )
    rows = await uc.search(filters, scope)
    return {
        "total": len(rows),
        "indicacoes": [_serialize_indicacao(r) for r in rows],
    }


@router.get("/resumo")
async def historico_resumo(
    scope: AccessScope = Depends(get_access_scope),
    uc: HistoryUseCase = Depends(get_history_uc),
):
    """Counts for the dashboard widgets."""
    return await uc.summary(scope)


@router.patch("/{indicacao_id}")
async def update_status(
    indicacao_id: int,
    payload: StatusUpdate,
    scope: AccessScope = Depends(get_access_scope),
    uc: HistoryUseCase = Depends(get_history_uc),
    session: AsyncSession = Depends(get_session),
):
    indicacao = await uc.update_status(indicacao_id, payload.status, scope)
    await session.commit()
    return _serialize_indicacao(indicacao)


def _serialize_indicacao(i: Indicacao) -> dict:
    return {
        "id": i.id,
        "created_at": i.created_at.isoformat() if i.created_at else None,
        "consultor_id": i.consultor_id,
        "consultor_nome": i.consultor_nome,
        "nome_corretor": i.nome_corretor,
        "unidade_corretor": i.unidade_corretor,
        "natureza": i.natureza,
        "cidade": i.cidade,
        "nome_cliente": i.nome_cliente,
        "tel_cliente": i.tel_cliente,
        "descricao_situacao": i.descricao_situacao,
        "status": i.status,
    }
