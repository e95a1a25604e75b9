"""Consultant registry endpoints — scoped list, add, toggle, remove."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from roleta.adapters.persistence.database import get_session
from roleta.application.use_cases.manage_consultores import ManageConsultoresUseCase
from roleta.domain.entities.consultor import Consultor
from roleta.domain.value_objects.access_scope import AccessScope
from roleta.domain.value_objects.filters import ConsultorFilter
from roleta.infrastructure.api.dependencies import get_access_scope, get_manage_consultores_uc

router = APIRouter(prefix="/consultores", tags=["consultores"])


class ConsultorIn(BaseModel):
    nome: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    natureza: str = Field(min_length=1, max_length=100)
    cidade: str = Field(min_length=1, max_length=100)
    ativo_na_roleta: bool = True

    model_config = {"str_strip_whitespace": True}


class ConsultorToggle(BaseModel):
    ativo_na_roleta: bool


@router.get("")
async def list_consultores(
    natureza: str | None = None,
    cidade: list[str] = Query(default=[]),
    ativo: bool | None = None,
    scope: AccessScope = Depends(get_access_scope),
    uc: ManageConsultoresUseCase = Depends(get_manage_consultores_uc),
):
    """List consultants visible to the caller, in rotation order per queue."""
    filters = ConsultorFilter(
        natureza=natureza,
        cidades=frozenset(cidade) if cidade else None,
        ativo_na_roleta=ativo,
    )
    consultores = await uc.list(filters, scope)
    return {
        "total": len(consultores),
        "consultores": [_serialize_consultor(c) for c in consultores],
    }


@router.post("", status_code=status.HTTP_201_CREATED)
async def add_consultor(
    payload: ConsultorIn,
    scope: AccessScope = Depends(get_access_scope),
    uc: ManageConsultoresUseCase = Depends(get_manage_consultores_uc),
    session: AsyncSession = Depends(get_session),
):
    consultor = await uc.add(
        nome=payload.nome,
        email=payload.email,
        natureza=payload.natureza,
        cidade=payload.cidade,
        ativo_na_roleta=payload.ativo_na_roleta,
        scope=scope,
    )
    await session.commit()
    return _serialize_consultor(consultor)


@router.patch("/{consultor_id}")
async def toggle_consultor(
    consultor_id: int,
    payload: ConsultorToggle,
    scope: AccessScope = Depends(get_access_scope),
    uc: ManageConsultoresUseCase = Depends(get_manage_consultores_uc),
    session: AsyncSession = Depends(get_session),
):
    """Put a consultant in or out of the rotation."""
    consultor = await uc.set_active(consultor_id, payload.ativo_na_roleta, scope)
    await session.commit()
    return _serialize_consultor(consultor)


@router.delete("/{consultor_id}")
async def remove_consultor(
    consultor_id: int,
    scope: AccessScope = Depends(get_access_scope),
    uc: ManageConsultoresUseCase = Depends(get_manage_consultores_uc),
    session: AsyncSession = Depends(get_session),
):
    """Delete a consultant without history; deactivate one with history."""
    outcome = await uc.remove(consultor_id, scope)
    await session.commit()
    return {"status": "ok", "consultor_id": consultor_id, "result": outcome.value}


def _serialize_consultor(c: Consultor) -> dict:
    return {
        "id": c.id,
        "nome": c.nome,
        "email": c.email,
        "natureza": c.natureza,
        "cidade": c.cidade,
        "ativo_na_roleta": c.ativo_na_roleta,
        "data_ultima_indicacao": c.data_ultima_indicacao.isoformat(),
    }
