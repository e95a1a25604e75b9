"""SQLAlchemy repository implementations."""

from __future__ import annotations

import functools
import logging
from datetime import datetime, time, timedelta, timezone

from sqlalchemy import delete, func, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from roleta.adapters.persistence.models import ConsultorModel, IndicacaoModel
from roleta.application.ports.consultor_repo import ConsultorRepository
from roleta.application.ports.indicacao_repo import IndicacaoRepository
from roleta.config import settings
from roleta.domain.entities.consultor import Consultor, next_rotation_timestamp
from roleta.domain.entities.indicacao import DEFAULT_STATUS, Indicacao
from roleta.domain.errors import InfrastructureFault
from roleta.domain.policies.round_robin import pick_head
from roleta.domain.value_objects.filters import ConsultorFilter, IndicacaoFilter

logger = logging.getLogger(__name__)

# ─── Mappers ─────────────────────────────────────────────────────────


def _consultor_to_domain(m: ConsultorModel) -> Consultor:
    return Consultor(
        id=m.id,
        nome=m.nome,
        email=m.email,
        natureza=m.natureza,
        cidade=m.cidade,
        ativo_na_roleta=m.ativo_na_roleta,
        data_ultima_indicacao=m.data_ultima_indicacao,
    )


def _indicacao_to_domain(m: IndicacaoModel) -> Indicacao:
    return Indicacao(
        id=m.id,
        consultor_id=m.consultor_id,
        natureza=m.natureza,
        cidade=m.cidade,
        nome_cliente=m.nome_cliente,
        tel_cliente=m.tel_cliente,
        nome_corretor=m.nome_corretor,
        unidade_corretor=m.unidade_corretor,
        descricao_situacao=m.descricao_situacao,
        status=m.status,
        created_at=m.created_at,
        consultor_nome=m.consultor.nome if m.consultor else None,
    )


def _day_start(d) -> datetime:
    return datetime.combine(d, time.min, tzinfo=timezone.utc)


def _storage_faults(method):
    """Re-raise driver/ORM errors as InfrastructureFault."""

    @functools.wraps(method)
    async def wrapper(*args, **kwargs):
        try:
            return await method(*args, **kwargs)
        except SQLAlchemyError as e:
            logger.exception("Storage failure in %s", method.__qualname__)
            raise InfrastructureFault(f"{method.__qualname__} failed") from e

    return wrapper


# ─── Repositories ────────────────────────────────────────────────────


class SqlConsultorRepository(ConsultorRepository):
    def __init__(self, session: AsyncSession, lock_timeout_ms: int | None = None):
        self._s = session
        self._lock_timeout_ms = (
            settings.allocation_lock_timeout_ms if lock_timeout_ms is None else lock_timeout_ms
        )

    @_storage_faults
    async def save(self, consultor: Consultor) -> Consultor:
        m = ConsultorModel(
            nome=consultor.nome,
            email=consultor.email,
            natureza=consultor.natureza,
            cidade=consultor.cidade,
            ativo_na_roleta=consultor.ativo_na_roleta,
            data_ultima_indicacao=consultor.data_ultima_indicacao,
        )
        self._s.add(m)
        await self._s.flush()
        consultor.id = m.id
        return consultor

    @_storage_faults
    async def get_by_id(self, consultor_id: int) -> Consultor | None:
        m = await self._s.get(ConsultorModel, consultor_id)
        return _consultor_to_domain(m) if m else None

    @_storage_faults
    async def search(self, filters: ConsultorFilter) -> list[Consultor]:
        stmt = select(ConsultorModel)
        if filters.natureza:
            stmt = stmt.where(ConsultorModel.natureza == filters.natureza)
        if filters.cidades is not None:
            stmt = stmt.where(ConsultorModel.cidade.in_(sorted(filters.cidades)))
        if filters.ativo_na_roleta is not None:
            stmt = stmt.where(ConsultorModel.ativo_na_roleta.is_(filters.ativo_na_roleta))
        result = await self._s.execute(
            stmt.order_by(
                ConsultorModel.cidade,
                ConsultorModel.natureza,
                ConsultorModel.data_ultima_indicacao,
                ConsultorModel.id,
            )
        )
        return [_consultor_to_domain(m) for m in result.scalars()]

    @_storage_faults
    async def claim_head(self, natureza: str, cidade: str, now: datetime) -> Consultor | None:
        await self._lock_queue(natureza, cidade)
        result = await self._s.execute(
            select(ConsultorModel)
            .where(
                ConsultorModel.natureza == natureza,
                ConsultorModel.cidade == cidade,
                ConsultorModel.ativo_na_roleta.is_(True),
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        rows = {m.id: m for m in result.scalars()}
        head = pick_head([_consultor_to_domain(m) for m in rows.values()], natureza, cidade)
        if head is None:
            return None

        m = rows[head.id]
        m.data_ultima_indicacao = next_rotation_timestamp(m.data_ultima_indicacao, now)
        await self._s.flush()
        return _consultor_to_domain(m)

    @_storage_faults
    async def set_active(self, consultor_id: int, ativo: bool) -> Consultor | None:
        m = await self._s.get(ConsultorModel, consultor_id)
        if m is None:
            return None
        m.ativo_na_roleta = ativo
        await self._s.flush()
        return _consultor_to_domain(m)

    @_storage_faults
    async def delete(self, consultor_id: int) -> None:
        await self._s.execute(delete(ConsultorModel).where(ConsultorModel.id == consultor_id))
        await self._s.flush()

    async def _lock_queue(self, natureza: str, cidade: str) -> None:
        """Serialize allocations of one queue until the transaction ends.

        Each caller reads the queue only after the previous claim on it has
        committed or rolled back, so the head it sees is current.
        """
        if self._s.get_bind().dialect.name != "postgresql":
            return
        # SET does not take bind parameters; the value is an int from settings.
        await self._s.execute(text(f"SET LOCAL lock_timeout = {int(self._lock_timeout_ms)}"))
        await self._s.execute(
            select(func.pg_advisory_xact_lock(func.hashtext(f"{natureza}|{cidade}")))
        )


class SqlIndicacaoRepository(IndicacaoRepository):
    def __init__(self, session: AsyncSession):
        self._s = session

    @_storage_faults
    async def save(self, indicacao: Indicacao) -> Indicacao:
        m = IndicacaoModel(
            consultor_id=indicacao.consultor_id,
            nome_corretor=indicacao.nome_corretor,
            unidade_corretor=indicacao.unidade_corretor,
            natureza=indicacao.natureza,
            cidade=indicacao.cidade,
            nome_cliente=indicacao.nome_cliente,
            tel_cliente=indicacao.tel_cliente,
            descricao_situacao=indicacao.descricao_situacao,
            status=indicacao.status or DEFAULT_STATUS,
        )
        self._s.add(m)
        await self._s.flush()
        indicacao.id = m.id
        indicacao.created_at = m.created_at
        return indicacao

    @_storage_faults
    async def get_by_id(self, indicacao_id: int) -> Indicacao | None:
        m = await self._s.get(IndicacaoModel, indicacao_id)
        return _indicacao_to_domain(m) if m else None

    @_storage_faults
    async def search(self, filters: IndicacaoFilter) -> list[Indicacao]:
        stmt = select(IndicacaoModel)
        if filters.data_inicio:
            stmt = stmt.where(IndicacaoModel.created_at >= _day_start(filters.data_inicio))
        if filters.data_fim:
            stmt = stmt.where(
                IndicacaoModel.created_at < _day_start(filters.data_fim + timedelta(days=1))
            )
        if filters.consultor_ids:
            stmt = stmt.where(IndicacaoModel.consultor_id.in_(sorted(filters.consultor_ids)))
        if filters.cidades is not None:
            stmt = stmt.where(IndicacaoModel.cidade.in_(sorted(filters.cidades)))
        if filters.natureza:
            stmt = stmt.where(IndicacaoModel.natureza == filters.natureza)
        if filters.status:
            stmt = stmt.where(IndicacaoModel.status == filters.status)

        result = await self._s.execute(
            stmt.order_by(IndicacaoModel.created_at.desc(), IndicacaoModel.id.desc())
        )
        return [_indicacao_to_domain(m) for m in result.unique().scalars()]

    @_storage_faults
    async def update_status(self, indicacao_id: int, status: str) -> Indicacao | None:
        m = await self._s.get(IndicacaoModel, indicacao_id)
        if m is None:
            return None
        m.status = status
        await self._s.flush()
        return _indicacao_to_domain(m)

    @_storage_faults
    async def count_by_consultor(self, consultor_id: int) -> int:
        result = await self._s.execute(
            select(func.count(IndicacaoModel.id)).where(
                IndicacaoModel.consultor_id == consultor_id
            )
        )
        return result.scalar() or 0
