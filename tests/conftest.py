"""Pytest configuration, in-memory fakes and shared fixtures."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from roleta.application.ports.consultor_repo import ConsultorRepository
from roleta.application.ports.indicacao_repo import IndicacaoRepository
from roleta.application.ports.notifier_port import NotifierPort
from roleta.domain.entities.consultor import Consultor, next_rotation_timestamp
from roleta.domain.entities.indicacao import Indicacao
from roleta.domain.policies.round_robin import pick_head
from roleta.domain.value_objects.filters import ConsultorFilter, IndicacaoFilter

T0 = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

# ─── In-memory fakes ────────────────────────────────────────────────


class FakeConsultorRepo(ConsultorRepository):
    """Registry held in a dict; claim_head is serialized by an asyncio.Lock
    the way the SQL adapter serializes each queue with an advisory lock."""

    def __init__(self, consultores: list[Consultor] | None = None):
        self.consultores: dict[int, Consultor] = {}
        self.claims = 0
        self._lock = asyncio.Lock()
        for c in consultores or []:
            self.consultores[c.id] = c

    async def save(self, consultor):
        consultor.id = max(self.consultores, default=0) + 1
        self.consultores[consultor.id] = consultor
        return consultor

    async def get_by_id(self, consultor_id):
        return self.consultores.get(consultor_id)

    async def search(self, filters: ConsultorFilter):
        rows = list(self.consultores.values())
        if filters.natureza:
            rows = [c for c in rows if c.natureza == filters.natureza]
        if filters.cidades is not None:
            rows = [c for c in rows if c.cidade in filters.cidades]
        if filters.ativo_na_roleta is not None:
            rows = [c for c in rows if c.ativo_na_roleta == filters.ativo_na_roleta]
        return sorted(rows, key=lambda c: (c.cidade, c.natureza) + c.rotation_key())

    async def claim_head(self, natureza, cidade, now):
        async with self._lock:
            head = pick_head(list(self.consultores.values()), natureza, cidade)
            # Yield inside the critical section so concurrent callers interleave
            await asyncio.sleep(0)
            if head is None:
                return None
            head.data_ultima_indicacao = next_rotation_timestamp(
                head.data_ultima_indicacao, now
            )
            self.claims += 1
            return head

    async def set_active(self, consultor_id, ativo):
        c = self.consultores.get(consultor_id)
        if c is None:
            return None
        c.ativo_na_roleta = ativo
        return c

    async def delete(self, consultor_id):
        self.consultores.pop(consultor_id, None)


class FakeIndicacaoRepo(IndicacaoRepository):
    def __init__(self, records: list[Indicacao] | None = None, fail_on_save: bool = False):
        self.records: list[Indicacao] = list(records or [])
        self.fail_on_save = fail_on_save

    async def save(self, indicacao):
        if self.fail_on_save:
            raise RuntimeError("disk full")
        indicacao.id = len(self.records) + 1
        indicacao.created_at = indicacao.created_at or T0
        self.records.append(indicacao)
        return indicacao

    async def get_by_id(self, indicacao_id):
        return next((r for r in self.records if r.id == indicacao_id), None)

    async def search(self, filters: IndicacaoFilter):
        rows = list(self.records)
        if filters.data_inicio:
            rows = [r for r in rows if r.created_at.date() >= filters.data_inicio]
        if filters.data_fim:
            rows = [r for r in rows if r.created_at.date() <= filters.data_fim]
        if filters.consultor_ids:
            rows = [r for r in rows if r.consultor_id in filters.consultor_ids]
        if filters.cidades is not None:
            rows = [r for r in rows if r.cidade in filters.cidades]
        if filters.natureza:
            rows = [r for r in rows if r.natureza == filters.natureza]
        if filters.status:
            rows = [r for r in rows if r.status == filters.status]
        return sorted(rows, key=lambda r: (r.created_at, r.id), reverse=True)

    async def update_status(self, indicacao_id, status):
        record = await self.get_by_id(indicacao_id)
        if record is None:
            return None
        record.status = status
        return record

    async def count_by_consultor(self, consultor_id):
        return sum(1 for r in self.records if r.consultor_id == consultor_id)


class FakeNotifier(NotifierPort):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[dict] = []

    async def notify(self, to, cc, subject, body):
        if self.fail:
            raise ConnectionError("SMTP relay unreachable")
        self.sent.append({"to": to, "cc": cc, "subject": subject, "body": body})


class TickingClock:
    """Deterministic clock: every call is one second after the previous."""

    def __init__(self, start: datetime = T0):
        self._now = start

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


# ─── Builders & fixtures ────────────────────────────────────────────


def make_consultor(
    cid: int,
    nome: str | None = None,
    natureza: str = "CRI",
    cidade: str = "Itapema",
    ativo: bool = True,
    last: datetime | None = None,
) -> Consultor:
    return Consultor(
        id=cid,
        nome=nome or f"C{cid}",
        email=f"c{cid}@example.com",
        natureza=natureza,
        cidade=cidade,
        ativo_na_roleta=ativo,
        data_ultima_indicacao=last or T0 - timedelta(days=30),
    )


def make_indicacao(
    iid: int,
    consultor_id: int | None = 1,
    cidade: str = "Itapema",
    natureza: str = "CRI",
    status: str = "Pendente",
    created_at: datetime = T0,
    consultor_nome: str | None = None,
) -> Indicacao:
    return Indicacao(
        id=iid,
        consultor_id=consultor_id,
        natureza=natureza,
        cidade=cidade,
        nome_cliente=f"Cliente {iid}",
        tel_cliente="47 99999-0000",
        nome_corretor="Corretor",
        unidade_corretor="Unidade Centro",
        status=status,
        created_at=created_at,
        consultor_nome=consultor_nome or (f"C{consultor_id}" if consultor_id else None),
    )


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def queue_abc() -> list[Consultor]:
    """A@t0, B@t1, C@t2 in the CRI/Itapema queue."""
    return [
        make_consultor(1, "A", last=T0 - timedelta(hours=3)),
        make_consultor(2, "B", last=T0 - timedelta(hours=2)),
        make_consultor(3, "C", last=T0 - timedelta(hours=1)),
    ]
