"""Tests for AllocateConsultorUseCase with an in-memory registry."""

from __future__ import annotations

import asyncio
from datetime import timedelta

import pytest
from conftest import T0, FakeConsultorRepo, TickingClock, make_consultor

from roleta.application.use_cases.allocate import AllocateConsultorUseCase
from roleta.domain.errors import NoEligibleConsultant


def _allocator(consultores, clock=None) -> tuple[AllocateConsultorUseCase, FakeConsultorRepo]:
    repo = FakeConsultorRepo(consultores)
    return AllocateConsultorUseCase(repo, clock=clock or TickingClock()), repo


@pytest.mark.asyncio
async def test_sequence_is_a_b_c_a(queue_abc):
    uc, _ = _allocator(queue_abc)
    names = []
    for _ in range(4):
        chosen = await uc.execute("CRI", "Itapema")
        names.append(chosen.nome)
    assert names == ["A", "B", "C", "A"]


@pytest.mark.asyncio
async def test_selected_timestamp_becomes_now(queue_abc):
    clock = TickingClock()
    uc, repo = _allocator(queue_abc, clock)
    chosen = await uc.execute("CRI", "Itapema")
    assert chosen.nome == "A"
    assert chosen.data_ultima_indicacao == T0 + timedelta(seconds=1)
    assert chosen.data_ultima_indicacao > repo.consultores[3].data_ultima_indicacao


@pytest.mark.asyncio
async def test_only_the_selected_consultant_is_touched(queue_abc):
    uc, repo = _allocator(queue_abc)
    before = {c.id: c.data_ultima_indicacao for c in queue_abc}
    chosen = await uc.execute("CRI", "Itapema")
    changed = [cid for cid, ts in before.items() if repo.consultores[cid].data_ultima_indicacao != ts]
    assert changed == [chosen.id]


@pytest.mark.asyncio
@pytest.mark.parametrize("size", [1, 2, 5])
async def test_n_calls_visit_each_member_once(size):
    consultores = [
        make_consultor(i, last=T0 - timedelta(minutes=size - i)) for i in range(1, size + 1)
    ]
    uc, _ = _allocator(consultores)
    picked = [(await uc.execute("CRI", "Itapema")).id for _ in range(size)]
    assert picked == list(range(1, size + 1))


@pytest.mark.asyncio
async def test_empty_queue_returns_no_eligible():
    uc, _ = _allocator([])
    outcome = await uc.execute("CRI", "Itapema")
    assert outcome == NoEligibleConsultant(natureza="CRI", cidade="Itapema")


@pytest.mark.asyncio
async def test_all_inactive_queue_returns_no_eligible():
    uc, repo = _allocator([make_consultor(1, ativo=False), make_consultor(2, ativo=False)])
    outcome = await uc.execute("CRI", "Itapema")
    assert isinstance(outcome, NoEligibleConsultant)
    assert repo.claims == 0


@pytest.mark.asyncio
async def test_other_queues_do_not_interfere():
    uc, _ = _allocator([
        make_consultor(1, natureza="ADIM"),
        make_consultor(2, cidade="Itajai"),
    ])
    assert isinstance(await uc.execute("CRI", "Itapema"), NoEligibleConsultant)
    assert (await uc.execute("ADIM", "Itapema")).id == 1


@pytest.mark.asyncio
async def test_deactivated_consultant_leaves_the_rotation(queue_abc):
    uc, repo = _allocator(queue_abc)
    await repo.set_active(1, False)
    picked = [(await uc.execute("CRI", "Itapema")).nome for _ in range(4)]
    assert picked == ["B", "C", "B", "C"]


@pytest.mark.asyncio
async def test_concurrent_calls_on_single_member_queue_both_succeed():
    uc, _ = _allocator([make_consultor(7)])
    results = await asyncio.gather(
        uc.execute("CRI", "Itapema"), uc.execute("CRI", "Itapema")
    )
    assert [r.id for r in results] == [7, 7]


@pytest.mark.asyncio
async def test_concurrent_calls_never_repeat_before_full_cycle(queue_abc):
    uc, _ = _allocator(queue_abc)
    results = await asyncio.gather(*(uc.execute("CRI", "Itapema") for _ in range(3)))
    assert sorted(r.nome for r in results) == ["A", "B", "C"]

    more = await asyncio.gather(*(uc.execute("CRI", "Itapema") for _ in range(6)))
    names = [r.nome for r in more]
    assert names.count("A") == names.count("B") == names.count("C") == 2


@pytest.mark.asyncio
async def test_infrastructure_errors_propagate(queue_abc):
    class BrokenRepo(FakeConsultorRepo):
        async def claim_head(self, natureza, cidade, now):
            raise ConnectionError("database unreachable")

    uc = AllocateConsultorUseCase(BrokenRepo(queue_abc))
    with pytest.raises(ConnectionError):
        await uc.execute("CRI", "Itapema")
