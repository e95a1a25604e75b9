"""RoundRobinPolicy — least-recently-assigned consultant selection."""

from __future__ import annotations

from roleta.domain.entities.consultor import Consultor


def rotation_queue(
    consultores: list[Consultor], natureza: str, cidade: str
) -> list[Consultor]:
    """Active consultants of one (natureza, cidade) queue in rotation order.

    Order is (data_ultima_indicacao ASC, id ASC) so ties are deterministic.
    """
    queue = [c for c in consultores if c.serves(natureza, cidade)]
    return sorted(queue, key=lambda c: c.rotation_key())


def pick_head(
    consultores: list[Consultor], natureza: str, cidade: str
) -> Consultor | None:
    """Return the head of the queue, or None if the queue is empty."""
    queue = rotation_queue(consultores, natureza, cidade)
    return queue[0] if queue else None
