"""AllocateConsultorUseCase — round-robin pick of the next consultant."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable

from roleta.application.ports.consultor_repo import ConsultorRepository
from roleta.domain.entities.consultor import Consultor
from roleta.domain.errors import NoEligibleConsultant

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AllocateConsultorUseCase:
    """Selects the head of a (natureza, cidade) queue and advances it.

    The read of the head and the timestamp advance happen inside the
    repository's ``claim_head`` so concurrent callers are serialized by the
    store, not by this class.
    """

    def __init__(
        self,
        consultor_repo: ConsultorRepository,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._consultores = consultor_repo
        self._clock = clock

    async def execute(self, natureza: str, cidade: str) -> Consultor | NoEligibleConsultant:
        consultor = await self._consultores.claim_head(natureza, cidade, self._clock())
        if consultor is None:
            logger.warning("No active consultant for queue %s/%s", natureza, cidade)
            return NoEligibleConsultant(natureza=natureza, cidade=cidade)

        logger.info(
            "Queue %s/%s → consultant %s (id=%s)",
            natureza, cidade, consultor.nome, consultor.id,
        )
        return consultor
