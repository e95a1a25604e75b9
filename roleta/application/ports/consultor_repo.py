"""Port interface for consultant registry persistence."""

from abc import ABC, abstractmethod
from datetime import datetime

from roleta.domain.entities.consultor import Consultor
from roleta.domain.value_objects.filters import ConsultorFilter


class ConsultorRepository(ABC):
    @abstractmethod
    async def save(self, consultor: Consultor) -> Consultor:
        ...

    @abstractmethod
    async def get_by_id(self, consultor_id: int) -> Consultor | None:
        ...

    @abstractmethod
    async def search(self, filters: ConsultorFilter) -> list[Consultor]:
        ...

    @abstractmethod
    async def claim_head(self, natureza: str, cidade: str, now: datetime) -> Consultor | None:
        """Select the head of the (natureza, cidade) queue and set its
        data_ultima_indicacao to *now* as one atomic step.

        Concurrent callers must never claim the same consultant while another
        active member of the queue is available, and each claim must see the
        committed result of the previous one. Returns None for an empty queue.
        """
        ...

    @abstractmethod
    async def set_active(self, consultor_id: int, ativo: bool) -> Consultor | None:
        ...

    @abstractmethod
    async def delete(self, consultor_id: int) -> None:
        ...
