"""Port interface for assignment history persistence."""

from abc import ABC, abstractmethod

from roleta.domain.entities.indicacao import Indicacao
from roleta.domain.value_objects.filters import IndicacaoFilter


class IndicacaoRepository(ABC):
    @abstractmethod
    async def save(self, indicacao: Indicacao) -> Indicacao:
        ...

    @abstractmethod
    async def get_by_id(self, indicacao_id: int) -> Indicacao | None:
        ...

    @abstractmethod
    async def search(self, filters: IndicacaoFilter) -> list[Indicacao]:
        """Newest first. ``filters.cidades`` of an empty set matches nothing."""
        ...

    @abstractmethod
    async def update_status(self, indicacao_id: int, status: str) -> Indicacao | None:
        ...

    @abstractmethod
    async def count_by_consultor(self, consultor_id: int) -> int:
        ...
