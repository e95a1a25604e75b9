"""Query filters for dashboard reads."""

from dataclasses import dataclass, field, replace
from datetime import date


@dataclass(frozen=True)
class IndicacaoFilter:
    data_inicio: date | None = None
    data_fim: date | None = None
    consultor_ids: frozenset[int] = field(default_factory=frozenset)
    cidades: frozenset[str] | None = None
    natureza: str | None = None
    status: str | None = None

    def with_cidades(self, cidades: set[str] | None) -> "IndicacaoFilter":
        return replace(self, cidades=frozenset(cidades) if cidades is not None else None)


@dataclass(frozen=True)
class ConsultorFilter:
    natureza: str | None = None
    cidades: frozenset[str] | None = None
    ativo_na_roleta: bool | None = None

    def with_cidades(self, cidades: set[str] | None) -> "ConsultorFilter":
        return replace(self, cidades=frozenset(cidades) if cidades is not None else None)
