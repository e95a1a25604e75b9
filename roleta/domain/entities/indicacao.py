"""Indicacao entities — an incoming lead and its assignment record."""

from dataclasses import dataclass
from datetime import datetime

DEFAULT_STATUS = "Pendente"


@dataclass
class NovaIndicacao:
    """Lead as submitted by a referring broker, before assignment."""

    natureza: str
    cidade: str
    nome_cliente: str
    tel_cliente: str | None = None
    nome_corretor: str | None = None
    unidade_corretor: str | None = None
    descricao_situacao: str | None = None


@dataclass
class Indicacao:
    """Historical record of one assignment. Only ``status`` is mutable."""

    id: int | None
    consultor_id: int | None
    natureza: str
    cidade: str
    nome_cliente: str
    tel_cliente: str | None = None
    nome_corretor: str | None = None
    unidade_corretor: str | None = None
    descricao_situacao: str | None = None
    status: str = DEFAULT_STATUS
    created_at: datetime | None = None
    consultor_nome: str | None = None
