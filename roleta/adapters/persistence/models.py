"""SQLAlchemy ORM models — maps to PostgreSQL tables."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from roleta.adapters.persistence.database import Base
from roleta.domain.entities.consultor import EPOCH
from roleta.domain.entities.indicacao import DEFAULT_STATUS


class ConsultorModel(Base):
    __tablename__ = "consultores"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    nome: Mapped[str] = mapped_column(String(200), nullable=False)
    email: Mapped[str] = mapped_column(String(254), nullable=False)
    natureza: Mapped[str] = mapped_column(String(100), nullable=False)
    cidade: Mapped[str] = mapped_column(String(100), nullable=False)
    ativo_na_roleta: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
    data_ultima_indicacao: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=EPOCH,
        server_default=text("'1970-01-01 00:00:00+00'"),
    )

    __table_args__ = (
        Index(
            "idx_consultores_fila",
            "natureza", "cidade", "ativo_na_roleta", "data_ultima_indicacao", "id",
        ),
    )


class IndicacaoModel(Base):
    __tablename__ = "indicacoes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    consultor_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("consultores.id", ondelete="SET NULL"), nullable=True
    )
    nome_corretor: Mapped[str | None] = mapped_column(String(200), nullable=True)
    unidade_corretor: Mapped[str | None] = mapped_column(String(200), nullable=True)
    natureza: Mapped[str] = mapped_column(String(100), nullable=False)
    cidade: Mapped[str] = mapped_column(String(100), nullable=False)
    nome_cliente: Mapped[str] = mapped_column(String(200), nullable=False)
    tel_cliente: Mapped[str | None] = mapped_column(String(50), nullable=True)
    descricao_situacao: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(50), nullable=False, default=DEFAULT_STATUS,
        server_default=DEFAULT_STATUS,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    consultor: Mapped["ConsultorModel | None"] = relationship(lazy="joined")

    __mapper_args__ = {"eager_defaults": True}

    __table_args__ = (
        Index("idx_indicacoes_consultor", "consultor_id"),
        Index("idx_indicacoes_cidade", "cidade"),
        Index("idx_indicacoes_created_at", "created_at"),
    )
