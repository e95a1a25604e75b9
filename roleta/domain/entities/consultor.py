"""Consultor entity — a salesperson who receives leads in rotation."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass
class Consultor:
    id: int | None
    nome: str
    email: str
    natureza: str
    cidade: str
    ativo_na_roleta: bool = True
    data_ultima_indicacao: datetime = field(default=EPOCH)

    def serves(self, natureza: str, cidade: str) -> bool:
        """True if this consultant is in the active rotation for the queue."""
        return (
            self.ativo_na_roleta
            and self.natureza == natureza
            and self.cidade == cidade
        )

    def rotation_key(self) -> tuple[datetime, int]:
        return (self.data_ultima_indicacao, self.id or 0)


def next_rotation_timestamp(previous: datetime, now: datetime) -> datetime:
    """Timestamp a consultant gets when picked: *now*, but strictly later than
    *previous* even if the caller's clock lags behind a concurrent writer."""
    if now > previous:
        return now
    return previous + timedelta(microseconds=1)
