"""Seed the consultant registry from a CSV file.

Usage:
    python -m roleta.tools.seed_db --csv data/consultores.csv
    python -m roleta.tools.seed_db --csv data/consultores.csv --dry-run
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from sqlalchemy import select

from roleta.adapters.csv_loader.loader import load_consultores
from roleta.adapters.persistence.database import async_session_factory
from roleta.adapters.persistence.models import ConsultorModel
from roleta.adapters.persistence.repositories import (
    SqlConsultorRepository,
    SqlIndicacaoRepository,
)
from roleta.application.use_cases.manage_consultores import ManageConsultoresUseCase
from roleta.domain.value_objects.access_scope import AccessScope

logging.basicConfig(level=logging.INFO, format="%(levelname)s | %(message)s")
logger = logging.getLogger(__name__)


async def seed(csv_path: Path, dry_run: bool = False) -> dict[str, int]:
    """Add every consultant of the CSV not yet registered in its queue.

    A consultant is identified by (email, natureza, cidade); existing rows are
    left untouched so re-running never resets anyone's rotation position.
    """
    counts = {"added": 0, "skipped": 0}
    rows = load_consultores(csv_path)

    async with async_session_factory() as session:
        uc = ManageConsultoresUseCase(
            consultor_repo=SqlConsultorRepository(session),
            indicacao_repo=SqlIndicacaoRepository(session),
        )
        scope = AccessScope.unrestricted()

        for row in rows:
            existing = await session.execute(
                select(ConsultorModel.id).where(
                    ConsultorModel.email == row["email"],
                    ConsultorModel.natureza == row["natureza"],
                    ConsultorModel.cidade == row["cidade"],
                )
            )
            if existing.scalar_one_or_none() is not None:
                logger.debug("Consultant %s already in %s/%s, skipping",
                             row["email"], row["natureza"], row["cidade"])
                counts["skipped"] += 1
                continue

            await uc.add(
                nome=row["nome"],
                email=row["email"],
                natureza=row["natureza"],
                cidade=row["cidade"],
                ativo_na_roleta=row["ativo_na_roleta"],
                scope=scope,
            )
            counts["added"] += 1

        if dry_run:
            await session.rollback()
            logger.info("Dry run: rolled back")
        else:
            await session.commit()

    logger.info("Seed complete: %d added, %d skipped", counts["added"], counts["skipped"])
    return counts


def main():
    parser = argparse.ArgumentParser(description="Seed the consultant registry from CSV")
    parser.add_argument(
        "--csv", type=str, default="data/consultores.csv",
        help="CSV with nome, email, natureza, cidade[, ativo_na_roleta]",
    )
    parser.add_argument(
        "--dry-run", action="store_true",
        help="Parse and insert inside a transaction, then roll back",
    )
    args = parser.parse_args()

    csv_path = Path(args.csv)
    if not csv_path.exists():
        logger.error("CSV file not found: %s", csv_path)
        sys.exit(1)

    asyncio.run(seed(csv_path, dry_run=args.dry_run))


if __name__ == "__main__":
    main()
