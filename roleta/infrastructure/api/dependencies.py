"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from roleta.adapters.notifications.log_adapter import LogNotifierAdapter
from roleta.adapters.notifications.sendgrid_adapter import SendGridEmailAdapter
from roleta.adapters.persistence.database import get_session
from roleta.adapters.persistence.repositories import (
    SqlConsultorRepository,
    SqlIndicacaoRepository,
)
from roleta.application.use_cases.allocate import AllocateConsultorUseCase
from roleta.application.use_cases.history import HistoryUseCase
from roleta.application.use_cases.manage_consultores import ManageConsultoresUseCase
from roleta.application.use_cases.notify_assignment import NotifyAssignmentUseCase
from roleta.application.use_cases.submit_indicacao import SubmitIndicacaoUseCase
from roleta.config import settings
from roleta.domain.policies.access import Credential, build_credential_table, resolve_role
from roleta.domain.value_objects.access_scope import AccessScope

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)

# Singletons built from settings at import time
_credential_table = build_credential_table(
    [entry.model_dump() for entry in settings.access_credentials]
)

if settings.email_api_key:
    _notifier = SendGridEmailAdapter()
    logger.info("Using SendGrid for assignment emails")
else:
    _notifier = LogNotifierAdapter()
    logger.warning("EMAIL_API_KEY not set; assignment emails will only be logged")


def get_credential_table() -> list[Credential]:
    return _credential_table


def get_access_scope(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    table: list[Credential] = Depends(get_credential_table),
) -> AccessScope:
    """Resolve the bearer token to a scope or reject with 401."""
    scope = resolve_role(credentials.credentials if credentials else None, table)
    if scope is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Não autorizado",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return scope


def get_submit_indicacao_uc(
    session: AsyncSession = Depends(get_session),
) -> SubmitIndicacaoUseCase:
    return SubmitIndicacaoUseCase(
        allocator=AllocateConsultorUseCase(SqlConsultorRepository(session)),
        indicacao_repo=SqlIndicacaoRepository(session),
    )


def get_notify_assignment_uc() -> NotifyAssignmentUseCase:
    return NotifyAssignmentUseCase(notifier=_notifier, cc=settings.cc_address)


def get_manage_consultores_uc(
    session: AsyncSession = Depends(get_session),
) -> ManageConsultoresUseCase:
    return ManageConsultoresUseCase(
        consultor_repo=SqlConsultorRepository(session),
        indicacao_repo=SqlIndicacaoRepository(session),
    )


def get_history_uc(session: AsyncSession = Depends(get_session)) -> HistoryUseCase:
    return HistoryUseCase(indicacao_repo=SqlIndicacaoRepository(session))
