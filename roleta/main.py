"""Roleta de Indicações — FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from roleta.adapters.persistence.database import engine
from roleta.config import settings
from roleta.domain.errors import (
    AuthorizationFault,
    InfrastructureFault,
    InvalidInput,
    NotFound,
)
from roleta.infrastructure.api.routes_consultores import router as consultores_router
from roleta.infrastructure.api.routes_health import router as health_router
from roleta.infrastructure.api.routes_historico import router as historico_router
from roleta.infrastructure.api.routes_indicacoes import router as indicacoes_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    try:
        async with engine.begin():
            pass  # Connection pool warmed up
        logger.info("Database connection established")
    except Exception as e:
        logger.warning("Database not available on startup: %s", e)
    yield
    await engine.dispose()


async def _authorization_fault(request: Request, exc: AuthorizationFault) -> JSONResponse:
    logger.warning("Denied %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_403_FORBIDDEN,
        content={"success": False, "message": "Acesso negado"},
    )


async def _not_found(request: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"success": False, "message": str(exc)},
    )


async def _invalid_input(request: Request, exc: InvalidInput) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"success": False, "message": str(exc)},
    )


async def _infrastructure_fault(request: Request, exc: InfrastructureFault) -> JSONResponse:
    logger.error("Infrastructure fault on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "message": "Erro interno no servidor."},
    )


def create_app() -> FastAPI:
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
    )

    app = FastAPI(
        title="Roleta de Indicações CRI/ADIM",
        description="Round-robin lead assignment by natureza and cidade",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AuthorizationFault, _authorization_fault)
    app.add_exception_handler(NotFound, _not_found)
    app.add_exception_handler(InvalidInput, _invalid_input)
    app.add_exception_handler(InfrastructureFault, _infrastructure_fault)

    # Register routers
    app.include_router(health_router, prefix="/api")
    app.include_router(indicacoes_router, prefix="/api")
    app.include_router(consultores_router, prefix="/api")
    app.include_router(historico_router, prefix="/api")

    return app


app = create_app()
