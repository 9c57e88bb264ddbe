import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import homeboard.models  # noqa: F401  registers tables on Base.metadata
from homeboard.shared.infrastructure.database import engine, Base
from homeboard.shared.infrastructure.settings import get_settings
from homeboard.api.v1.routes import connections, dashboards, health, layout

settings = get_settings()
logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

# Create tables
Base.metadata.create_all(bind=engine)


def _resolve_cors_origins() -> list[str]:
    if settings.cors_origins:
        return settings.cors_origins
    if settings.environment in {"development", "test"}:
        return ["http://localhost:5173", "http://127.0.0.1:5173"]
    return []


def create_app() -> FastAPI:
    docs_enabled = settings.environment != "production"
    app = FastAPI(
        title="Homeboard API",
        description="Multi-tenant home dashboard configuration API",
        version="0.1.0",
        docs_url="/docs" if docs_enabled else None,
        redoc_url="/redoc" if docs_enabled else None,
        openapi_url="/openapi.json" if docs_enabled else None,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=_resolve_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(health.router, prefix="/api/v1")
    app.include_router(connections.router, prefix="/api/v1")
    app.include_router(dashboards.router, prefix="/api/v1")
    app.include_router(layout.router, prefix="/api/v1")
    return app


app = create_app()


@app.get("/")
async def root():
    return {"message": "Homeboard API"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
