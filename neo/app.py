import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from neo.routes import documents, session, suggestions, upload, wizard
from neo.settings import load_settings


def create_app() -> FastAPI:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(title="NEO Strategy Planning API", version="0.1.0")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(documents.router, prefix="/api")
    app.include_router(suggestions.router, prefix="/api")
    app.include_router(wizard.router, prefix="/api")
    app.include_router(upload.router, prefix="/api")
    app.include_router(session.router, prefix="/api")

    @app.get("/", include_in_schema=False)
    async def root() -> JSONResponse:
        """Provide a lightweight landing page for container checks."""
        return JSONResponse(
            {
                "message": "NEO Strategy Planning API",
                "docs": "/docs",
                "health": "/api/documents",
            }
        )

    return app


app = create_app()
