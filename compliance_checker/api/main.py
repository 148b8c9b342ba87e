import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from compliance_checker.api.routes import router as api_router
from compliance_checker.config import Settings
from compliance_checker.db.session import init_db_connection
from compliance_checker.services.compliance_analyzer import ComplianceAnalyzer

logging.basicConfig(level=logging.INFO, format="%(asctime)s - [%(levelname)s] - %(message)s")
logger = logging.getLogger("API")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings

    try:
        init_db_connection(settings.database_url)
        logger.info("Connected to DB Successfully")
    except Exception as e:
        logger.critical(f"DB connection FAILED: {e}")

    try:
        app.state.analyzer = ComplianceAnalyzer.from_settings(settings)
        logger.info(f"Compliance Analyzer Initialized (model: {settings.llm_model})")
    except ValueError as e:
        # /api/analyze answers 503 until a key is configured
        logger.critical(f"failed to initialize analyzer: {e}")

    yield

    analyzer = getattr(app.state, "analyzer", None)
    if analyzer is not None:
        await analyzer.client.close()
    logger.info("Shutting down")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(
        title="Document Compliance Service",
        description="Employment contract compliance checks against country regulations",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.analyzer = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    #sample contracts download
    app.mount(
        "/samples",
        StaticFiles(directory=settings.sample_contracts_dir, check_dir=False),
        name="samples",
    )

    app.include_router(api_router, prefix="/api")

    @app.get("/health")
    def health():
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=3000)
