"""
Seller Projection Analyst API

FastAPI application. The LLM client is created once at startup and handed to
the consultation orchestrator; both live on app.state for the process lifetime.
"""

import os
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from agents.orchestrator import ConsultationOrchestrator
from agents.reasoning.flows import FlowBackend
from agents.reasoning.llm_client import ConsultationLLMClient, LLMConfig
from analysis_api import router as analysis_router, register_error_handlers

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000").split(",")
    if origin.strip()
]


def create_app(flow_backend: Optional[FlowBackend] = None) -> FastAPI:
    """
    Build the application.

    Args:
        flow_backend: Backend for the consultation flows. Defaults to a
            ConsultationLLMClient configured from the environment.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        llm_client = None
        backend = flow_backend
        if backend is None:
            llm_client = ConsultationLLMClient(LLMConfig())
            if not llm_client.configured:
                logger.warning(
                    "OPENAI_API_KEY not set. Projections work, but /analysis will fail "
                    "until the key is configured."
                )
            backend = llm_client

        app.state.flow_backend = backend
        app.state.orchestrator = ConsultationOrchestrator(backend)
        logger.info("Seller Projection Analyst started")

        yield

        if llm_client is not None:
            await llm_client.close()
        logger.info("Seller Projection Analyst stopped")

    app = FastAPI(title="Seller Projection Analyst API", version="0.1.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(analysis_router)
    register_error_handlers(app)

    @app.get("/")
    def read_root():
        return {
            "service": "Seller Projection Analyst API",
            "status": "running",
            "flows": ["market-entry-analysis", "strategic-recommendations"],
        }

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
