"""
FastAPI app for the pet findings relay.

Scanners POST findings, notifiers poll GET /api/pets.
HTTP layer only; all state lives in backend.relay.finding_store.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from backend.api.middleware import BodySizeLimitMiddleware
from backend.api.router import error_response, router
from backend.relay.config import API_VERSION, RelayConfig, get_config
from backend.relay.finding_store import FindingStore

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "submit": "POST /api/submit",
    "getPets": "GET /api/pets",
    "stats": "GET /api/stats",
}


def create_app(
    config: Optional[RelayConfig] = None,
    store: Optional[FindingStore] = None,
) -> FastAPI:
    """Build the application with its own findings store (one per process in production)."""
    config = config or get_config()

    app = FastAPI(
        title="Pet Findings Relay",
        description="Shared in-memory relay between scanners and notifiers",
        version=API_VERSION,
    )
    app.state.config = config
    app.state.findings = store if store is not None else FindingStore(
        max_findings=config.max_findings,
        expiry_ms=config.expiry_ms,
    )

    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=config.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        logger.debug("Rejected body on %s: %s", request.url.path, exc.errors())
        return error_response(400, "Invalid JSON body")

    @app.get("/")
    def root():
        """Health check"""
        return {
            "success": True,
            "message": "Brainrot Scanner Backend is running!",
            "version": API_VERSION,
            "endpoints": ENDPOINTS,
        }

    app.include_router(router)
    return app


def log_banner(config: RelayConfig) -> None:
    base_url = f"http://localhost:{config.port}"
    logger.info("=" * 58)
    logger.info("PET FINDINGS RELAY v%s", API_VERSION)
    logger.info("=" * 58)
    logger.info("Server running on port %d", config.port)
    logger.info("API Base URL: %s", base_url)
    logger.info("Finding expiry: %d seconds", config.expiry_ms // 1000)
    logger.info("Max findings: %d", config.max_findings)
    logger.info("Auto-cleanup: on every GET request")
    logger.info("Endpoints:")
    logger.info("   POST %s/api/submit   - Submit findings", base_url)
    logger.info("   GET  %s/api/pets     - Get all findings", base_url)
    logger.info("   GET  %s/api/stats    - Get statistics", base_url)
    logger.info("   POST %s/api/clear    - Clear all findings", base_url)


app = create_app()


# Run with uvicorn: python -m backend.api.main
if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    config = get_config()
    log_banner(config)
    uvicorn.run(app, host=config.host, port=config.port)
