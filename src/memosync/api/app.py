"""FastAPI application exposing sync triggers over local HTTP."""

import secrets
import threading
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Security
from fastapi.middleware.cors import CORSMiddleware
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .. import __version__


def create_app(runtime: Any, token: str | None = None, enable_cors: bool = False) -> FastAPI:
    """
    Create FastAPI application with runtime injected.

    Args:
        runtime: Runtime instance with service and state store
        token: Bearer token for authentication (None to disable auth)
        enable_cors: Enable CORS middleware

    Returns:
        FastAPI application instance
    """
    app = FastAPI(
        title="memosync API",
        description="Local JSON API for triggering memo sync",
        version=__version__,
        docs_url="/docs" if token is None else None,
        redoc_url="/redoc" if token is None else None,
    )

    if enable_cors:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    if token:
        security_scheme = HTTPBearer(auto_error=False)

        async def verify_token(
            credentials: HTTPAuthorizationCredentials | None = Security(security_scheme),  # noqa: B008
        ) -> None:
            """Verify bearer token."""
            if credentials is None or credentials.credentials != token:
                raise HTTPException(status_code=401, detail="Invalid or missing token")
    else:

        async def verify_token() -> None:
            """No-op when auth is disabled."""
            return None

    # Sync and reset both rewrite the state file; one at a time
    run_lock = threading.Lock()

    @app.get("/health")
    async def health(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    @app.get("/status")
    def status(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Read-only sync summary."""
        return runtime.status().to_dict()

    @app.post("/sync")
    def sync(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Run one sync and return its summary."""
        if not run_lock.acquire(blocking=False):
            raise HTTPException(status_code=409, detail="A sync is already running")
        try:
            result = runtime.sync()
        finally:
            run_lock.release()
        return result.to_dict()

    @app.post("/reset")
    def reset(auth: None = Depends(verify_token)) -> dict[str, Any]:
        """Clear the dedup index and cursor. Memo files are kept."""
        if not run_lock.acquire(blocking=False):
            raise HTTPException(status_code=409, detail="A sync is already running")
        try:
            runtime.reset()
        finally:
            run_lock.release()
        return runtime.status().to_dict()

    return app


def generate_token() -> str:
    """Generate a random bearer token."""
    return secrets.token_urlsafe(32)
