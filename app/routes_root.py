# routes_root.py
"""
Root / basic endpoints (service info, health).
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/")
def read_root(request: Request):
    """
    Landing endpoint: name, version and where each resource lives.
    """
    return {
        "message": request.app.title,
        "version": request.app.version,
        "documentation": {"interactive": "/docs", "openapi_spec": "/openapi.json"},
        "endpoints": {
            "auth": "/auth",
            "users": "/users",
            "accounts": "/accounts",
            "categories": "/categories",
            "transactions": "/transactions",
            "reports": "/reports",
        },
    }


@router.get("/health")
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
