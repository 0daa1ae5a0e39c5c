from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/", tags=["health"])
def health(request: Request):
    settings = request.app.state.settings
    prefix = settings.api_prefix.rstrip("/")
    return {
        "message": "Portfolio CMS API",
        "version": "1.0.0",
        "status": "running",
        "port": settings.port,
        "environment": settings.normalized_environment,
        "endpoints": [
            f"POST {prefix}/auth/register",
            f"POST {prefix}/auth/login",
            f"GET {prefix}/auth/me",
            f"GET {prefix}/users",
            f"GET {prefix}/blog",
            f"GET {prefix}/projects",
            f"GET {prefix}/services",
            f"GET {prefix}/skills",
            f"GET {prefix}/pricing",
            f"GET {prefix}/content/{{page}}",
            f"POST {prefix}/upload/image",
            f"POST {prefix}/upload/images",
        ],
    }
