from __future__ import annotations

from ..settings import Settings

# Local frontends (Vite / Next.js dev servers).
DEV_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
)


def _split(v: str | None) -> list[str]:
    return [s.strip().rstrip("/") for s in str(v or "").split(",") if s.strip()]


def build_allowed_origins(settings: Settings) -> list[str]:
    """
    Explicit CORS allow-list from FRONTEND_URL and CORS_ORIGINS; local dev
    origins are added outside production. A `*` entry yields ["*"].
    """
    configured = _split(settings.frontend_url) + _split(settings.cors_origins)
    if "*" in configured:
        return ["*"]

    allowed: set[str] = set(configured)
    if not settings.is_production:
        allowed.update(DEV_ORIGINS)
    return sorted(allowed)


def allow_credentials(origins: list[str]) -> bool:
    # Browsers reject credentialed responses with a wildcard origin.
    return origins != ["*"]
