from __future__ import annotations

import hashlib
import time
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from ...errors import ConfigurationError, ImageHostError
from ...observability.logging import get_logger
from ...settings import Settings

CLOUDINARY_API_BASE = "https://api.cloudinary.com/v1_1"

# Fit within 1200x800, automatic quality and format.
UPLOAD_TRANSFORMATION = "c_limit,w_1200,h_800/q_auto/f_auto"

log = get_logger("cloudinary")


@dataclass(frozen=True)
class UploadedImage:
    url: str
    public_id: str
    width: int | None
    height: int | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "public_id": self.public_id,
            "width": self.width,
            "height": self.height,
        }


class ImageHost(Protocol):
    async def upload(self, data: bytes, *, filename: str, content_type: str) -> UploadedImage: ...

    async def destroy(self, public_id: str) -> str: ...

    async def aclose(self) -> None: ...


def sign_params(params: dict[str, Any], api_secret: str) -> str:
    """
    Cloudinary request signature: SHA-1 over the sorted `key=value` pairs
    joined by `&`, with the API secret appended.
    """
    to_sign = "&".join(
        f"{k}={params[k]}" for k in sorted(params) if params[k] is not None and params[k] != ""
    )
    return hashlib.sha1((to_sign + api_secret).encode("utf-8")).hexdigest()


class CloudinaryImageHost:
    def __init__(
        self,
        *,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str | None = None,
        timeout_s: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._cloud_name = cloud_name
        self._api_key = api_key
        self._api_secret = api_secret
        self._folder = folder
        self._client = httpx.AsyncClient(timeout=timeout_s, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "CloudinaryImageHost":
        for name in ("cloudinary_cloud_name", "cloudinary_api_key", "cloudinary_api_secret"):
            if not getattr(settings, name, None):
                raise ConfigurationError(f"{name.upper()} is not configured", setting=name.upper())
        return cls(
            cloud_name=str(settings.cloudinary_cloud_name),
            api_key=str(settings.cloudinary_api_key),
            api_secret=str(settings.cloudinary_api_secret),
            folder=settings.cloudinary_folder,
            **kwargs,
        )

    def _url(self, action: str) -> str:
        return f"{CLOUDINARY_API_BASE}/{self._cloud_name}/image/{action}"

    def _signed(self, params: dict[str, Any]) -> dict[str, Any]:
        body = {k: v for k, v in params.items() if v is not None}
        body["timestamp"] = int(time.time())
        body["signature"] = sign_params(body, self._api_secret)
        body["api_key"] = self._api_key
        return body

    async def _post(self, action: str, *, data: dict[str, Any], files: Any = None) -> dict[str, Any]:
        try:
            resp = await self._client.post(self._url(action), data=data, files=files)
        except httpx.HTTPError as e:
            raise ImageHostError(
                f"Image host request failed: {type(e).__name__}", operation=action, cause=e
            ) from e

        try:
            payload = resp.json() if resp.content else {}
        except ValueError:
            payload = {}

        if resp.status_code >= 400:
            err = payload.get("error") if isinstance(payload, dict) else None
            msg = err.get("message") if isinstance(err, dict) else None
            raise ImageHostError(
                str(msg or f"Image host returned HTTP {resp.status_code}"),
                operation=action,
                status_code=resp.status_code,
            )
        if not isinstance(payload, dict):
            raise ImageHostError("Image host returned an invalid response", operation=action)
        return payload

    async def upload(self, data: bytes, *, filename: str, content_type: str) -> UploadedImage:
        params = self._signed({"folder": self._folder, "transformation": UPLOAD_TRANSFORMATION})
        payload = await self._post(
            "upload",
            data=params,
            files={"file": (filename or "upload", data, content_type)},
        )
        url = payload.get("secure_url") or payload.get("url")
        public_id = payload.get("public_id")
        if not url or not public_id:
            raise ImageHostError("Image host response is missing url/public_id", operation="upload")
        log.info("image_uploaded", public_id=public_id, bytes=len(data))
        return UploadedImage(
            url=str(url),
            public_id=str(public_id),
            width=payload.get("width"),
            height=payload.get("height"),
        )

    async def destroy(self, public_id: str) -> str:
        """Delete by public id; returns the host's result (`ok`, `not found`, ...)."""
        payload = await self._post("destroy", data=self._signed({"public_id": public_id}))
        return str(payload.get("result") or "")

    async def aclose(self) -> None:
        await self._client.aclose()
