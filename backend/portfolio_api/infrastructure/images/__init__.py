from __future__ import annotations

from .cloudinary import CloudinaryImageHost, ImageHost, UploadedImage

__all__ = ["CloudinaryImageHost", "ImageHost", "UploadedImage"]
