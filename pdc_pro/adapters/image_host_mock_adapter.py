"""
Mock Image Host Adapter

Development stand-in for Cloudinary. Nothing is stored; the returned URL is
derived from the content hash so the same bytes always map to the same URL.
"""
import hashlib
import logging

from pdc_pro.adapters.image_host_adapter_interface import (
    ImageHostAdapterInterface,
    TransformationProfile,
)
from pdc_pro.core.exceptions import ImageUploadError

logger = logging.getLogger(__name__)


class ImageHostMockAdapter(ImageHostAdapterInterface):
    """Mock adapter for image uploads"""

    BASE_URL = "https://images.example.invalid"

    def __init__(self, folder: str = "pdi-pro-inspections", profile: TransformationProfile = TransformationProfile()):
        self.folder = folder
        self.profile = profile

    async def upload(self, image_bytes: bytes, content_type: str, filename: str = "image") -> str:
        if not image_bytes:
            raise ImageUploadError("Empty image payload")

        digest = hashlib.sha1(image_bytes).hexdigest()
        extension = content_type.split("/")[-1] if "/" in content_type else "jpg"
        url = f"{self.BASE_URL}/{self.profile.to_cloudinary()}/{self.folder}/{digest}.{extension}"

        logger.info(f"MOCK UPLOAD: {filename} ({len(image_bytes)} bytes) -> {url}")
        return url
