"""
Cloudinary Image Host Adapter

Signed uploads to the Cloudinary REST API.
The transformation profile is sent as an incoming transformation, so the
stored asset itself is already resized and recompressed.

API Documentation: https://cloudinary.com/documentation/image_upload_api_reference
"""
import logging
import time
from typing import Dict, Optional

import httpx
from cloudinary.utils import api_sign_request

from pdc_pro.adapters.image_host_adapter_interface import (
    ImageHostAdapterInterface,
    TransformationProfile,
)
from pdc_pro.core.exceptions import ImageUploadError

logger = logging.getLogger(__name__)


def sign_params(params: Dict[str, str], api_secret: str) -> str:
    """
    Cloudinary request signature: SHA-1 of the sorted ``key=value`` pairs
    joined with ``&`` followed by the API secret.
    """
    return api_sign_request(params, api_secret)


class CloudinaryImageAdapter(ImageHostAdapterInterface):
    """
    Image host adapter for Cloudinary.
    Retries transport errors and 5xx responses; 4xx responses fail at once.
    """

    UPLOAD_URL = "https://api.cloudinary.com/v1_1/{cloud_name}/image/upload"
    DELIVERY_HOST = "res.cloudinary.com"

    def __init__(
        self,
        cloud_name: str,
        api_key: str,
        api_secret: str,
        folder: str = "pdi-pro-inspections",
        profile: TransformationProfile = TransformationProfile(),
        retries: int = 1,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        if not (cloud_name and api_key and api_secret):
            raise ValueError("Cloudinary cloud name, API key and API secret are required")

        self.cloud_name = cloud_name
        self.api_key = api_key
        self.api_secret = api_secret
        self.folder = folder
        self.profile = profile
        self.retries = max(0, retries)
        self.timeout = timeout
        self._transport = transport

    @property
    def upload_url(self) -> str:
        return self.UPLOAD_URL.format(cloud_name=self.cloud_name)

    def build_form(self, timestamp: Optional[int] = None) -> Dict[str, str]:
        """Signed form fields for one upload request."""
        params = {
            "folder": self.folder,
            "timestamp": str(timestamp if timestamp is not None else int(time.time())),
            "transformation": self.profile.to_cloudinary(),
        }
        form = dict(params)
        form["signature"] = sign_params(params, self.api_secret)
        form["api_key"] = self.api_key
        return form

    async def upload(self, image_bytes: bytes, content_type: str, filename: str = "image") -> str:
        if not image_bytes:
            raise ImageUploadError("Empty image payload")

        last_error: Optional[ImageUploadError] = None

        for attempt in range(self.retries + 1):
            try:
                return await self._upload_once(image_bytes, content_type, filename)
            except ImageUploadError as e:
                last_error = e
                retryable = e.status_code is None or e.status_code >= 500
                if not retryable or attempt == self.retries:
                    break
                logger.warning(f"CLOUDINARY: attempt {attempt + 1} failed ({e}), retrying")

        logger.error(f"CLOUDINARY: upload of {filename} failed - {last_error}")
        raise last_error

    async def _upload_once(self, image_bytes: bytes, content_type: str, filename: str) -> str:
        files = {"file": (filename, image_bytes, content_type)}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.upload_url, data=self.build_form(), files=files)
        except httpx.TimeoutException:
            raise ImageUploadError("Image host timeout")
        except httpx.TransportError as e:
            raise ImageUploadError(f"Image host not reachable: {e}")

        if response.status_code >= 400:
            try:
                message = response.json().get("error", {}).get("message", response.text)
            except ValueError:
                message = response.text
            raise ImageUploadError(f"Image host rejected upload: {message}", status_code=response.status_code)

        secure_url = response.json().get("secure_url")
        if not secure_url:
            raise ImageUploadError("Image host response has no secure_url", status_code=response.status_code)

        logger.info(f"CLOUDINARY: stored {filename} at {secure_url}")
        return secure_url
