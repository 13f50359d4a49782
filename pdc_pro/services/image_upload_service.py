"""
Image Upload Service - Factory Pattern

Selects the image host adapter based on configuration.
Allows easy switching between the mock and Cloudinary implementations.
"""
from typing import Dict

import httpx

from pdc_pro.adapters.image_host_adapter_interface import (
    ImageHostAdapterInterface,
    TransformationProfile,
)
from pdc_pro.adapters.image_host_mock_adapter import ImageHostMockAdapter
from pdc_pro.core.config import settings


def get_transformation_profile() -> TransformationProfile:
    return TransformationProfile(
        max_width=settings.IMAGE_MAX_WIDTH,
        max_height=settings.IMAGE_MAX_HEIGHT,
        quality=settings.IMAGE_QUALITY,
    )


def get_image_host_adapter() -> ImageHostAdapterInterface:
    """
    Factory function to get the appropriate image host adapter.

    Returns:
        Image host adapter instance based on configuration
    """
    adapter_type = settings.IMAGE_HOST_ADAPTER_TYPE
    profile = get_transformation_profile()

    if adapter_type == "mock":
        return ImageHostMockAdapter(folder=settings.IMAGE_UPLOAD_FOLDER, profile=profile)
    elif adapter_type == "cloudinary":
        from pdc_pro.adapters.cloudinary_adapter import CloudinaryImageAdapter
        return CloudinaryImageAdapter(
            cloud_name=settings.CLOUDINARY_CLOUD_NAME,
            api_key=settings.CLOUDINARY_API_KEY,
            api_secret=settings.CLOUDINARY_API_SECRET,
            folder=settings.IMAGE_UPLOAD_FOLDER,
            profile=profile,
            retries=settings.IMAGE_UPLOAD_RETRIES,
        )
    else:
        raise ValueError(f"Unknown image host adapter type: {adapter_type}")


def get_trusted_image_origins() -> Dict[str, str]:
    """
    Hosts the server may download stored photos from, each mapped to the
    path prefix a photo URL on that host must start with.
    """
    origins = {host.lower(): "/" for host in settings.REPORT_IMAGE_HOSTS}

    if settings.IMAGE_HOST_ADAPTER_TYPE == "cloudinary":
        from pdc_pro.adapters.cloudinary_adapter import CloudinaryImageAdapter
        origins[CloudinaryImageAdapter.DELIVERY_HOST] = f"/{settings.CLOUDINARY_CLOUD_NAME}/"
    else:
        origins[httpx.URL(ImageHostMockAdapter.BASE_URL).host] = "/"

    return origins


# Singleton instance
image_upload_service = get_image_host_adapter()
