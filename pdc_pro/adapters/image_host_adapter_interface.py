"""
Image Host Adapter Interface

Abstract interface for the external image hosting service.
This allows easy switching between mock and real implementations (Cloudinary).
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class TransformationProfile:
    """
    Resize/quality profile applied by the host before storing an image.
    Images are bounded to max_width x max_height, keeping the aspect ratio
    and never upscaling.
    """
    max_width: int = 800
    max_height: int = 600
    quality: str = "auto:good"

    def to_cloudinary(self) -> str:
        return f"c_limit,h_{self.max_height},w_{self.max_width}/q_{self.quality}"


class ImageHostAdapterInterface(ABC):
    """Abstract interface for image host adapters"""

    @abstractmethod
    async def upload(
        self,
        image_bytes: bytes,
        content_type: str,
        filename: str = "image"
    ) -> str:
        """
        Store an image with the host.

        Args:
            image_bytes: Raw image payload
            content_type: MIME type of the payload
            filename: Original file name, informational only

        Returns:
            Durable public URL of the stored image

        Raises:
            ImageUploadError: If the host rejects the upload or is unreachable
        """
        pass
