"""
Application exceptions shared by the API, the services and the wizard client.
"""
from typing import Optional


class PDCProError(Exception):
    """Base application exception."""


class InspectionNotFoundError(PDCProError):
    """Inspection is absent or belongs to another user."""

    def __init__(self, inspection_id: str):
        self.inspection_id = inspection_id
        super().__init__(f"Inspection {inspection_id} not found")


class ImageUploadError(PDCProError):
    """Image host rejected the upload or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class InspectionApiError(PDCProError):
    """Wizard client call to the inspection API failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)
