"""
Inspection API Client

httpx client for the inspection routes, used by the wizard.
Every call carries the caller's bearer token.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from pdc_pro.core.exceptions import InspectionApiError, InspectionNotFoundError
from pdc_pro.schemas.inspection import InspectionSchema

logger = logging.getLogger(__name__)


class InspectionApiClient:
    """Client for the /inspections API"""

    def __init__(
        self,
        base_url: str,
        token: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport

    @property
    def headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}

    async def _request(
        self,
        method: str,
        path: str,
        inspection_id: Optional[str] = None,
        **kwargs
    ) -> httpx.Response:
        url = f"{self.base_url}{path}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(method, url, headers=self.headers, **kwargs)
        except httpx.TimeoutException:
            raise InspectionApiError(f"Timeout calling {method} {path}")
        except httpx.TransportError as e:
            raise InspectionApiError(f"Cannot reach inspection API: {e}")

        if response.status_code == 404 and inspection_id is not None:
            raise InspectionNotFoundError(inspection_id)
        if response.status_code >= 400:
            raise InspectionApiError(
                f"{method} {path} failed with HTTP {response.status_code}",
                status_code=response.status_code
            )
        return response

    async def list_inspections(self) -> List[InspectionSchema]:
        response = await self._request("GET", "/inspections")
        return [InspectionSchema.model_validate(item) for item in response.json()["inspections"]]

    async def get_inspection(self, inspection_id: str) -> InspectionSchema:
        response = await self._request("GET", f"/inspections/{inspection_id}", inspection_id)
        return InspectionSchema.model_validate(response.json()["inspection"])

    async def create_inspection(self, payload: Dict[str, Any]) -> InspectionSchema:
        response = await self._request("POST", "/inspections", json=payload)
        return InspectionSchema.model_validate(response.json()["inspection"])

    async def update_inspection(self, inspection_id: str, payload: Dict[str, Any]) -> InspectionSchema:
        response = await self._request("PUT", f"/inspections/{inspection_id}", inspection_id, json=payload)
        return InspectionSchema.model_validate(response.json()["inspection"])

    async def delete_inspection(self, inspection_id: str) -> None:
        await self._request("DELETE", f"/inspections/{inspection_id}", inspection_id)

    async def upload_image(self, data: bytes, content_type: str, filename: str = "photo.jpg") -> str:
        """Upload a photo and return its hosted URL."""
        files = {"image": (filename, data, content_type)}
        response = await self._request("POST", "/inspections/temp/upload", files=files)
        return response.json()["imageUrl"]
