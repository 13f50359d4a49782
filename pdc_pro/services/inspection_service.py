"""
Inspection Service - Business Logic Layer

Coordinates the Inspection Repository and converts stored inspections
into the camelCase response schemas used by the API and the wizard.
"""
from typing import Optional, List

from pdc_pro.schemas.inspection import InspectionPayloadSchema, InspectionSchema
from pdc_pro.repositories.inspection_repository import InspectionRepository
from pdc_pro.models.inspection import Inspection


class InspectionService:
    """Service for inspection business logic (Async)"""

    def __init__(self):
        self.repository = InspectionRepository()

    async def list_inspections(self, owner_id: str) -> Optional[List[InspectionSchema]]:
        inspections = await self.repository.list(owner_id)
        if inspections is None:
            return None
        return [self.to_response(inspection) for inspection in inspections]

    async def get_inspection(self, owner_id: str, inspection_id: str) -> Optional[InspectionSchema]:
        inspection = await self.repository.get(owner_id, inspection_id)
        if not inspection:
            return None
        return self.to_response(inspection)

    async def get_inspection_model(self, owner_id: str, inspection_id: str) -> Optional[Inspection]:
        """Stored inspection, for the report renderer."""
        return await self.repository.get(owner_id, inspection_id)

    async def create_inspection(
        self,
        owner_id: str,
        payload: InspectionPayloadSchema
    ) -> Optional[InspectionSchema]:
        inspection = await self.repository.create(owner_id, payload)
        if not inspection:
            return None
        return self.to_response(inspection)

    async def update_inspection(
        self,
        owner_id: str,
        inspection_id: str,
        payload: InspectionPayloadSchema
    ) -> Optional[InspectionSchema]:
        inspection = await self.repository.update(owner_id, inspection_id, payload)
        if not inspection:
            return None
        return self.to_response(inspection)

    async def delete_inspection(self, owner_id: str, inspection_id: str) -> bool:
        return await self.repository.delete(owner_id, inspection_id)

    @staticmethod
    def to_response(inspection: Inspection) -> InspectionSchema:
        """Convert a stored inspection to its response schema."""
        return InspectionSchema(
            id=inspection.id,
            vehicleDetails=inspection.vehicle_details,
            exteriorCondition=inspection.exterior_condition,
            engineConditions=inspection.engine_conditions,
            additionalChecks=inspection.additional_checks,
            images=inspection.images,
            status=inspection.status,
            createdAt=inspection.created_at,
            updatedAt=inspection.updated_at
        )

    @staticmethod
    def to_model(schema: InspectionSchema) -> Inspection:
        """Inverse of to_response, used when rendering client-side records."""
        return Inspection(
            id=schema.id,
            vehicle_details=schema.vehicleDetails,
            exterior_condition=schema.exteriorCondition,
            engine_conditions=schema.engineConditions,
            additional_checks=schema.additionalChecks,
            images=schema.images,
            status=schema.status,
            created_at=schema.createdAt,
            updated_at=schema.updatedAt
        )


def get_inspection_service() -> InspectionService:
    """
    Factory function to create InspectionService instance.
    """
    return InspectionService()
