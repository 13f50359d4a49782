from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime

from pdc_pro.models.inspection import (
    InspectionStatus,
    VehicleDetails,
    ExteriorCondition,
    EngineConditions,
    AdditionalChecks,
    InspectionImages,
)


# Wire (camelCase) name -> Inspection model attribute
PAYLOAD_FIELD_MAP: Dict[str, str] = {
    "vehicleDetails": "vehicle_details",
    "exteriorCondition": "exterior_condition",
    "engineConditions": "engine_conditions",
    "additionalChecks": "additional_checks",
    "images": "images",
    "status": "status",
}


# ============================================================================
# Inspection Request Schemas (matching frontend inspectionData)
# ============================================================================

class InspectionPayloadSchema(BaseModel):
    """
    Partial inspection used by POST and PUT.

    Every top-level field is optional. A supplied group replaces the stored
    group wholesale: checks left out of a supplied group fall back to their
    defaults. Unknown keys (id, createdAt, ...) are ignored.
    """
    vehicleDetails: Optional[VehicleDetails] = None
    exteriorCondition: Optional[ExteriorCondition] = None
    engineConditions: Optional[EngineConditions] = None
    additionalChecks: Optional[AdditionalChecks] = None
    images: Optional[InspectionImages] = None
    status: Optional[InspectionStatus] = None

    def to_model_fields(self) -> Dict[str, Any]:
        """Supplied, non-null fields keyed by Inspection attribute name."""
        fields = {}
        for name in self.model_fields_set:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, BaseModel):
                value = value.model_copy(deep=True)
            fields[PAYLOAD_FIELD_MAP[name]] = value
        return fields

    class Config:
        json_schema_extra = {
            "example": {
                "vehicleDetails": {
                    "clientName": "J. Doe",
                    "vehicleMake": "Toyota",
                    "vehicleModel": "Corolla",
                    "yearOfManufacture": 2022,
                    "mileage": 12000
                },
                "exteriorCondition": {
                    "paintCondition": {"status": "Issue", "description": "scratch on door"}
                },
                "status": "Draft"
            }
        }


# ============================================================================
# Inspection Response Schemas
# ============================================================================

class InspectionSchema(BaseModel):
    """Full inspection record as returned by the API"""
    id: str = Field(..., description="Inspection ID")
    vehicleDetails: VehicleDetails
    exteriorCondition: ExteriorCondition
    engineConditions: EngineConditions
    additionalChecks: AdditionalChecks
    images: InspectionImages
    status: InspectionStatus
    createdAt: datetime
    updatedAt: datetime


class InspectionEnvelopeSchema(BaseModel):
    inspection: InspectionSchema


class InspectionListSchema(BaseModel):
    inspections: List[InspectionSchema]


class MessageSchema(BaseModel):
    message: str


class ImageUploadResponseSchema(BaseModel):
    imageUrl: str = Field(..., description="Public URL of the hosted image")
