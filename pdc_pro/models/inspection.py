from pydantic import BaseModel, Field, BeforeValidator
from datetime import datetime
from typing import List, Optional, Annotated, Any
import enum
import uuid


def coerce_optional_int(v: Any) -> Optional[int]:
    # HTML number inputs submit "" until the user types something
    if v is None:
        return None
    if isinstance(v, str):
        v = v.strip()
        if not v:
            return None
    return v


OptionalInt = Annotated[Optional[int], BeforeValidator(coerce_optional_int)]


def utcnow() -> datetime:
    """Current UTC time at the millisecond precision MongoDB stores."""
    now = datetime.utcnow()
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class ConditionStatus(str, enum.Enum):
    """Outcome of a single vehicle check."""
    OK = "OK"
    ISSUE = "Issue"
    NOT_APPLICABLE = "N/A"


class InspectionStatus(str, enum.Enum):
    """Inspection lifecycle status."""
    DRAFT = "Draft"
    COMPLETED = "Completed"


class ConditionItem(BaseModel):
    """
    One checked aspect of the vehicle.
    The description is only meaningful when status is Issue.
    """
    status: ConditionStatus = ConditionStatus.OK
    description: str = ""

    @property
    def has_issue(self) -> bool:
        return self.status == ConditionStatus.ISSUE


class VehicleDetails(BaseModel):
    """Free-form vehicle identification captured in the first wizard step."""
    clientName: Optional[str] = ""
    vehicleMake: Optional[str] = ""
    vehicleModel: Optional[str] = ""
    yearOfManufacture: OptionalInt = None
    exteriorColor: Optional[str] = ""
    mileage: OptionalInt = None
    vehicleIdentificationNumber: Optional[str] = ""
    carNumberPlate: Optional[str] = ""


class ExteriorCondition(BaseModel):
    paintCondition: ConditionItem = Field(default_factory=ConditionItem)
    bodyworkCondition: ConditionItem = Field(default_factory=ConditionItem)
    tireCondition: ConditionItem = Field(default_factory=ConditionItem)
    lightsFunctionality: ConditionItem = Field(default_factory=ConditionItem)
    frontBumper: ConditionItem = Field(default_factory=ConditionItem)
    rearBumper: ConditionItem = Field(default_factory=ConditionItem)
    trunkHatch: ConditionItem = Field(default_factory=ConditionItem)


class EngineConditions(BaseModel):
    engineHealth: ConditionItem = Field(default_factory=ConditionItem)
    oilCondition: ConditionItem = Field(default_factory=ConditionItem)
    coolantLevel: ConditionItem = Field(default_factory=ConditionItem)
    batteryCondition: ConditionItem = Field(default_factory=ConditionItem)
    beltsAndHoses: ConditionItem = Field(default_factory=ConditionItem)


class AdditionalChecks(BaseModel):
    brakeSystem: ConditionItem = Field(default_factory=ConditionItem)
    suspension: ConditionItem = Field(default_factory=ConditionItem)
    steering: ConditionItem = Field(default_factory=ConditionItem)
    transmission: ConditionItem = Field(default_factory=ConditionItem)
    airConditioning: ConditionItem = Field(default_factory=ConditionItem)


class InspectionImages(BaseModel):
    """
    Photo references. URLs point to externally hosted images;
    an empty string means the photo has not been taken yet.
    """
    frontPhoto: str = ""
    rhsSidePhoto: str = ""
    lhsSidePhoto: str = ""
    roofSidePhoto: str = ""
    additionalPhotos: List[str] = Field(default_factory=list)


class Inspection(BaseModel):
    """
    Inspection model.
    Embedded in the owning User document; addressed by (owner id, id).
    """
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)

    vehicle_details: VehicleDetails = Field(default_factory=VehicleDetails)
    exterior_condition: ExteriorCondition = Field(default_factory=ExteriorCondition)
    engine_conditions: EngineConditions = Field(default_factory=EngineConditions)
    additional_checks: AdditionalChecks = Field(default_factory=AdditionalChecks)
    images: InspectionImages = Field(default_factory=InspectionImages)

    status: InspectionStatus = InspectionStatus.DRAFT

    # Timestamps
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def touch(self):
        """Refresh the modification timestamp."""
        self.updated_at = utcnow()
