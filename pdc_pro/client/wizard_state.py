"""
Wizard state.

The in-progress inspection is an explicitly passed value. Every update
function returns a new InspectionData and leaves its argument untouched;
group updates shallow-merge into one sub-object and keep its siblings.
"""
import enum
from typing import Any, Dict

from pydantic import BaseModel, Field

from pdc_pro.models.inspection import (
    AdditionalChecks,
    ConditionItem,
    EngineConditions,
    ExteriorCondition,
    InspectionImages,
    InspectionStatus,
    VehicleDetails,
)
from pdc_pro.schemas.inspection import InspectionSchema


class InspectionData(BaseModel):
    """Form data shaped like an inspection record, without server fields."""
    vehicleDetails: VehicleDetails = Field(default_factory=VehicleDetails)
    exteriorCondition: ExteriorCondition = Field(default_factory=ExteriorCondition)
    engineConditions: EngineConditions = Field(default_factory=EngineConditions)
    additionalChecks: AdditionalChecks = Field(default_factory=AdditionalChecks)
    images: InspectionImages = Field(default_factory=InspectionImages)
    status: InspectionStatus = InspectionStatus.DRAFT

    @classmethod
    def from_record(cls, record: InspectionSchema) -> "InspectionData":
        return cls.model_validate(record.model_dump(include=set(cls.model_fields)))

    def to_payload(self) -> Dict[str, Any]:
        """Full-record JSON body for POST/PUT."""
        return self.model_dump(mode="json")


class WizardStep(enum.IntEnum):
    VEHICLE_DETAILS = 1
    EXTERIOR = 2
    ENGINE = 3
    ADDITIONAL_CHECKS = 4
    PHOTOS = 5
    REVIEW = 6
    SUMMARY = 7

    @property
    def title(self) -> str:
        return STEP_TITLES[self]


STEP_TITLES = {
    WizardStep.VEHICLE_DETAILS: "Vehicle Details",
    WizardStep.EXTERIOR: "Exterior",
    WizardStep.ENGINE: "Engine",
    WizardStep.ADDITIONAL_CHECKS: "Additional Checks",
    WizardStep.PHOTOS: "Photos",
    WizardStep.REVIEW: "Review",
    WizardStep.SUMMARY: "Summary",
}


def next_step(step: WizardStep) -> WizardStep:
    """Advance one step; the last step stays put. No validation gating."""
    return WizardStep(min(step + 1, WizardStep.SUMMARY))


def previous_step(step: WizardStep) -> WizardStep:
    return WizardStep(max(step - 1, WizardStep.VEHICLE_DETAILS))


def _merge(group: BaseModel, fields: Dict[str, Any]) -> BaseModel:
    unknown = set(fields) - set(type(group).model_fields)
    if unknown:
        raise ValueError(f"Unknown {type(group).__name__} fields: {', '.join(sorted(unknown))}")
    merged = group.model_dump()
    merged.update(
        {key: value.model_dump() if isinstance(value, BaseModel) else value for key, value in fields.items()}
    )
    return type(group).model_validate(merged)


def update_vehicle_details(state: InspectionData, **fields) -> InspectionData:
    return state.model_copy(update={"vehicleDetails": _merge(state.vehicleDetails, fields)})


def update_exterior_condition(state: InspectionData, **checks) -> InspectionData:
    """checks: name -> ConditionItem or {"status": ..., "description": ...}"""
    return state.model_copy(update={"exteriorCondition": _merge(state.exteriorCondition, checks)})


def update_engine_conditions(state: InspectionData, **checks) -> InspectionData:
    return state.model_copy(update={"engineConditions": _merge(state.engineConditions, checks)})


def update_additional_checks(state: InspectionData, **checks) -> InspectionData:
    return state.model_copy(update={"additionalChecks": _merge(state.additionalChecks, checks)})


def update_images(state: InspectionData, **images) -> InspectionData:
    return state.model_copy(update={"images": _merge(state.images, images)})


def add_additional_photo(state: InspectionData, url: str) -> InspectionData:
    photos = list(state.images.additionalPhotos) + [url]
    return update_images(state, additionalPhotos=photos)


def remove_additional_photo(state: InspectionData, url: str) -> InspectionData:
    photos = [photo for photo in state.images.additionalPhotos if photo != url]
    return update_images(state, additionalPhotos=photos)


def mark_completed(state: InspectionData) -> InspectionData:
    return state.model_copy(update={"status": InspectionStatus.COMPLETED})


def reset() -> InspectionData:
    """Fresh empty Draft."""
    return InspectionData()


def issue(description: str) -> ConditionItem:
    """Shorthand for a failed check."""
    return ConditionItem(status="Issue", description=description)
