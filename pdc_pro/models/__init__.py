"""
Database models package.
Import all models here so Beanie can register them.
"""
from pdc_pro.models.user import User
from pdc_pro.models.inspection import (
    Inspection,
    InspectionStatus,
    ConditionItem,
    ConditionStatus,
    VehicleDetails,
    ExteriorCondition,
    EngineConditions,
    AdditionalChecks,
    InspectionImages,
)

__all__ = [
    "User",
    "Inspection",
    "InspectionStatus",
    "ConditionItem",
    "ConditionStatus",
    "VehicleDetails",
    "ExteriorCondition",
    "EngineConditions",
    "AdditionalChecks",
    "InspectionImages",
]
