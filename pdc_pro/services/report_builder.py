"""
Report Builder - data shaping for the inspection report.

Turns an Inspection into an ordered list of report sections that the PDF
renderer lays out. Nothing here touches ReportLab, so the content of a
report can be checked without rendering it.
"""
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Tuple

from pydantic import BaseModel

from pdc_pro.models.inspection import ConditionItem, ConditionStatus, Inspection

REPORT_TITLE = "PDC Pro Vehicle Inspection Report"

# (attribute, label) in display order
EXTERIOR_LABELS: List[Tuple[str, str]] = [
    ("paintCondition", "Paint Condition"),
    ("bodyworkCondition", "Bodywork Condition"),
    ("tireCondition", "Tire Condition"),
    ("lightsFunctionality", "Lights Functionality"),
    ("frontBumper", "Front Bumper"),
    ("rearBumper", "Rear Bumper"),
    ("trunkHatch", "Trunk/Hatch"),
]

ENGINE_LABELS: List[Tuple[str, str]] = [
    ("engineHealth", "Engine Health"),
    ("oilCondition", "Oil Condition"),
    ("coolantLevel", "Coolant Level"),
    ("batteryCondition", "Battery Condition"),
    ("beltsAndHoses", "Belts and Hoses"),
]

ADDITIONAL_LABELS: List[Tuple[str, str]] = [
    ("brakeSystem", "Brake System"),
    ("suspension", "Suspension"),
    ("steering", "Steering"),
    ("transmission", "Transmission"),
    ("airConditioning", "Air Conditioning"),
]

PHOTO_LABELS: List[Tuple[str, str]] = [
    ("frontPhoto", "Front Photo"),
    ("rhsSidePhoto", "RHS Side Photo"),
    ("lhsSidePhoto", "LHS Side Photo"),
    ("roofSidePhoto", "Roof Side Photo"),
]


@dataclass
class DetailRow:
    label: str
    value: str


@dataclass
class CheckRow:
    label: str
    status: ConditionStatus
    description: Optional[str] = None


@dataclass
class PhotoEntry:
    label: str
    url: str


@dataclass
class ReportSection:
    title: str
    details: List[DetailRow] = field(default_factory=list)
    checks: List[CheckRow] = field(default_factory=list)
    photos: List[PhotoEntry] = field(default_factory=list)


@dataclass
class InspectionReport:
    title: str
    generated_on: date
    sections: List[ReportSection]

    def section(self, title: str) -> Optional[ReportSection]:
        for section in self.sections:
            if section.title == title:
                return section
        return None

    @property
    def photo_urls(self) -> List[str]:
        return [photo.url for section in self.sections for photo in section.photos]


def _text(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _check_row(label: str, item: ConditionItem) -> CheckRow:
    # Description only shows for issues, whatever the stored value
    description = _text(item.description) if item.has_issue else ""
    return CheckRow(label=label, status=item.status, description=description or None)


def _check_rows(group: BaseModel, labels: List[Tuple[str, str]]) -> List[CheckRow]:
    return [_check_row(label, getattr(group, attr)) for attr, label in labels]


def _vehicle_section(inspection: Inspection) -> ReportSection:
    details = inspection.vehicle_details
    vehicle = " ".join(filter(None, [_text(details.vehicleMake), _text(details.vehicleModel)]))
    mileage = f"{details.mileage} km" if details.mileage is not None else ""

    return ReportSection(
        title="Vehicle Details",
        details=[
            DetailRow("Client Name", _text(details.clientName) or "Not specified"),
            DetailRow("Vehicle", vehicle),
            DetailRow("Year", _text(details.yearOfManufacture)),
            DetailRow("Color", _text(details.exteriorColor)),
            DetailRow("Mileage", mileage),
            DetailRow("VIN", _text(details.vehicleIdentificationNumber)),
            DetailRow("License Plate", _text(details.carNumberPlate)),
        ]
    )


def build_report(inspection: Inspection, generated_on: Optional[date] = None) -> InspectionReport:
    """
    Shape an inspection into report sections, in fixed order.

    Photo sections only appear when at least one photo is present.
    """
    sections = [
        _vehicle_section(inspection),
        ReportSection("Exterior Condition", checks=_check_rows(inspection.exterior_condition, EXTERIOR_LABELS)),
        ReportSection("Engine Conditions", checks=_check_rows(inspection.engine_conditions, ENGINE_LABELS)),
        ReportSection("Additional Checks", checks=_check_rows(inspection.additional_checks, ADDITIONAL_LABELS)),
    ]

    images = inspection.images
    photos = [
        PhotoEntry(label, _text(getattr(images, attr)))
        for attr, label in PHOTO_LABELS
        if _text(getattr(images, attr))
    ]
    if photos:
        sections.append(ReportSection("Vehicle Photos", photos=photos))

    extra = [
        PhotoEntry(f"Additional Photo {index}", url.strip())
        for index, url in enumerate((u for u in images.additionalPhotos if _text(u)), start=1)
    ]
    if extra:
        sections.append(ReportSection("Additional Photos", photos=extra))

    return InspectionReport(
        title=REPORT_TITLE,
        generated_on=generated_on or datetime.utcnow().date(),
        sections=sections
    )


def report_filename(inspection: Inspection, on: Optional[date] = None) -> str:
    """PDC_Report_<client>_<make>_<model>_<YYYY-MM-DD>.pdf, whitespace collapsed to _"""
    details = inspection.vehicle_details
    client = _text(details.clientName) or "Client"
    make = _text(details.vehicleMake) or "Vehicle"
    model = _text(details.vehicleModel)
    day = (on or datetime.utcnow().date()).isoformat()

    filename = f"PDC_Report_{client}_{make}_{model}_{day}.pdf"
    filename = re.sub(r"\s+", "_", filename)
    return re.sub(r"[\\/:*?\"<>|]", "", filename)
