"""
Inspection Wizard

Drives one inspection through the seven wizard steps against the API.
The record is created (or loaded) before any edit is accepted, every edit
is autosaved after a quiet period, and completion writes the full record
with status Completed.
"""
import logging
from typing import Optional, Tuple

import httpx

from pdc_pro.client import wizard_state
from pdc_pro.client.api_client import InspectionApiClient
from pdc_pro.client.autosave import DebouncedSaver
from pdc_pro.client.wizard_state import InspectionData, WizardStep
from pdc_pro.core.exceptions import PDCProError
from pdc_pro.schemas.inspection import InspectionSchema
from pdc_pro.services.inspection_service import InspectionService
from pdc_pro.services.report_service import generate_inspection_report

logger = logging.getLogger(__name__)

PHOTO_FIELDS = ("frontPhoto", "rhsSidePhoto", "lhsSidePhoto", "roofSidePhoto", "additionalPhotos")


class WizardNotStartedError(RuntimeError):
    """Raised when the wizard is edited before its record exists."""


class InspectionWizard:
    """Client-side controller for a single inspection."""

    def __init__(self, api: InspectionApiClient, autosave_delay: float = 1.0):
        self.api = api
        self.state: InspectionData = wizard_state.reset()
        self.step: WizardStep = WizardStep.VEHICLE_DETAILS
        self.record: Optional[InspectionSchema] = None
        self.saver: DebouncedSaver[InspectionData] = DebouncedSaver(self._save_draft, delay=autosave_delay)

    @property
    def inspection_id(self) -> Optional[str]:
        return self.record.id if self.record else None

    @property
    def started(self) -> bool:
        return self.record is not None

    async def start(self, inspection_id: Optional[str] = None) -> InspectionSchema:
        """
        Create a fresh Draft, or load an existing inspection to continue it.
        Raises the API client's errors when the record cannot be obtained.
        """
        if inspection_id:
            record = await self.api.get_inspection(inspection_id)
            self.state = InspectionData.from_record(record)
        else:
            self.state = wizard_state.reset()
            record = await self.api.create_inspection(self.state.to_payload())
            logger.info(f"Started inspection {record.id}")

        self.record = record
        self.step = WizardStep.VEHICLE_DETAILS
        return record

    def _apply(self, state: InspectionData) -> InspectionData:
        if not self.started:
            raise WizardNotStartedError("Start the wizard before editing the inspection")
        self.state = state
        self.saver.schedule(state)
        return state

    async def _save_draft(self, state: InspectionData) -> None:
        self.record = await self.api.update_inspection(self.record.id, state.to_payload())
        logger.info(f"Autosaved inspection {self.record.id}")

    # Step edits

    def update_vehicle_details(self, **fields) -> InspectionData:
        return self._apply(wizard_state.update_vehicle_details(self.state, **fields))

    def update_exterior_condition(self, **checks) -> InspectionData:
        return self._apply(wizard_state.update_exterior_condition(self.state, **checks))

    def update_engine_conditions(self, **checks) -> InspectionData:
        return self._apply(wizard_state.update_engine_conditions(self.state, **checks))

    def update_additional_checks(self, **checks) -> InspectionData:
        return self._apply(wizard_state.update_additional_checks(self.state, **checks))

    def update_images(self, **images) -> InspectionData:
        return self._apply(wizard_state.update_images(self.state, **images))

    async def upload_photo(
        self,
        field: str,
        data: bytes,
        content_type: str,
        filename: str = "photo.jpg"
    ) -> str:
        """Upload a photo and store its URL in the given image slot."""
        if field not in PHOTO_FIELDS:
            raise ValueError(f"Unknown photo field: {field}")
        if not self.started:
            raise WizardNotStartedError("Start the wizard before uploading photos")

        url = await self.api.upload_image(data, content_type, filename)
        if field == "additionalPhotos":
            self._apply(wizard_state.add_additional_photo(self.state, url))
        else:
            self._apply(wizard_state.update_images(self.state, **{field: url}))
        return url

    # Navigation

    def next(self) -> WizardStep:
        self.step = wizard_state.next_step(self.step)
        return self.step

    def back(self) -> WizardStep:
        self.step = wizard_state.previous_step(self.step)
        return self.step

    # Completion

    async def complete(self) -> InspectionSchema:
        """
        Write the full record with status Completed.

        The pending autosave is dropped and in-flight autosaves are awaited
        first. Edits made while the write is in flight apply on top of the
        completed state and are autosaved after it. If the write fails the
        previous status is restored, the edits are queued as an autosave and
        the API error propagates to the caller.
        """
        if not self.started:
            raise WizardNotStartedError("Start the wizard before completing the inspection")

        self.saver.cancel()
        await self.saver.wait_idle()

        previous_status = self.state.status
        self.state = wizard_state.mark_completed(self.state)
        inspection_id = self.record.id
        payload = self.state.to_payload()

        try:
            record = await self.saver.run_exclusive(
                lambda: self.api.update_inspection(inspection_id, payload)
            )
        except PDCProError:
            self.state = self.state.model_copy(update={"status": previous_status})
            self.saver.schedule(self.state)
            raise

        self.record = record
        self.step = WizardStep.SUMMARY
        logger.info(f"Completed inspection {record.id}")
        return record

    async def render_report(
        self,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ) -> Tuple[str, bytes]:
        """Render the current record as a PDF. Returns (filename, bytes)."""
        if not self.started:
            raise WizardNotStartedError("Start the wizard before rendering a report")
        return await generate_inspection_report(InspectionService.to_model(self.record), transport=transport)

    def close(self) -> None:
        self.saver.cancel()
