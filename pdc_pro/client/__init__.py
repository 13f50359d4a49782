"""
Wizard client: step state, debounced autosave and the API client.
"""
from pdc_pro.client.api_client import InspectionApiClient
from pdc_pro.client.autosave import DebouncedSaver
from pdc_pro.client.wizard import InspectionWizard
from pdc_pro.client.wizard_state import InspectionData, WizardStep

__all__ = [
    "InspectionApiClient",
    "DebouncedSaver",
    "InspectionWizard",
    "InspectionData",
    "WizardStep",
]
