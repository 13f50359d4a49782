from beanie import Document, Indexed
from pydantic import Field
from datetime import datetime
from typing import List, Optional

from pdc_pro.models.inspection import Inspection, utcnow


class User(Document):
    """
    User (Inspector) model.
    Owns its inspections as an ordered list of embedded sub-documents.
    """
    name: str
    email: Indexed(str, unique=True)
    hashed_password: str
    inspections: List[Inspection] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)

    class Settings:
        name = "users"

    def find_inspection(self, inspection_id: str) -> Optional[Inspection]:
        """Return the embedded inspection with the given id."""
        for inspection in self.inspections:
            if inspection.id == inspection_id:
                return inspection
        return None

    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()
