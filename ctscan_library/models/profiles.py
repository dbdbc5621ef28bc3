"""Caller identity models: profile and role."""

from enum import Enum

from pydantic import Field

from .base import CamelCaseModel


class UserRole(str, Enum):
    """Role reported by the backend for the calling identity.

    Only drives what the client shows; the backend enforces access.
    """

    ADMIN = "admin"
    USER = "user"
    GUEST = "guest"


class UserProfile(CamelCaseModel):
    """Clinician profile, one per authenticated caller.

    Replaced as a whole on save. A missing profile means the caller still
    has to complete onboarding.
    """

    name: str = Field(description="Full name, e.g. 'Dr. John Smith'")
    specialization: str = Field(description="Clinical specialization, e.g. 'Oncology'")
    department: str = Field(description="Hospital department, e.g. 'Radiology'")
