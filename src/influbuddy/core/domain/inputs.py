"""Request payloads for mutations.

The backend enforces its own rules; these models apply the same form checks
the client always ran before submitting, so bad input fails fast with a
pydantic `ValidationError` and never reaches the network.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any

from pydantic import Field, field_validator, model_validator

from influbuddy.core.domain.models import (
    ApiModel,
    CampaignStatus,
    CollaborationType,
    SocialHandles,
)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _parse_amount(value: Any) -> Any:
    # Form input may carry thousands separators or a currency sign ("$1,500").
    if isinstance(value, str):
        return value.replace(",", "").replace("$", "").strip()
    return value


def _required_text(value: Any, message: str) -> Any:
    if value is None:
        raise ValueError(message)
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValueError(message)
    return value


def _optional_text(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def _clean_requirements(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if str(item).strip()]
    return value


def _check_email(value: str) -> str:
    value = value.strip().lower()
    if not EMAIL_RE.match(value):
        raise ValueError("Please enter a valid email address")
    return value


def _check_website(value: str | None) -> str | None:
    if value is not None and not value.startswith("http"):
        raise ValueError("Website must start with http:// or https://")
    return value


class CampaignCreate(ApiModel):
    title: str
    description: str = ""
    partner_id: str
    product_value: float = Field(..., gt=0)
    deadline: datetime
    status: CampaignStatus = CampaignStatus.DRAFT
    requirements: list[str] = Field(default_factory=list)
    collaboration_type: CollaborationType = CollaborationType.BARTER

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, value: Any) -> Any:
        return _required_text(value, "Please enter a campaign title")

    @field_validator("partner_id", mode="before")
    @classmethod
    def _partner(cls, value: Any) -> Any:
        return _required_text(value, "Please select a partner")

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, value: Any) -> Any:
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value

    @field_validator("product_value", mode="before")
    @classmethod
    def _amount(cls, value: Any) -> Any:
        return _parse_amount(value)

    @field_validator("requirements", mode="before")
    @classmethod
    def _requirements(cls, value: Any) -> Any:
        return _clean_requirements(value)


class CampaignUpdate(ApiModel):
    """Partial campaign update (edit form or status change).

    Only fields explicitly set are sent; see `ApiModel.to_payload(exclude_unset=True)`.
    """

    title: str | None = None
    description: str | None = None
    partner_id: str | None = None
    product_value: float | None = Field(default=None, gt=0)
    start_date: datetime | None = None
    deadline: datetime | None = None
    status: CampaignStatus | None = None
    requirements: list[str] | None = None
    collaboration_type: CollaborationType | None = None

    @field_validator("title", mode="before")
    @classmethod
    def _title(cls, value: Any) -> Any:
        return _required_text(value, "Title is required")

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, value: Any) -> Any:
        return _required_text(value, "Description is required")

    @field_validator("partner_id", mode="before")
    @classmethod
    def _partner(cls, value: Any) -> Any:
        return _required_text(value, "Please select a partner")

    @field_validator("product_value", mode="before")
    @classmethod
    def _amount(cls, value: Any) -> Any:
        return _parse_amount(value)

    @field_validator("requirements", mode="before")
    @classmethod
    def _requirements(cls, value: Any) -> Any:
        cleaned = _clean_requirements(value)
        if isinstance(cleaned, list) and not cleaned:
            raise ValueError("Please add at least one requirement")
        return cleaned

    @model_validator(mode="after")
    def _deadline_after_start(self) -> "CampaignUpdate":
        if self.start_date is not None and self.deadline is not None:
            if self.deadline <= self.start_date:
                raise ValueError("Deadline must be after the start date")
        return self


class PartnerCreate(ApiModel):
    company: str
    name: str
    email: str
    phone: str | None = None
    website: str | None = None
    notes: str | None = None

    @field_validator("company", mode="before")
    @classmethod
    def _company(cls, value: Any) -> Any:
        return _required_text(value, "Company name is required")

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, value: Any) -> Any:
        return _required_text(value, "Contact name is required")

    @field_validator("email", mode="before")
    @classmethod
    def _email_required(cls, value: Any) -> Any:
        return _required_text(value, "Email is required")

    @field_validator("email")
    @classmethod
    def _email_format(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("phone", "website", "notes", mode="before")
    @classmethod
    def _blank_as_none(cls, value: Any) -> Any:
        return _optional_text(value)

    @field_validator("website")
    @classmethod
    def _website(cls, value: str | None) -> str | None:
        return _check_website(value)


class PartnerUpdate(ApiModel):
    company: str | None = None
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    notes: str | None = None

    @field_validator("company", mode="before")
    @classmethod
    def _company(cls, value: Any) -> Any:
        return _required_text(value, "Company name is required")

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, value: Any) -> Any:
        return _required_text(value, "Contact name is required")

    @field_validator("email", mode="before")
    @classmethod
    def _email_required(cls, value: Any) -> Any:
        return _required_text(value, "Email is required")

    @field_validator("email")
    @classmethod
    def _email_format(cls, value: str | None) -> str | None:
        return None if value is None else _check_email(value)

    @field_validator("phone", "website", "notes", mode="before")
    @classmethod
    def _blank_as_none(cls, value: Any) -> Any:
        return _optional_text(value)

    @field_validator("website")
    @classmethod
    def _website(cls, value: str | None) -> str | None:
        return _check_website(value)


class ProfileUpdate(ApiModel):
    name: str | None = None
    bio: str | None = None
    website: str | None = None
    social_handles: SocialHandles | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _name(cls, value: Any) -> Any:
        return _required_text(value, "Name is required")
