"""Domain models (Pydantic v2).

These records mirror the backend's REST payloads. JSON keys are camelCase;
attributes are snake_case and can be populated either way.

Note:
- These models describe *what* the data is, not *how* it is fetched.
- Unknown keys are ignored so backend additions do not break the client.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic.config import ConfigDict


class CampaignStatus(str, Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    WAITING_FOR_PAYMENT = "WAITING_FOR_PAYMENT"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class CollaborationType(str, Enum):
    BARTER = "BARTER"
    PAID = "PAID"
    SPONSORED = "SPONSORED"
    GIFTED = "GIFTED"
    EVENT = "EVENT"


class SocialPlatform(str, Enum):
    INSTAGRAM = "instagram"
    TIKTOK = "tiktok"
    YOUTUBE = "youtube"
    TWITTER = "twitter"
    LINKEDIN = "linkedin"
    OTHER = "other"


class PostType(str, Enum):
    POST = "post"
    STORY = "story"
    REEL = "reel"
    VIDEO = "video"
    CAROUSEL = "carousel"


class ApiModel(BaseModel):
    """Base for every REST record: camelCase aliases, extra keys ignored."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_payload(self, *, exclude_unset: bool = False) -> dict[str, Any]:
        """Serialize to the camelCase JSON body expected by the backend."""

        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude_unset=exclude_unset,
        )


class SocialLinkMetrics(ApiModel):
    views: int | None = None
    likes: int | None = None
    comments: int | None = None
    shares: int | None = None


class SocialLink(ApiModel):
    """A social-media post recorded against a campaign."""

    id: str
    platform: SocialPlatform = Field(
        default=SocialPlatform.OTHER,
        description="Platform the post was published on.",
    )
    url: str = Field(..., min_length=1)
    post_type: PostType = Field(
        default=PostType.POST,
        description="Kind of post (post, story, reel, ...).",
    )
    description: str | None = None
    metrics: SocialLinkMetrics | None = None


class PartnerRef(ApiModel):
    """Partner as embedded inside a campaign payload."""

    id: str
    name: str = ""
    company: str = ""


class PartnerCampaignRef(ApiModel):
    """Recent campaign as embedded inside a partner payload."""

    id: str
    title: str = ""
    status: str = ""
    deadline: datetime | None = None


class PartnerCount(ApiModel):
    campaigns: int = 0


class Partner(ApiModel):
    """A brand or sponsor the user collaborates with."""

    id: str
    name: str
    company: str
    email: str | None = None
    phone: str | None = None
    website: str | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    total_earnings: float = Field(
        default=0.0,
        description="Earnings aggregated by the backend over this partner's campaigns.",
    )
    active_campaigns: int = Field(default=0, ge=0)
    campaigns: list[PartnerCampaignRef] = Field(default_factory=list)
    count: PartnerCount | None = Field(default=None, alias="_count")

    @field_validator("campaigns", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("total_earnings", mode="before")
    @classmethod
    def _none_as_zero(cls, value: Any) -> Any:
        return 0.0 if value is None else value


class Campaign(ApiModel):
    """A tracked collaboration with a partner."""

    id: str
    title: str
    description: str | None = None
    partner_id: str
    partner: PartnerRef | None = None
    product_value: float | None = Field(
        default=None,
        description="Monetary value of the collaboration (product or fee).",
    )
    requirements: list[str] = Field(default_factory=list)
    deadline: datetime | None = None
    start_date: datetime | None = None
    status: CampaignStatus = CampaignStatus.DRAFT
    collaboration_type: CollaborationType | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    social_links: list[SocialLink] = Field(default_factory=list)

    @field_validator("requirements", "social_links", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def value(self) -> float:
        """`product_value` with a missing amount counted as zero."""

        return self.product_value or 0.0


class SocialHandles(ApiModel):
    instagram: str = ""
    tiktok: str = ""
    youtube: str = ""


class UserProfile(ApiModel):
    id: str
    name: str = ""
    email: str = ""
    avatar: str | None = None
    bio: str = ""
    website: str = ""
    social_handles: SocialHandles = Field(default_factory=SocialHandles)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("bio", "website", mode="before")
    @classmethod
    def _none_as_blank(cls, value: Any) -> Any:
        return "" if value is None else value


class DashboardStats(ApiModel):
    total_earnings: float = 0.0
    active_campaigns: int = 0
    completed_campaigns: int = 0
    total_partners: int = 0
    upcoming_deadlines: int = 0


class AuthSession(BaseModel):
    """Signed-in Firebase user, as persisted between CLI invocations."""

    uid: str = Field(..., min_length=1)
    email: str = ""
    display_name: str | None = None
    id_token: str = Field(..., min_length=1)
    refresh_token: str = Field(..., min_length=1)
    expires_at: datetime
    email_verified: bool = False

    @classmethod
    def expiring_in(cls, seconds: int | str, **data: Any) -> "AuthSession":
        """Build a session whose id token expires `seconds` from now (Firebase `expiresIn`)."""

        expires_at = datetime.now(timezone.utc) + timedelta(seconds=int(seconds))
        return cls(expires_at=expires_at, **data)

    def is_expired(self, *, now: datetime | None = None, leeway_seconds: int = 60) -> bool:
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return now >= expires_at - timedelta(seconds=leeway_seconds)
