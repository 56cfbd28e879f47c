from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field

from sitedesk.db.enums import CampaignTypeEnum
from sitedesk.db.models import Campaign, Post
from sitedesk.schemas.applications import ApplicationResponse


class CampaignCreate(BaseModel):
    name: Optional[str] = None
    campaignType: Optional[CampaignTypeEnum] = None


class CampaignUpdate(BaseModel):
    id: Any = None
    name: Optional[str] = None
    maxNumber: Optional[int] = Field(default=None, ge=0)
    campaignLastDate: Optional[datetime] = None
    campaignType: Optional[CampaignTypeEnum] = None
    isActive: Optional[bool] = None
    subdomain: Optional[str] = None
    customDomain: Optional[str] = None


# Request field -> Campaign column for the scalars an update may write.
CAMPAIGN_UPDATE_COLUMNS = {
    "name": "name",
    "campaignType": "campaign_type",
    "maxNumber": "max_number",
    "campaignLastDate": "campaign_last_date",
    "isActive": "is_active",
}


class CampaignCreated(BaseModel):
    campaignId: str


class CampaignResponse(BaseModel):
    id: str
    name: Optional[str] = None
    campaignType: CampaignTypeEnum
    maxNumber: Optional[int] = None
    campaignLastDate: Optional[datetime] = None
    isActive: bool
    appId: str
    createdAt: datetime
    updatedAt: datetime

    @classmethod
    def from_model(cls, campaign: Campaign) -> "CampaignResponse":
        return cls(
            id=campaign.id,
            name=campaign.name,
            campaignType=campaign.campaign_type,
            maxNumber=campaign.max_number,
            campaignLastDate=campaign.campaign_last_date,
            isActive=campaign.is_active,
            appId=campaign.app_id,
            createdAt=campaign.created_at,
            updatedAt=campaign.updated_at,
        )


class CampaignWithAppResponse(CampaignResponse):
    app: Optional[ApplicationResponse] = None


class PostResponse(BaseModel):
    id: str
    title: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    slug: str
    image: Optional[str] = None
    imageBlurhash: Optional[str] = None
    published: bool
    appId: Optional[str] = None
    createdAt: datetime
    updatedAt: datetime

    @classmethod
    def from_model(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.id,
            title=post.title,
            description=post.description,
            content=post.content,
            slug=post.slug,
            image=post.image,
            imageBlurhash=post.image_blurhash,
            published=post.published,
            appId=post.app_id,
            createdAt=post.created_at,
            updatedAt=post.updated_at,
        )


class CampaignListing(BaseModel):
    # Holds the application's posts; the key name is part of the public contract.
    campaigns: list[PostResponse] = Field(default_factory=list)
    app: Optional[ApplicationResponse] = None
