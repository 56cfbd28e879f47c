from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, field_validator

from sitedesk.db.models import Application


class ApplicationCreate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    subdomain: Optional[str] = None
    userId: Optional[str] = None


class ApplicationUpdate(BaseModel):
    # Left untyped so that arrays and numbers reach the handler's own id check.
    id: Any = None
    currentSubdomain: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    imageBlurhash: Optional[str] = None
    subdomain: Optional[str] = None
    customDomain: Optional[str] = None

    @field_validator("customDomain")
    @classmethod
    def blank_domain_is_none(cls, value: Optional[str]) -> Optional[str]:
        # custom_domain is unique, so a cleared domain is stored as NULL.
        if value is None:
            return None
        return value.strip() or None


class ApplicationCreated(BaseModel):
    siteId: str


class ApplicationResponse(BaseModel):
    id: str
    name: Optional[str] = None
    description: Optional[str] = None
    logo: Optional[str] = None
    image: Optional[str] = None
    imageBlurhash: Optional[str] = None
    subdomain: str
    customDomain: Optional[str] = None
    userId: Optional[str] = None
    createdAt: datetime
    updatedAt: datetime

    @classmethod
    def from_model(cls, application: Application) -> "ApplicationResponse":
        return cls(
            id=application.id,
            name=application.name,
            description=application.description,
            logo=application.logo,
            image=application.image,
            imageBlurhash=application.image_blurhash,
            subdomain=application.subdomain,
            customDomain=application.custom_domain,
            userId=application.user_id,
            createdAt=application.created_at,
            updatedAt=application.updated_at,
        )
