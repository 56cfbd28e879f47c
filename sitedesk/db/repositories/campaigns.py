from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select

from sitedesk.db.enums import CampaignTypeEnum
from sitedesk.db.models import Application, Campaign
from sitedesk.db.repositories.base import Repository


@dataclass
class DeletedCampaign:
    id: str
    name: Optional[str]
    subdomain: Optional[str]
    custom_domain: Optional[str]


class CampaignsRepository(Repository):
    def get(self, campaign_id: str) -> Optional[Campaign]:
        return self.session.scalars(select(Campaign).where(Campaign.id == campaign_id)).first()

    def get_for_user(self, campaign_id: str, user_id: str) -> Optional[tuple[Campaign, Application]]:
        stmt = (
            select(Campaign, Application)
            .join(Application, Campaign.app_id == Application.id)
            .where(Campaign.id == campaign_id, Application.user_id == user_id)
        )
        row = self.session.execute(stmt).first()
        if row is None:
            return None
        return row[0], row[1]

    def create(
        self,
        app_id: str,
        name: Optional[str],
        campaign_type: Optional[CampaignTypeEnum] = None,
    ) -> Campaign:
        campaign = Campaign(app_id=app_id, name=name)
        if campaign_type is not None:
            campaign.campaign_type = campaign_type
        return self.save(campaign)

    def update(self, campaign_id: str, **fields) -> Optional[Campaign]:
        campaign = self.get(campaign_id)
        if not campaign:
            return None
        for key, value in fields.items():
            setattr(campaign, key, value)
        self.session.commit()
        self.session.refresh(campaign)
        return campaign

    def delete(self, campaign_id: str) -> Optional[DeletedCampaign]:
        """Delete a campaign and hand back the parent hosts that served it."""
        stmt = (
            select(Campaign, Application.subdomain, Application.custom_domain)
            .join(Application, Campaign.app_id == Application.id)
            .where(Campaign.id == campaign_id)
        )
        row = self.session.execute(stmt).first()
        if row is None:
            return None
        campaign, subdomain, custom_domain = row
        deleted = DeletedCampaign(
            id=campaign.id,
            name=campaign.name,
            subdomain=subdomain,
            custom_domain=custom_domain,
        )
        self.session.delete(campaign)
        self.session.commit()
        return deleted
