from __future__ import annotations

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from sitedesk.db.models import Application, Campaign, Post
from sitedesk.db.repositories.base import Repository

logger = logging.getLogger(__name__)


class ApplicationsRepository(Repository):
    def list_for_user(self, user_id: str) -> List[Application]:
        stmt = (
            select(Application)
            .where(Application.user_id == user_id)
            .order_by(Application.created_at.asc())
        )
        return list(self.session.scalars(stmt).all())

    def get_for_user(self, app_id: Optional[str], user_id: str) -> Optional[Application]:
        """Return the caller's application, or their first one when ``app_id`` is None."""
        stmt = select(Application).where(Application.user_id == user_id)
        if app_id is not None:
            stmt = stmt.where(Application.id == app_id)
        stmt = stmt.order_by(Application.created_at.asc())
        return self.session.scalars(stmt).first()

    def get_owning_campaign(self, campaign_id: str, user_id: str) -> Optional[Application]:
        stmt = (
            select(Application)
            .join(Campaign, Campaign.app_id == Application.id)
            .where(Campaign.id == campaign_id, Application.user_id == user_id)
        )
        return self.session.scalars(stmt).first()

    def create(self, *, user_id: Optional[str], subdomain: str, **fields) -> Application:
        application = Application(user_id=user_id, subdomain=subdomain, **fields)
        return self.save(application)

    def update(self, application: Application, **fields) -> Application:
        for key, value in fields.items():
            setattr(application, key, value)
        self.session.commit()
        self.session.refresh(application)
        return application

    def delete_cascade(self, app_id: str) -> None:
        """Delete an application with its posts and campaigns in a single transaction."""
        try:
            self._delete_posts(app_id)
            self._delete_campaigns(app_id)
            self.session.execute(delete(Application).where(Application.id == app_id))
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.warning("Rolled back application delete", extra={"app_id": app_id})
            raise

    def _delete_posts(self, app_id: str) -> None:
        self.session.execute(delete(Post).where(Post.app_id == app_id))

    def _delete_campaigns(self, app_id: str) -> None:
        self.session.execute(delete(Campaign).where(Campaign.app_id == app_id))
