"""Authorize-and-load helpers.

Ownership failures surface as ``NotFound`` so that callers cannot probe for the
existence of other tenants' applications or campaigns.
"""
from __future__ import annotations

from sitedesk.db.models import Application
from sitedesk.db.repositories.applications import ApplicationsRepository
from sitedesk.errors import NotFound


def load_owned_application(
    repo: ApplicationsRepository,
    *,
    app_id: str,
    user_id: str,
    message: str = "Site not found",
) -> Application:
    application = repo.get_for_user(app_id, user_id)
    if not application:
        raise NotFound(message)
    return application


def load_application_owning_campaign(
    repo: ApplicationsRepository,
    *,
    campaign_id: str,
    user_id: str,
    message: str = "Site not found",
) -> Application:
    application = repo.get_owning_campaign(campaign_id, user_id)
    if not application:
        raise NotFound(message)
    return application
