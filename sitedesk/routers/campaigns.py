import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from sitedesk.auth.dependencies import AuthContext, get_current_user
from sitedesk.db.deps import get_session
from sitedesk.db.repositories.applications import ApplicationsRepository
from sitedesk.db.repositories.campaigns import CampaignsRepository
from sitedesk.db.repositories.posts import PostsRepository
from sitedesk.errors import BadRequest, NotFound
from sitedesk.routers.common import is_id, persistence_errors, single_query_value
from sitedesk.schemas.applications import ApplicationResponse
from sitedesk.schemas.campaigns import (
    CAMPAIGN_UPDATE_COLUMNS,
    CampaignCreate,
    CampaignCreated,
    CampaignListing,
    CampaignResponse,
    CampaignUpdate,
    CampaignWithAppResponse,
    PostResponse,
)
from sitedesk.services import revalidate as revalidate_service
from sitedesk.services.ownership import load_application_owning_campaign, load_owned_application

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/campaign", tags=["campaigns"])

_INVALID_QUERY = "Bad request. Query parameters are not valid."
_MISCONFIGURED_APP_ID = "Missing or misconfigured app ID or session ID"
_MISCONFIGURED_CAMPAIGN_ID = "Missing or misconfigured site ID or session ID"


def _parse_published(raw: Optional[str]) -> bool:
    try:
        published = json.loads(raw or "true")
    except json.JSONDecodeError as exc:
        raise BadRequest(_INVALID_QUERY) from exc
    if not isinstance(published, bool):
        raise BadRequest(_INVALID_QUERY)
    return published


@router.get("")
def get_campaigns(
    campaignId: Optional[list[str]] = Query(default=None),
    appId: Optional[list[str]] = Query(default=None),
    published: Optional[list[str]] = Query(default=None),
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    campaign_id = single_query_value(campaignId, message=_INVALID_QUERY)
    app_id = single_query_value(appId, message=_INVALID_QUERY)
    published_raw = single_query_value(published, message=_INVALID_QUERY)
    if not auth.user_id:
        raise BadRequest(_INVALID_QUERY)

    with persistence_errors(session, "load campaigns", campaign_id=campaign_id, app_id=app_id):
        if campaign_id:
            found = CampaignsRepository(session).get_for_user(campaign_id, auth.user_id)
            if not found:
                return None
            campaign, application = found
            return CampaignWithAppResponse(
                **CampaignResponse.from_model(campaign).model_dump(),
                app=ApplicationResponse.from_model(application),
            )

        # Listing resolves the application from campaignId, which is always
        # empty on this branch, so it lands on the caller's first application.
        apps = ApplicationsRepository(session)
        application = apps.get_for_user(campaign_id or None, auth.user_id)
        if not application:
            return CampaignListing(campaigns=[], app=None)
        published_flag = _parse_published(published_raw)
        # Posts stay within the caller's own applications rather than the unfiltered table.
        posts_app = apps.get_for_user(app_id, auth.user_id) if app_id else application
        posts = PostsRepository(session).list_for_app(posts_app.id, published_flag) if posts_app else []
        return CampaignListing(
            campaigns=[PostResponse.from_model(post) for post in posts],
            app=ApplicationResponse.from_model(application),
        )


@router.post("", status_code=status.HTTP_201_CREATED)
def create_campaign(
    payload: CampaignCreate,
    appId: Optional[list[str]] = Query(default=None),
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> CampaignCreated:
    app_id = single_query_value(appId, message=_MISCONFIGURED_APP_ID)
    if not app_id or not auth.user_id:
        raise BadRequest(_MISCONFIGURED_APP_ID)

    application = load_owned_application(
        ApplicationsRepository(session), app_id=app_id, user_id=auth.user_id, message="app not found"
    )
    with persistence_errors(session, "create campaign", app_id=application.id):
        campaign = CampaignsRepository(session).create(
            app_id=application.id,
            name=payload.name,
            campaign_type=payload.campaignType,
        )
    logger.info("Created campaign", extra={"campaign_id": campaign.id, "app_id": application.id})
    return CampaignCreated(campaignId=campaign.id)


@router.delete("")
async def delete_campaign(
    campaignId: Optional[list[str]] = Query(default=None),
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> Response:
    campaign_id = single_query_value(campaignId, message=_MISCONFIGURED_CAMPAIGN_ID)
    if not campaign_id or not auth.user_id:
        raise BadRequest(_MISCONFIGURED_CAMPAIGN_ID)

    load_application_owning_campaign(
        ApplicationsRepository(session), campaign_id=campaign_id, user_id=auth.user_id
    )
    with persistence_errors(session, "delete campaign", campaign_id=campaign_id):
        deleted = CampaignsRepository(session).delete(campaign_id)

    if deleted:
        await revalidate_service.revalidate_app_hosts(
            subdomain=deleted.subdomain,
            custom_domain=deleted.custom_domain,
            slug=deleted.name,
        )
    return Response(status_code=status.HTTP_200_OK)


@router.put("")
async def update_campaign(
    payload: CampaignUpdate,
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> CampaignResponse:
    if not is_id(payload.id) or not auth.user_id:
        raise BadRequest(_MISCONFIGURED_CAMPAIGN_ID)

    load_application_owning_campaign(
        ApplicationsRepository(session), campaign_id=payload.id, user_id=auth.user_id
    )
    fields = {
        column: getattr(payload, field)
        for field, column in CAMPAIGN_UPDATE_COLUMNS.items()
        if field in payload.model_fields_set
    }
    with persistence_errors(session, "update campaign", campaign_id=payload.id):
        campaign = CampaignsRepository(session).update(payload.id, **fields)
    if campaign is None:
        raise NotFound("Site not found")

    await revalidate_service.revalidate_app_hosts(
        subdomain=payload.subdomain,
        custom_domain=payload.customDomain,
        slug=campaign.name,
    )
    return CampaignResponse.from_model(campaign)
