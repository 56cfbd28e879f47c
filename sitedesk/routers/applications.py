import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from sitedesk.auth.dependencies import AuthContext, get_current_user
from sitedesk.config import settings
from sitedesk.db.deps import get_session
from sitedesk.db.repositories.applications import ApplicationsRepository
from sitedesk.errors import BadRequest, ServerError, Unauthorized
from sitedesk.routers.common import is_id, persistence_errors, single_query_value
from sitedesk.schemas.applications import (
    ApplicationCreate,
    ApplicationCreated,
    ApplicationResponse,
    ApplicationUpdate,
)
from sitedesk.services.ownership import load_owned_application
from sitedesk.services.subdomains import subdomain_for_create, subdomain_for_update

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/application", tags=["applications"])

_ARRAY_APP_ID = "Bad request. siteId parameter cannot be an array."
_MISCONFIGURED_APP_ID = "Missing or misconfigured site ID"

# Request field -> Application column for the optional fields an update may write.
_UPDATE_COLUMNS = {
    "name": "name",
    "description": "description",
    "image": "image",
    "imageBlurhash": "image_blurhash",
    "customDomain": "custom_domain",
}


@router.get("")
def get_applications(
    appId: Optional[list[str]] = Query(default=None),
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(get_session),
):
    app_id = single_query_value(appId, message=_ARRAY_APP_ID)
    if not auth.user_id:
        raise ServerError("Server failed to get session user ID")

    repo = ApplicationsRepository(session)
    with persistence_errors(session, "load applications", app_id=app_id):
        if app_id:
            application = repo.get_for_user(app_id, auth.user_id)
            return ApplicationResponse.from_model(application) if application else None
        return [ApplicationResponse.from_model(item) for item in repo.list_for_user(auth.user_id)]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_application(
    payload: ApplicationCreate,
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> ApplicationCreated:
    owner_id = payload.userId or auth.user_id
    if not owner_id:
        raise ServerError("Server failed to get session user ID")

    repo = ApplicationsRepository(session)
    with persistence_errors(session, "create application", owner_id=owner_id):
        application = repo.create(
            user_id=owner_id,
            name=payload.name,
            description=payload.description,
            subdomain=subdomain_for_create(payload.subdomain),
            logo=settings.DEFAULT_APP_LOGO,
            image=settings.DEFAULT_APP_IMAGE,
            image_blurhash=settings.PLACEHOLDER_BLURHASH,
        )
    logger.info("Created application", extra={"app_id": application.id, "owner_id": owner_id})
    return ApplicationCreated(siteId=application.id)


@router.put("")
def update_application(
    payload: ApplicationUpdate,
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> ApplicationResponse:
    if not auth.user_id:
        raise Unauthorized("Unauthorized")
    if not is_id(payload.id):
        raise BadRequest(_MISCONFIGURED_APP_ID)

    repo = ApplicationsRepository(session)
    application = load_owned_application(repo, app_id=payload.id, user_id=auth.user_id)

    fields = {
        column: getattr(payload, field)
        for field, column in _UPDATE_COLUMNS.items()
        if field in payload.model_fields_set
    }
    subdomain = subdomain_for_update(payload.subdomain, payload.currentSubdomain)
    if subdomain:
        fields["subdomain"] = subdomain

    with persistence_errors(session, "update application", app_id=application.id):
        application = repo.update(application, **fields)
    return ApplicationResponse.from_model(application)


@router.delete("")
def delete_application(
    appId: Optional[list[str]] = Query(default=None),
    auth: AuthContext = Depends(get_current_user),
    session: Session = Depends(get_session),
) -> Response:
    if not auth.user_id:
        raise Unauthorized("Unauthorized")
    app_id = single_query_value(appId, message=_MISCONFIGURED_APP_ID)
    if not app_id:
        raise BadRequest(_MISCONFIGURED_APP_ID)

    repo = ApplicationsRepository(session)
    application = load_owned_application(repo, app_id=app_id, user_id=auth.user_id)

    with persistence_errors(session, "delete application", app_id=application.id):
        repo.delete_cascade(application.id)
    logger.info("Deleted application", extra={"app_id": app_id})
    return Response(status_code=status.HTTP_200_OK)
