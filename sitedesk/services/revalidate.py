from __future__ import annotations

import asyncio
import logging

import httpx

from sitedesk.config import settings

logger = logging.getLogger(__name__)


def revalidation_paths(resource_id: str, slug: str | None) -> list[str]:
    return [f"/_apps/{resource_id}/{slug}", f"/_apps/{resource_id}"]


async def _post_revalidate(client: httpx.AsyncClient, hostname: str, url_path: str) -> None:
    response = await client.post(f"{hostname}/api/revalidate", json={"urlPath": url_path})
    response.raise_for_status()


async def revalidate(
    hostname: str,
    resource_id: str,
    slug: str | None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Ask the hosting platform to regenerate the pages of a site.

    Best effort: failures are logged and never raised, and nothing is retried.
    """
    paths = revalidation_paths(resource_id, slug)
    try:
        async with httpx.AsyncClient(
            timeout=settings.REVALIDATE_TIMEOUT_SECONDS, transport=transport
        ) as client:
            results = await asyncio.gather(
                *(_post_revalidate(client, hostname, path) for path in paths),
                return_exceptions=True,
            )
    except Exception as exc:  # noqa: BLE001 - revalidation must not fail the request
        logger.warning("Revalidation client failed", extra={"hostname": hostname, "error": str(exc)})
        return

    for path, result in zip(paths, results):
        if isinstance(result, BaseException):
            logger.warning(
                "Revalidation request failed",
                extra={"hostname": hostname, "url_path": path, "error": str(result)},
            )


async def revalidate_app_hosts(
    *,
    subdomain: str | None,
    custom_domain: str | None,
    slug: str | None,
) -> int:
    """Revalidate every host an application is served from; returns the number of hosts."""
    calls = []
    if subdomain:
        calls.append(revalidate(settings.site_hostname(subdomain), subdomain, slug))
    if custom_domain:
        calls.append(revalidate(f"https://{custom_domain}", custom_domain, slug))
    if calls:
        await asyncio.gather(*calls)
    return len(calls)
