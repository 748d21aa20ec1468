import logging
from typing import Any
from urllib.parse import quote

import httpx

from ..utils.error_handlers import NotFoundError, UpstreamUnavailableError, get_error_message

logger = logging.getLogger(__name__)

REPO_LIMIT = 5
USER_AGENT = "devconnector-api"


async def fetch_github_repos(
    username: str,
    *,
    base_url: str,
    client_id: str = "",
    client_secret: str = "",
    timeout_s: float = 10.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict[str, Any]]:
    """
    Return the most recently created public repos of a GitHub user.

    Endpoint:
      GET {base_url}/users/{username}/repos?per_page=5&sort=created&direction=desc
    Auth:
      basic auth with the OAuth app client id/secret, when both are configured
    """
    base = (base_url or "").rstrip("/")
    url = f"{base}/users/{quote(username.strip(), safe='')}/repos"
    params = {"per_page": REPO_LIMIT, "sort": "created", "direction": "desc"}
    headers = {"User-Agent": USER_AGENT, "Accept": "application/vnd.github+json"}
    auth = (client_id, client_secret) if client_id and client_secret else None

    try:
        async with httpx.AsyncClient(timeout=timeout_s, transport=transport) as client:
            r = await client.get(url, params=params, headers=headers, auth=auth)
    except httpx.HTTPError as e:
        logger.error(f"GitHub request failed for {username}: {e}")
        raise UpstreamUnavailableError(get_error_message("github_unavailable"))

    if r.status_code != 200:
        logger.info("GitHub returned %s for user %s", r.status_code, username)
        raise NotFoundError(get_error_message("github_not_found"))

    data = r.json() or []
    return list(data)[:REPO_LIMIT]
