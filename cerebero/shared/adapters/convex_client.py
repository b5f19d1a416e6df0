"""
Convex HTTP Client

Calls named query/mutation functions of a Convex deployment over its
public HTTP function API.

Wire Format:
============
    POST {CONVEX_URL}/api/query      (or /api/mutation)
    Content-Type: application/json
    Authorization: Convex <deploy key>          (only if configured)

    {"path": "content:listByUser", "args": {"userId": "..."}, "format": "json"}

    → 200 {"status": "success", "value": <result>, "logLines": [...]}
    → 200 {"status": "error", "errorMessage": "...", "errorData": ...}

Failure Mapping:
================
    transport error / timeout / non-2xx      → StorageUnavailableError
    {"status": "error"}                      → ConvexFunctionError
      (the backend turns argument-validation errors into "not found" and
       every other function error into StorageUnavailableError)

Usage:
======
    client = ConvexClient(settings.convex_api_url, settings.CONVEX_DEPLOY_KEY, timeout=10)
    content = await client.query("content:listByUser", {"userId": user_id})
    await client.close()
"""

from typing import Any, Literal, Optional

import httpx

from cerebero.shared.core.exceptions import StorageUnavailableError
from cerebero.shared.core.logging import get_logger


logger = get_logger(__name__)

ConvexEndpoint = Literal["query", "mutation", "action"]

# Convex reports malformed ids (e.g. a UUID passed where v.id("tags") is expected)
# as argument validation failures. For lookups that simply means "no such record".
ARGUMENT_ERROR_MARKERS = (
    "ArgumentValidationError",
    "Value does not match validator",
)


class ConvexFunctionError(Exception):
    """A Convex function ran and reported an error."""

    def __init__(self, path: str, message: str, data: Any = None) -> None:
        self.path = path
        self.message = message
        self.data = data
        super().__init__(f"{path}: {message}")

    @property
    def is_argument_error(self) -> bool:
        return any(marker in self.message for marker in ARGUMENT_ERROR_MARKERS)


class ConvexClient:
    """
    Async client for the Convex function API.

    Args:
        base_url: Deployment URL (``https://<name>.convex.cloud``)
        deploy_key: Optional deploy key sent as ``Authorization: Convex <key>``
        timeout: Seconds before a call is abandoned
        transport: Optional httpx transport; tests inject a MockTransport
    """

    def __init__(
        self,
        base_url: str,
        deploy_key: str = "",
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        if not base_url:
            raise ValueError("Missing Convex URL. Set CONVEX_URL.")

        headers = {"Content-Type": "application/json"}
        if deploy_key:
            headers["Authorization"] = f"Convex {deploy_key}"

        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    async def query(self, path: str, args: dict[str, Any]) -> Any:
        return await self.call("query", path, args)

    async def mutation(self, path: str, args: dict[str, Any]) -> Any:
        return await self.call("mutation", path, args)

    async def call(self, endpoint: ConvexEndpoint, path: str, args: dict[str, Any]) -> Any:
        """
        Run one Convex function and return its value.

        Raises:
            StorageUnavailableError: Transport failure, timeout or non-2xx status
            ConvexFunctionError: The function itself reported an error
        """
        # Convex rejects explicit nulls for optional fields; omit them instead
        payload = {
            "path": path,
            "args": {key: value for key, value in args.items() if value is not None},
            "format": "json",
        }

        try:
            response = await self._client.post(f"/api/{endpoint}", json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException as e:
            logger.error("convex_timeout", path=path, error=str(e))
            raise StorageUnavailableError() from e
        except httpx.HTTPStatusError as e:
            logger.error(
                "convex_http_error",
                path=path,
                status_code=e.response.status_code,
                body=e.response.text[:500],
            )
            raise StorageUnavailableError() from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("convex_request_failed", path=path, error=str(e))
            raise StorageUnavailableError() from e

        if body.get("status") == "error":
            raise ConvexFunctionError(
                path,
                body.get("errorMessage") or "Unknown Convex error",
                body.get("errorData"),
            )

        return body.get("value")

    async def close(self) -> None:
        await self._client.aclose()
