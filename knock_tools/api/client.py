"""Knock API client wrappers.

Two clients share one request path:

- `KnockClient` talks to the management API with a service token. It can
  exchange that token for an environment API key.
- `KnockPublicClient` talks to the public API with an environment API key.

`KnockClient.public_api()` memoizes public clients per (service token,
environment) in a `ClientCache`.
"""

from collections.abc import AsyncIterator, Awaitable, Callable, MutableMapping
from typing import Any
from urllib.parse import quote

import httpx

from knock_config.models import Config
from knock_config.settings import Settings
from knock_obs.logging import get_logger
from knock_tools.exceptions import ConfigurationError

from .exceptions import (
    KnockAPIError,
    KnockAuthError,
    KnockNotFoundError,
    KnockRateLimitError,
    KnockValidationError,
)

logger = get_logger(__name__)

Recipient = str | dict[str, Any]


def _segment(value: str) -> str:
    return quote(str(value), safe="")


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v is not None}


class _KnockHTTPClient:
    """Shared request handling: auth headers, error mapping, pagination."""

    def __init__(
        self,
        token: str,
        base_url: str,
        timeout_seconds: int = 30,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize client.

        Args:
            token: Bearer token (service token or environment API key)
            base_url: API root, e.g. https://api.knock.app/v1
            timeout_seconds: Request timeout
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _get_headers(self) -> dict[str, str]:
        """Get request headers with authentication."""
        return {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _handle_error(self, response: httpx.Response) -> None:
        """Map Knock API errors to custom exceptions."""
        status = response.status_code

        try:
            error_data = response.json()
            message = error_data.get("message", response.text)
        except Exception:
            message = response.text

        if status in (401, 403):
            raise KnockAuthError(f"Authentication failed: {message}", status)
        elif status == 404:
            raise KnockNotFoundError(f"Resource not found: {message}", status)
        elif status == 429:
            raise KnockRateLimitError(f"Rate limit exceeded: {message}", status)
        elif status in (400, 422):
            raise KnockValidationError(f"Invalid request: {message}", status)
        else:
            raise KnockAPIError(f"Knock API error ({status}): {message}", status)

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None when empty)."""
        url = path if path.startswith("http") else f"{self.base_url}{path}"

        async with httpx.AsyncClient(
            timeout=self.timeout_seconds, transport=self._transport
        ) as client:
            response = await client.request(
                method,
                url,
                headers=headers if headers is not None else self._get_headers(),
                params=_drop_none(params or {}),
                json=json,
            )

        if response.status_code >= 400:
            self._handle_error(response)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError:
            raise KnockAPIError(
                f"Invalid JSON response ({response.status_code}): {response.text[:200]}",
                response.status_code,
            ) from None

    async def _paginate(
        self, path: str, params: dict[str, Any] | None = None
    ) -> AsyncIterator[dict[str, Any]]:
        """Yield every entry of a cursor-paginated listing."""
        query = dict(params or {})
        while True:
            page = await self._request("GET", path, params=query)
            for entry in page.get("entries", []):
                yield entry

            after = (page.get("page_info") or {}).get("after")
            if not after:
                return
            query["after"] = after


class KnockPublicClient(_KnockHTTPClient):
    """Knock public API client, scoped to one environment by its API key."""

    # ========================================================================
    # USERS
    # ========================================================================

    async def get_user(self, user_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/users/{_segment(user_id)}")

    async def identify_user(self, user_id: str, properties: dict[str, Any]) -> dict[str, Any]:
        """Create or update a user with the given properties."""
        return await self._request(
            "PUT", f"/users/{_segment(user_id)}", json=_drop_none(properties)
        )

    async def get_user_preferences(
        self, user_id: str, preference_set: str = "default"
    ) -> dict[str, Any]:
        return await self._request(
            "GET",
            f"/users/{_segment(user_id)}/preferences/{_segment(preference_set)}",
        )

    async def set_user_preferences(
        self,
        user_id: str,
        preferences: dict[str, Any],
        preference_set: str = "default",
    ) -> dict[str, Any]:
        return await self._request(
            "PUT",
            f"/users/{_segment(user_id)}/preferences/{_segment(preference_set)}",
            json=preferences,
        )

    async def get_user_messages(
        self, user_id: str, workflow_run_id: str | None = None
    ) -> dict[str, Any]:
        return await self._request(
            "GET",
            f"/users/{_segment(user_id)}/messages",
            params={"workflow_run_id": workflow_run_id},
        )

    # ========================================================================
    # WORKFLOWS
    # ========================================================================

    async def trigger_workflow(
        self,
        key: str,
        recipients: list[Recipient] | None = None,
        actor: Recipient | None = None,
        data: dict[str, Any] | None = None,
        tenant: Any = None,
    ) -> dict[str, Any]:
        """Trigger a workflow. Returns a body carrying `workflow_run_id`."""
        body = _drop_none(
            {"recipients": recipients, "actor": actor, "data": data, "tenant": tenant}
        )
        return await self._request("POST", f"/workflows/{_segment(key)}/trigger", json=body)

    async def create_schedules(
        self,
        workflow: str,
        recipients: list[Recipient],
        scheduled_at: str,
        data: dict[str, Any] | None = None,
    ) -> Any:
        body = _drop_none(
            {
                "workflow": workflow,
                "recipients": recipients,
                "scheduled_at": scheduled_at,
                "data": data,
            }
        )
        return await self._request("POST", "/schedules", json=body)

    # ========================================================================
    # TENANTS
    # ========================================================================

    async def get_tenant(self, tenant_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/tenants/{_segment(tenant_id)}")

    async def set_tenant(self, tenant_id: str, properties: dict[str, Any]) -> dict[str, Any]:
        return await self._request(
            "PUT", f"/tenants/{_segment(tenant_id)}", json=_drop_none(properties)
        )

    async def delete_tenant(self, tenant_id: str) -> None:
        await self._request("DELETE", f"/tenants/{_segment(tenant_id)}")

    # ========================================================================
    # MESSAGES
    # ========================================================================

    async def get_message(self, message_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/messages/{_segment(message_id)}")

    async def get_message_content(self, message_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/messages/{_segment(message_id)}/content")

    async def list_message_delivery_logs(self, message_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/messages/{_segment(message_id)}/delivery_logs")

    async def list_message_events(self, message_id: str) -> dict[str, Any]:
        return await self._request("GET", f"/messages/{_segment(message_id)}/events")

    # ========================================================================
    # OBJECTS
    # ========================================================================

    async def list_objects(self, collection: str) -> dict[str, Any]:
        return await self._request("GET", f"/objects/{_segment(collection)}")

    async def get_object(self, collection: str, object_id: str) -> dict[str, Any]:
        return await self._request(
            "GET", f"/objects/{_segment(collection)}/{_segment(object_id)}"
        )

    async def set_object(
        self, collection: str, object_id: str, properties: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        return await self._request(
            "PUT",
            f"/objects/{_segment(collection)}/{_segment(object_id)}",
            json=properties or {},
        )

    async def delete_object(self, collection: str, object_id: str) -> None:
        await self._request(
            "DELETE", f"/objects/{_segment(collection)}/{_segment(object_id)}"
        )

    async def add_subscriptions(
        self, collection: str, object_id: str, recipients: list[Recipient]
    ) -> Any:
        return await self._request(
            "POST",
            f"/objects/{_segment(collection)}/{_segment(object_id)}/subscriptions",
            json={"recipients": recipients},
        )

    async def delete_subscriptions(
        self, collection: str, object_id: str, recipients: list[Recipient]
    ) -> Any:
        return await self._request(
            "DELETE",
            f"/objects/{_segment(collection)}/{_segment(object_id)}/subscriptions",
            json={"recipients": recipients},
        )


class ClientCache:
    """Memoizes public API clients per (service token, environment).

    The backing store is injectable so hosts can share or isolate caches.
    Writes are last-writer-wins and nothing is evicted.
    """

    def __init__(
        self,
        store: MutableMapping[tuple[str, str], KnockPublicClient] | None = None,
    ):
        self._store = store if store is not None else {}

    def get(self, service_token: str, environment: str) -> KnockPublicClient | None:
        return self._store.get((service_token, environment))

    def set(self, service_token: str, environment: str, client: KnockPublicClient) -> None:
        self._store[(service_token, environment)] = client

    async def get_or_create(
        self,
        service_token: str,
        environment: str,
        factory: Callable[[], Awaitable[KnockPublicClient]],
    ) -> KnockPublicClient:
        cached = self.get(service_token, environment)
        if cached is not None:
            return cached

        client = await factory()
        self.set(service_token, environment, client)
        return client

    def __len__(self) -> int:
        return len(self._store)


class KnockClient(_KnockHTTPClient):
    """Knock management API client with Knock Agent Toolkit integration.

    Provides:
    - Error handling and exception mapping
    - Cursor pagination as async generators
    - Per-environment public API clients via `public_api()`
    """

    def __init__(
        self,
        service_token: str,
        config: Config | None = None,
        settings: Settings | None = None,
        client_cache: ClientCache | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize management client.

        Args:
            service_token: Knock service token
            config: Caller config (default environment)
            settings: Endpoint and timeout settings
            client_cache: Cache of public API clients, a fresh one when omitted
            transport: Optional httpx transport shared with public clients
        """
        self.settings = settings or Settings()
        super().__init__(
            token=service_token,
            base_url=self.settings.KNOCK_CONTROL_URL,
            timeout_seconds=self.settings.KNOCK_TIMEOUT_SECONDS,
            transport=transport,
        )
        self.config = config or Config(service_token=service_token)
        self.client_cache = client_cache if client_cache is not None else ClientCache()

    @property
    def service_token(self) -> str:
        return self.token

    async def public_api(self, environment: str | None = None) -> KnockPublicClient:
        """Public API client for `environment` (config default, then development)."""
        env = self.config.resolve_environment(environment)
        return await self.client_cache.get_or_create(
            self.service_token, env, lambda: self._create_public_client(env)
        )

    async def _create_public_client(self, environment: str) -> KnockPublicClient:
        api_key = await self.exchange_api_key(environment)
        logger.debug("public_api_client_created", environment=environment)
        return KnockPublicClient(
            token=api_key,
            base_url=self.settings.KNOCK_API_URL,
            timeout_seconds=self.settings.KNOCK_TIMEOUT_SECONDS,
            transport=self._transport,
        )

    async def exchange_api_key(self, environment: str) -> str:
        """Exchange the service token for the environment's secret API key."""
        result = await self._request(
            "POST", "/api_keys/exchange", json={"environment": environment}
        )
        if not isinstance(result, dict) or "api_key" not in result:
            raise KnockAPIError("Unexpected api key exchange response: missing api_key")
        return result["api_key"]

    # ========================================================================
    # WORKFLOWS
    # ========================================================================

    def list_workflows(self, environment: str) -> AsyncIterator[dict[str, Any]]:
        return self._paginate("/workflows", {"environment": environment})

    async def get_workflow(self, key: str, environment: str) -> dict[str, Any]:
        return await self._request(
            "GET", f"/workflows/{_segment(key)}", params={"environment": environment}
        )

    async def upsert_workflow(
        self, key: str, environment: str, workflow: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request(
            "PUT",
            f"/workflows/{_segment(key)}",
            params={"environment": environment},
            json={"workflow": workflow},
        )

    # ========================================================================
    # ACCOUNT RESOURCES
    # ========================================================================

    def list_channels(self) -> AsyncIterator[dict[str, Any]]:
        return self._paginate("/channels")

    def list_environments(self) -> AsyncIterator[dict[str, Any]]:
        return self._paginate("/environments")

    # ========================================================================
    # COMMITS
    # ========================================================================

    async def list_commits(self, environment: str, promoted: bool = False) -> dict[str, Any]:
        return await self._request(
            "GET",
            "/commits",
            params={"environment": environment, "promoted": str(promoted).lower()},
        )

    async def commit_all(
        self, environment: str, commit_message: str | None = None
    ) -> dict[str, Any]:
        return await self._request(
            "PUT",
            "/commits",
            params={"environment": environment, "commit_message": commit_message},
        )

    async def promote_all(self, to_environment: str) -> dict[str, Any]:
        return await self._request(
            "PUT", "/commits/promote", json={"to_environment": to_environment}
        )

    # ========================================================================
    # TEMPLATES: PARTIALS, LAYOUTS, MESSAGE TYPES
    # ========================================================================

    def list_partials(self, environment: str) -> AsyncIterator[dict[str, Any]]:
        return self._paginate("/partials", {"environment": environment})

    def list_email_layouts(self, environment: str) -> AsyncIterator[dict[str, Any]]:
        return self._paginate("/email_layouts", {"environment": environment})

    def list_message_types(self, environment: str) -> AsyncIterator[dict[str, Any]]:
        return self._paginate("/message_types", {"environment": environment})

    async def get_message_type(self, key: str, environment: str) -> dict[str, Any]:
        return await self._request(
            "GET", f"/message_types/{_segment(key)}", params={"environment": environment}
        )

    async def upsert_message_type(
        self, key: str, environment: str, message_type: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request(
            "PUT",
            f"/message_types/{_segment(key)}",
            params={"environment": environment},
            json={"message_type": message_type},
        )

    # ========================================================================
    # BROADCASTS
    # ========================================================================

    def list_broadcasts(self, environment: str) -> AsyncIterator[dict[str, Any]]:
        return self._paginate("/broadcasts", {"environment": environment})

    async def get_broadcast(self, key: str, environment: str) -> dict[str, Any]:
        return await self._request(
            "GET", f"/broadcasts/{_segment(key)}", params={"environment": environment}
        )

    async def upsert_broadcast(
        self, key: str, environment: str, broadcast: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request(
            "PUT",
            f"/broadcasts/{_segment(key)}",
            params={"environment": environment},
            json={"broadcast": broadcast},
        )

    async def send_broadcast(
        self, key: str, environment: str, send_at: str | None = None
    ) -> dict[str, Any]:
        return await self._request(
            "PUT",
            f"/broadcasts/{_segment(key)}/send",
            params={"environment": environment},
            json=_drop_none({"send_at": send_at}),
        )

    async def cancel_broadcast(self, key: str, environment: str) -> dict[str, Any]:
        return await self._request(
            "PUT",
            f"/broadcasts/{_segment(key)}/cancel",
            params={"environment": environment},
        )

    # ========================================================================
    # GUIDES
    # ========================================================================

    def list_guides(
        self, environment: str, page_size: int | None = None
    ) -> AsyncIterator[dict[str, Any]]:
        return self._paginate(
            "/guides", {"environment": environment, "page_size": page_size}
        )

    async def get_guide(
        self, key: str, environment: str, hide_uncommitted_changes: bool | None = None
    ) -> dict[str, Any]:
        params: dict[str, Any] = {"environment": environment}
        if hide_uncommitted_changes is not None:
            params["hide_uncommitted_changes"] = str(hide_uncommitted_changes).lower()
        return await self._request("GET", f"/guides/{_segment(key)}", params=params)

    async def upsert_guide(
        self, key: str, environment: str, guide: dict[str, Any]
    ) -> dict[str, Any]:
        return await self._request(
            "PUT",
            f"/guides/{_segment(key)}",
            params={"environment": environment},
            json={"guide": guide},
        )

    # ========================================================================
    # DOCUMENTATION
    # ========================================================================

    async def search_documentation(self, query: str) -> Any:
        """Search the public Knock docs. No credentials are sent."""
        return await self._request(
            "POST",
            self.settings.KNOCK_DOCS_SEARCH_URL,
            json={"query": query},
            headers={"Content-Type": "application/json"},
        )


def create_knock_client(
    config: Config,
    settings: Settings | None = None,
    client_cache: ClientCache | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> KnockClient:
    """Build a management client from caller config, falling back to settings.

    Raises:
        ConfigurationError: No service token in config or KNOCK_SERVICE_TOKEN
    """
    settings = settings or Settings()
    service_token = config.service_token or settings.KNOCK_SERVICE_TOKEN

    if not service_token:
        raise ConfigurationError(
            "Service token is required. Set `service_token` in the config or the "
            "`KNOCK_SERVICE_TOKEN` environment variable."
        )

    return KnockClient(
        service_token=service_token,
        config=config,
        settings=settings,
        client_cache=client_cache,
        transport=transport,
    )
