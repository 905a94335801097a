"""Shared base class for httpx-based provider adapters.

Removes the boilerplate every adapter would otherwise repeat: client
lifecycle, mirror rotation, retries, safe fetch/parse, and the error
boundary that turns every upstream failure into an empty result.

This base class lives in the *infrastructure* layer because it depends
on ``httpx`` and ``structlog``. The *domain* layer only knows
``ProviderProtocol``; adapters inheriting from ``HttpxProviderBase``
satisfy it structurally.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import structlog

from reelscout.domain.entities.catalog import (
    Link,
    ProviderCapability,
    ProviderDescriptor,
    RawRecord,
)
from reelscout.domain.providers.exceptions import (
    ProviderError,
    ProviderParseFailure,
    ProviderTimeout,
    ProviderUnavailable,
)

from .constants import (
    DEFAULT_CLIENT_TIMEOUT,
    DEFAULT_MAX_RESULTS,
    DEFAULT_RETRY_DELAY,
    DEFAULT_USER_AGENT,
)


class HttpxProviderBase:
    """Shared base for httpx-based provider adapters.

    Subclasses **must** set:
    - ``name``
    - ``_domains`` (at least one; further entries are mirrors)

    Subclasses **must** override:
    - ``_search()``

    Subclasses **may** override:
    - ``priority``, ``capability``, ``prefers_master_title``
    - ``_resolve()`` (second-stage link lookup for records with ``detail_url``)
    - ``_timeout``, ``_retries``, ``_user_agent``, ``_headers``
    """

    # --- Must be set by subclass ---
    name: str = ""

    # --- Overridable defaults ---
    priority: int = 1
    capability: ProviderCapability = "links"
    prefers_master_title: bool = False

    _domains: list[str] = []  # noqa: RUF012  # subclass overrides
    _scheme: str = "https"
    _max_results: int = DEFAULT_MAX_RESULTS
    _timeout: float = DEFAULT_CLIENT_TIMEOUT
    _retries: int = 1
    _retry_delay: float = DEFAULT_RETRY_DELAY
    _user_agent: str = DEFAULT_USER_AGENT
    _headers: dict[str, str] = {}  # noqa: RUF012

    def __init__(self) -> None:
        self._client: httpx.AsyncClient | None = None
        self._owns_client: bool = True
        self._proxy: str | None = None
        self._options: dict[str, Any] = {}
        self._mirror_index: int = 0
        self._log = structlog.get_logger(self.name or __name__)

    # ------------------------------------------------------------------
    # Identity
    # ------------------------------------------------------------------

    @property
    def descriptor(self) -> ProviderDescriptor:
        return ProviderDescriptor(
            name=self.name,
            priority=self.priority,
            capability=self.capability,
            prefers_master_title=self.prefers_master_title,
        )

    @property
    def base_url(self) -> str:
        """Base URL of the mirror that answered last (sticky)."""
        if not self._domains:
            return ""
        return f"{self._scheme}://{self._domains[self._mirror_index]}"

    # ------------------------------------------------------------------
    # Client lifecycle
    # ------------------------------------------------------------------

    def configure(
        self,
        *,
        timeout: float | None = None,
        proxy: str | None = None,
        max_results: int | None = None,
        http_client: httpx.AsyncClient | None = None,
        options: dict[str, Any] | None = None,
    ) -> None:
        """Apply runtime settings from the composition root.

        *options* carries provider-specific settings (e.g. channel lists);
        unknown keys are ignored by providers that do not use them.
        """
        if timeout is not None:
            self._timeout = timeout
        if proxy is not None:
            self._proxy = proxy
        if max_results is not None:
            self._max_results = max_results
        if http_client is not None:
            self._client = http_client
            self._owns_client = False
        if options:
            self._options.update(options)

    async def _ensure_client(self) -> httpx.AsyncClient:
        """Create httpx client if not already running."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
                headers={"User-Agent": self._user_agent},
                proxy=self._proxy,
            )
            self._owns_client = True
        return self._client

    async def cleanup(self) -> None:
        """Close the httpx client (only if this adapter created it)."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    # ------------------------------------------------------------------
    # Fetch helpers
    # ------------------------------------------------------------------

    async def _get_once(
        self, url: str, *, method: str = "GET", **kwargs: Any
    ) -> httpx.Response:
        client = await self._ensure_client()
        headers = {**self._headers, **(kwargs.pop("headers", None) or {})}
        resp = await client.request(method, url, headers=headers, **kwargs)
        resp.raise_for_status()
        return resp

    async def _fetch(self, url: str, *, context: str = "", **kwargs: Any) -> httpx.Response:
        """Fetch an absolute *url* with retries.

        Raises:
            ProviderTimeout: every attempt timed out.
            ProviderUnavailable: the last attempt failed for another reason.
        """
        last_exc: Exception | None = None
        timed_out = True
        for attempt in range(1, self._retries + 1):
            try:
                return await self._get_once(url, **kwargs)
            except httpx.TimeoutException as exc:
                last_exc = exc
            except httpx.HTTPError as exc:
                last_exc = exc
                timed_out = False
            self._log.debug(
                f"{self.name}_attempt_failed",
                url=url,
                attempt=attempt,
                context=context,
                error=str(last_exc),
            )
            if attempt < self._retries:
                await asyncio.sleep(self._retry_delay)

        if timed_out:
            raise ProviderTimeout(f"{self.name}: timeout fetching {url}") from last_exc
        raise ProviderUnavailable(f"{self.name}: {last_exc}") from last_exc

    async def _fetch_mirrored(
        self, path: str, *, context: str = "", **kwargs: Any
    ) -> httpx.Response:
        """Fetch *path* from the current mirror, rotating on failure.

        The mirror that answers becomes the starting point for the next
        call. Raises ProviderUnavailable once every mirror has failed
        (ProviderTimeout if every mirror timed out).
        """
        if not self._domains:
            raise ProviderUnavailable(f"{self.name}: no domains configured")

        all_timeouts = True
        count = len(self._domains)
        for _ in range(count):
            url = f"{self.base_url}{path}"
            try:
                return await self._fetch(url, context=context, **kwargs)
            except ProviderTimeout:
                pass
            except ProviderUnavailable:
                all_timeouts = False
            failed = self._domains[self._mirror_index]
            self._mirror_index = (self._mirror_index + 1) % count
            if count > 1:
                self._log.info(
                    f"{self.name}_mirror_rotated",
                    failed=failed,
                    next=self._domains[self._mirror_index],
                    context=context,
                )

        if all_timeouts:
            raise ProviderTimeout(f"{self.name}: all mirrors timed out")
        raise ProviderUnavailable(f"{self.name}: all mirrors failed")

    async def _safe_fetch(
        self,
        url: str,
        *,
        context: str = "",
        **kwargs: Any,
    ) -> httpx.Response | None:
        """Fetch *url* once with structured error logging. None on failure."""
        try:
            return await self._get_once(url, **kwargs)
        except httpx.TimeoutException:
            self._log.warning(f"{self.name}_timeout", url=url, context=context)
        except httpx.HTTPStatusError as exc:
            self._log.warning(
                f"{self.name}_http_error",
                url=url,
                status=exc.response.status_code,
                context=context,
            )
        except httpx.HTTPError as exc:
            self._log.warning(
                f"{self.name}_fetch_error", url=url, error=str(exc), context=context
            )
        return None

    def _parse_json(self, response: httpx.Response, context: str = "") -> Any:
        """Parse a JSON body or raise ProviderParseFailure."""
        try:
            return response.json()
        except (json.JSONDecodeError, ValueError) as exc:
            raise ProviderParseFailure(
                f"{self.name}: invalid JSON from {response.url} ({context})"
            ) from exc

    # ------------------------------------------------------------------
    # Public contract (error boundary)
    # ------------------------------------------------------------------

    async def search(self, term: str, limit: int | None = None) -> list[RawRecord]:
        """Search the upstream. Never raises for upstream failures; returns []."""
        term = term.strip()
        if not term:
            return []
        effective = limit if limit is not None else self._max_results
        try:
            records = await self._search(term, effective)
        except ProviderError as exc:
            self._log.warning(
                f"{self.name}_search_failed",
                term=term,
                error_type=type(exc).__name__,
                error=str(exc),
            )
            return []
        except Exception:  # noqa: BLE001
            self._log.warning(f"{self.name}_search_error", term=term, exc_info=True)
            return []

        self._log.info(f"{self.name}_search", term=term, count=len(records))
        return records[:effective]

    async def resolve(self, record: RawRecord) -> list[Link]:
        """Second-stage link lookup. Never raises for upstream failures."""
        if not record.detail_url:
            return []
        try:
            return await self._resolve(record)
        except ProviderError as exc:
            self._log.warning(
                f"{self.name}_resolve_failed",
                url=record.detail_url,
                error_type=type(exc).__name__,
                error=str(exc),
            )
        except Exception:  # noqa: BLE001
            self._log.warning(
                f"{self.name}_resolve_error", url=record.detail_url, exc_info=True
            )
        return []

    # ------------------------------------------------------------------
    # Subclass hooks
    # ------------------------------------------------------------------

    async def _search(self, term: str, limit: int) -> list[RawRecord]:
        """Subclasses **must** override this method."""
        raise NotImplementedError(f"{type(self).__name__}._search() not implemented")

    async def _resolve(self, record: RawRecord) -> list[Link]:
        return []
