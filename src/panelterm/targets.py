"""Target directory: which tenant environments the operator may open.

Targets come either from static configuration or from the panel's site
API. The directory only lists and resolves targets; it does not decide
who may run what.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import httpx
from pydantic import TypeAdapter, ValidationError

from panelterm.domain.models import Target

logger = logging.getLogger(__name__)

SITES_PATH = "/api/sites"

_targets_adapter: TypeAdapter[list[Target]] = TypeAdapter(list[Target])


class TargetLookupError(Exception):
    """Raised when targets cannot be listed or a target id is unknown."""


class TargetDirectory:
    """Lists and resolves terminal targets."""

    def __init__(
        self,
        static_targets: Sequence[Target] = (),
        base_url: str | None = None,
        credential: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._static = list(static_targets)
        self._base_url = base_url.rstrip("/") if base_url else None
        self._credential = credential
        self._timeout = timeout
        self._transport = transport

    async def list_targets(self) -> list[Target]:
        """Return configured targets, or fetch them from the panel API."""
        if self._base_url is None:
            return list(self._static)
        headers = {"Accept": "application/json"}
        if self._credential:
            headers["Authorization"] = f"Bearer {self._credential}"
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                resp = await client.get(SITES_PATH, headers=headers)
                resp.raise_for_status()
        except httpx.HTTPError as e:
            raise TargetLookupError(f"Failed to list targets from {self._base_url}: {e}") from e
        try:
            targets = _targets_adapter.validate_python(resp.json())
        except (ValueError, ValidationError) as e:
            raise TargetLookupError(f"Unexpected target list payload: {e}") from e
        logger.info("Fetched %d targets from panel", len(targets))
        return targets

    async def get(self, target_id: str) -> Target:
        """Resolve ``target_id``.

        Raises:
            TargetLookupError: If the id is not among the listed targets.
        """
        for target in await self.list_targets():
            if target.id == target_id:
                return target
        raise TargetLookupError(f"Unknown target: {target_id}")
