"""Quick action catalog, keyed by a target's environment kind."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence

from panelterm.domain.models import QuickAction

logger = logging.getLogger(__name__)

_PATH_PREAMBLE = "export PATH=/usr/local/bin:/usr/bin:/bin:$PATH && "

DEFAULT_QUICK_ACTIONS: dict[str, list[QuickAction]] = {
    "laravel": [
        QuickAction(
            id="laravel-migrate",
            label="Migrate",
            command=f"{_PATH_PREAMBLE}/usr/local/bin/php artisan migrate --force",
            description="Run pending database migrations",
        ),
        QuickAction(
            id="laravel-optimize-clear",
            label="Clear Cache",
            command=f"{_PATH_PREAMBLE}/usr/local/bin/php artisan optimize:clear",
            description="Clear config, route and view caches",
        ),
        QuickAction(
            id="laravel-storage-link",
            label="Storage Link",
            command=f"{_PATH_PREAMBLE}/usr/local/bin/php artisan storage:link",
            description="Link public storage directory",
        ),
        QuickAction(
            id="laravel-composer-install",
            label="Composer Install",
            command=f"{_PATH_PREAMBLE}/usr/local/bin/composer install --no-dev --optimize-autoloader",
            description="Install PHP dependencies",
        ),
    ],
    "php": [
        QuickAction(
            id="php-composer-install",
            label="Composer Install",
            command=f"{_PATH_PREAMBLE}/usr/local/bin/composer install",
            description="Install PHP dependencies",
        ),
        QuickAction(
            id="php-version",
            label="PHP Version",
            command="/usr/local/bin/php -v",
            description="Show the PHP interpreter version",
        ),
    ],
    "node": [
        QuickAction(
            id="node-install",
            label="npm install",
            command="npm install",
            description="Install Node.js dependencies",
        ),
        QuickAction(
            id="node-build",
            label="npm run build",
            command="npm run build",
            description="Build production assets",
        ),
    ],
    "static": [
        QuickAction(
            id="static-list",
            label="List Files",
            command="ls -la",
            description="List files in the site directory",
        ),
    ],
}


class QuickActionCatalog:
    """Read-only lookup of quick actions by environment kind.

    Kinds are matched case-insensitively. Configured kinds replace the
    built-in set for that kind; other built-in kinds stay available.
    """

    def __init__(
        self,
        overrides: Mapping[str, Sequence[QuickAction]] | None = None,
        include_defaults: bool = True,
    ) -> None:
        actions: dict[str, tuple[QuickAction, ...]] = {}
        if include_defaults:
            actions.update({k: tuple(v) for k, v in DEFAULT_QUICK_ACTIONS.items()})
        for kind, items in (overrides or {}).items():
            actions[kind.lower()] = tuple(items)
        self._actions = actions
        logger.debug("Quick actions loaded for kinds: %s", ", ".join(sorted(actions)))

    @property
    def kinds(self) -> list[str]:
        return sorted(self._actions)

    def for_kind(self, environment_kind: str) -> list[QuickAction]:
        """Actions offered for ``environment_kind``; empty if unknown."""
        return list(self._actions.get(environment_kind.lower(), ()))
