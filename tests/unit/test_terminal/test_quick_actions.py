"""Tests for the quick action catalog."""

from __future__ import annotations

from panelterm.domain.models import QuickAction
from panelterm.terminal.formatter import format_command
from panelterm.terminal.quick_actions import DEFAULT_QUICK_ACTIONS, QuickActionCatalog


class TestQuickActionCatalog:
    def test_defaults_by_kind(self) -> None:
        catalog = QuickActionCatalog()
        assert "laravel" in catalog.kinds
        assert catalog.for_kind("Laravel") == DEFAULT_QUICK_ACTIONS["laravel"]

    def test_unknown_kind_is_empty(self) -> None:
        assert QuickActionCatalog().for_kind("cobol") == []

    def test_override_replaces_kind(self) -> None:
        custom = QuickAction(id="wp-cron", label="Cron", command="wp cron event run --due-now")
        catalog = QuickActionCatalog({"WordPress": [custom], "node": []})
        assert catalog.for_kind("wordpress") == [custom]
        assert catalog.for_kind("node") == []
        assert catalog.for_kind("laravel") != []

    def test_without_defaults(self) -> None:
        catalog = QuickActionCatalog(include_defaults=False)
        assert catalog.kinds == []

    def test_default_commands_have_short_display_forms(self) -> None:
        displays = [format_command(a.command) for a in DEFAULT_QUICK_ACTIONS["laravel"]]
        assert displays == [
            "php artisan migrate --force",
            "php artisan optimize:clear",
            "php artisan storage:link",
            "composer install --no-dev --optimize-autoloader",
        ]
