"""Tests for command display formatting."""

from __future__ import annotations

import pytest

from panelterm.terminal.formatter import DISPLAY_RULES, format_command


def _rule(name: str):
    return next(rule for rule in DISPLAY_RULES if rule.name == name)


class TestDisplayRules:
    def test_rule_order(self) -> None:
        assert [rule.name for rule in DISPLAY_RULES] == [
            "export-preamble",
            "interpreter-path",
            "package-manager-path",
            "framework-cli-path",
        ]

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("export PATH=/x && ls", "ls"),
            ("export PATH=/usr/local/bin:$PATH && git status", "git status"),
            ('export NODE_ENV="production" ; npm run build', "npm run build"),
            ("ls && export PATH=/x && pwd", "ls && export PATH=/x && pwd"),
        ],
    )
    def test_export_preamble(self, raw: str, expected: str) -> None:
        rule = _rule("export-preamble")
        assert rule.pattern.sub(rule.replacement, raw) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("/usr/local/bin/php artisan migrate", "php artisan migrate"),
            ("/usr/local/bin/php8.2 artisan migrate", "php artisan migrate"),
            ("/usr/bin/php81 -v", "php -v"),
            ("/usr/bin/php-fpm -t", "/usr/bin/php-fpm -t"),
        ],
    )
    def test_interpreter_path(self, raw: str, expected: str) -> None:
        rule = _rule("interpreter-path")
        assert rule.pattern.sub(rule.replacement, raw) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("/usr/local/bin/composer install", "composer install"),
            ("/opt/node/bin/npm ci", "npm ci"),
            ("composer install", "composer install"),
        ],
    )
    def test_package_manager_path(self, raw: str, expected: str) -> None:
        rule = _rule("package-manager-path")
        assert rule.pattern.sub(rule.replacement, raw) == expected

    def test_framework_cli_path(self) -> None:
        rule = _rule("framework-cli-path")
        raw = "php /var/www/shop/artisan queue:restart"
        assert rule.pattern.sub(rule.replacement, raw) == "php artisan queue:restart"


class TestFormatCommand:
    def test_full_chain(self) -> None:
        raw = "export PATH=/x && /usr/local/bin/php8.2 artisan migrate"
        assert format_command(raw) == "php artisan migrate"

    def test_rules_apply_to_previous_output(self) -> None:
        raw = "/usr/local/bin/php /var/www/shop/artisan tinker"
        assert format_command(raw) == "php artisan tinker"

    def test_unmatched_input_unchanged(self) -> None:
        assert format_command("ls -la") == "ls -la"
        assert format_command("") == ""

    def test_deterministic_and_does_not_touch_input(self) -> None:
        raw = "export PATH=/x && /usr/local/bin/composer install"
        copy = str(raw)
        assert format_command(raw) == format_command(raw) == "composer install"
        assert raw == copy
