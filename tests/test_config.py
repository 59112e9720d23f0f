"""Tests for settings loading."""

from datetime import date

import pytest

from offdays.config import CATEGORY_ORDER, Category, Role, Settings


class TestSettings:

    def test_defaults(self):
        settings = Settings()
        assert settings.scheduled_off == "OFF"
        assert settings.scheduled_maybe_off == "MAYBE"
        assert settings.position_placeholder == ":position"
        assert settings.secondary_site_roles == (Role.RESIDENT,)

    def test_from_env_reads_timestamps_and_roles(self, monkeypatch):
        monkeypatch.setenv("BOUND_MIN_DATE", "2023-07-26T00:00:00Z")
        monkeypatch.setenv("BOUND_MAX_DATE", "2023-12-11T23:59:59Z")
        monkeypatch.setenv("SECONDARY_SITE_ROLES", "Intern, Resident")
        monkeypatch.setenv("SERVICE_BAYVIEW_ICU", "BV ICU")

        settings = Settings.from_env()

        assert settings.min_date == date(2023, 7, 26)
        assert settings.max_date == date(2023, 12, 11)
        assert settings.first_valid_date == date(2023, 7, 27)
        assert settings.secondary_site_roles == (Role.INTERN, Role.RESIDENT)
        assert settings.secondary_site_service == "BV ICU"

    def test_empty_secondary_roles_disables_site(self, monkeypatch):
        monkeypatch.setenv("SECONDARY_SITE_ROLES", "")
        assert Settings.from_env().secondary_site_roles == ()

    def test_block_type_and_format(self):
        settings = Settings(date_format="%d/%m/%Y")
        assert settings.block_type(True) == "A"
        assert settings.block_type(False) == "B"
        assert settings.format_date(date(2023, 4, 10)) == "10/04/2023"

    def test_category_order_puts_maybe_last(self):
        assert CATEGORY_ORDER == (Category.OFF, Category.MAYBE_OFF)
        assert Category.NOT_SURE.value == "likelyNotOff"

    def test_role_identifiers_from_env(self, monkeypatch):
        monkeypatch.setenv("ROLE_INTERN", "PGY1")
        monkeypatch.setenv("ROLE_RESIDENT", "PGY2")
        monkeypatch.setenv("SECONDARY_SITE_ROLES", "PGY2")

        settings = Settings.from_env()

        assert settings.role_name(Role.INTERN) == "PGY1"
        assert settings.role_for("PGY2") == Role.RESIDENT
        assert settings.role_for("Resident") is None
        assert settings.secondary_site_roles == (Role.RESIDENT,)

    def test_unknown_secondary_role_is_rejected(self, monkeypatch):
        monkeypatch.setenv("SECONDARY_SITE_ROLES", "Fellow")
        with pytest.raises(ValueError):
            Settings.from_env()

    @pytest.mark.parametrize("value", ["YYYY-MM-DD", "dd/mm/yyyy"])
    def test_date_format_must_be_strftime(self, monkeypatch, value):
        monkeypatch.setenv("FORMAT_DATE", value)
        with pytest.raises(ValueError) as info:
            Settings.from_env()
        assert "strftime" in str(info.value)

    def test_strftime_date_format_from_env(self, monkeypatch):
        monkeypatch.setenv("FORMAT_DATE", "%m/%d/%Y")
        assert Settings.from_env().format_date(date(2023, 4, 10)) == "04/10/2023"
