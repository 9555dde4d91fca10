"""Unit tests for database URL handling in the database bootstrap."""

import pytest

from pazproperty.bootstrap.database import get_database_url, mask_password


class TestGetDatabaseUrl:
    def test_missing_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DATABASE_URL", raising=False)
        with pytest.raises(ValueError, match="DATABASE_URL"):
            get_database_url()

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("postgresql://u:p@db/paz", "postgresql+asyncpg://u:p@db/paz"),
            ("postgres://u:p@db/paz", "postgresql+asyncpg://u:p@db/paz"),
            ("postgresql+asyncpg://u:p@db/paz", "postgresql+asyncpg://u:p@db/paz"),
            ("sqlite+aiosqlite:///tmp/paz.db", "sqlite+aiosqlite:///tmp/paz.db"),
        ],
    )
    def test_async_driver_selected(
        self, monkeypatch: pytest.MonkeyPatch, raw: str, expected: str
    ) -> None:
        monkeypatch.setenv("DATABASE_URL", raw)
        assert get_database_url() == expected


class TestMaskPassword:
    def test_password_hidden(self) -> None:
        assert (
            mask_password("postgresql+asyncpg://paz:s3cret@db:5432/paz")
            == "postgresql+asyncpg://paz:***@db:5432/paz"
        )

    def test_url_without_credentials(self) -> None:
        assert mask_password("sqlite+aiosqlite:///tmp/paz.db") == (
            "sqlite+aiosqlite:///tmp/paz.db"
        )
