"""Unit tests for app.core.config: duration parsing and settings validation."""

import unittest
from datetime import timedelta

from pydantic import ValidationError

from app.core.config import Settings, parse_duration
from tests._support import make_settings


class TestParseDuration(unittest.TestCase):
    def test_units(self) -> None:
        self.assertEqual(parse_duration("900"), timedelta(seconds=900))
        self.assertEqual(parse_duration("30s"), timedelta(seconds=30))
        self.assertEqual(parse_duration("15m"), timedelta(minutes=15))
        self.assertEqual(parse_duration("12h"), timedelta(hours=12))
        self.assertEqual(parse_duration("7d"), timedelta(days=7))

    def test_rejects_malformed_or_zero(self) -> None:
        for bad in ("", "abc", "15 minutes", "-5m", "0"):
            with self.subTest(value=bad):
                with self.assertRaises(ValueError):
                    parse_duration(bad)


class TestSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        settings = Settings(
            _env_file=None,
            JWT_ACCESS_EXPIRES="15m",
            JWT_REFRESH_EXPIRES="7d",
            PORT=8000,
        )
        self.assertEqual(settings.access_token_ttl, timedelta(minutes=15))
        self.assertEqual(settings.refresh_token_ttl, timedelta(days=7))
        self.assertEqual(settings.PORT, 8000)

    def test_identical_secrets_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(
                JWT_ACCESS_SECRET="same-secret-value",
                JWT_REFRESH_SECRET="same-secret-value",
            )

    def test_non_postgres_or_sqlite_url_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(DATABASE_URL="mysql://root@localhost/db")

    def test_bad_duration_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(JWT_ACCESS_EXPIRES="soon")

    def test_bcrypt_rounds_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(BCRYPT_ROUNDS=3)

    def test_api_prefix_normalized(self) -> None:
        self.assertEqual(make_settings(API_PREFIX="/api/v1/").API_PREFIX, "/api/v1")
        with self.assertRaises(ValidationError):
            make_settings(API_PREFIX="api")


if __name__ == "__main__":
    unittest.main()
