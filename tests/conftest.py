"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from core.models import ReleaseRecord

NOW = datetime(2025, 6, 1, tzinfo=timezone.utc)


def release(number: str, days_ago: int, prerelease: bool = False) -> ReleaseRecord:
    """Build a ReleaseRecord published `days_ago` days before NOW."""
    return ReleaseRecord(
        number=number,
        prerelease=prerelease,
        created_at=NOW - timedelta(days=days_ago),
    )


@pytest.fixture
def make_release():
    """Factory for ReleaseRecord objects relative to NOW."""
    return release


@pytest.fixture
def now():
    """Fixed reference time for staleness checks."""
    return NOW


@pytest.fixture
def sample_gemfile():
    """Sample Gemfile content for testing."""
    return """source "https://rubygems.org"

gem "rails", "~> 7.0.4"
gem 'puma', '>= 5.0'
gem "bootsnap", require: false
# gem "redis", "~> 4.0"
gem "my_engine", path: "engines/my_engine"

group :development do
  gem "web-console"
end
"""


@pytest.fixture
def temp_gemfile(tmp_path):
    """Create a temporary Gemfile for testing."""
    gemfile = tmp_path / "Gemfile"
    gemfile.write_text('source "https://rubygems.org"\n\ngem "rails", "~> 6.1.0"\n')
    return gemfile
