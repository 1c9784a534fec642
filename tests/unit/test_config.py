"""
Unit tests for configuration.
"""

from gantz.config import (
    DEFAULT_ADMIN_EMAIL,
    get_admin_email,
    get_config,
    get_feed_page_size,
    get_home_links,
    is_development,
    is_production,
)


class TestConfig:
    def test_admin_email_default(self, monkeypatch):
        monkeypatch.delenv("ADMIN_EMAIL")
        get_config().clear_cache()

        assert get_admin_email() == DEFAULT_ADMIN_EMAIL

    def test_page_size(self, monkeypatch):
        assert get_feed_page_size() == 24

        monkeypatch.setenv("FEED_PAGE_SIZE", "12")
        get_config().clear_cache()
        assert get_feed_page_size() == 12

    def test_invalid_page_size_uses_default(self, monkeypatch):
        monkeypatch.setenv("FEED_PAGE_SIZE", "many")

        assert get_feed_page_size() == 24

    def test_environment_switch(self, monkeypatch):
        assert is_development() is True
        assert is_production() is False

        monkeypatch.setenv("ENVIRONMENT", "production")
        get_config().clear_cache()
        assert is_development() is False
        assert is_production() is True

    def test_home_links(self, monkeypatch):
        assert get_home_links() == [("푸슝", "https://pushoong.com")]

        monkeypatch.setenv("HOME_LINKS", "블로그|https://blog.example.com, broken ,깃허브|https://github.com/gantz")
        get_config().clear_cache()
        assert get_home_links() == [("블로그", "https://blog.example.com"), ("깃허브", "https://github.com/gantz")]
