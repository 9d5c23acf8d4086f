import pytest

from feed_publisher.auth import is_authorized, requires_token


class TestIsAuthorized:
    def test_matching_bearer_token(self):
        assert is_authorized("Bearer s3cret", "s3cret") is True

    def test_missing_header(self):
        assert is_authorized(None, "s3cret") is False
        assert is_authorized("", "s3cret") is False

    def test_wrong_scheme(self):
        assert is_authorized("Basic s3cret", "s3cret") is False
        assert is_authorized("bearer s3cret", "s3cret") is False

    def test_wrong_token(self):
        assert is_authorized("Bearer nope", "s3cret") is False
        assert is_authorized("Bearer s3cret ", "s3cret") is False

    def test_empty_secret_never_matches(self):
        assert is_authorized("Bearer ", "") is False
        assert is_authorized("Bearer anything", "") is False


class TestRequiresToken:
    @pytest.mark.parametrize("method, path", [
        ("POST", "/items"),
        ("POST", "/broadcast"),
        ("POST", "/settings"),
        ("PUT", "/items/7"),
        ("DELETE", "/items/abc"),
    ])
    def test_guarded(self, method, path):
        assert requires_token(method, path) is True

    @pytest.mark.parametrize("method, path", [
        ("GET", "/items"),
        ("GET", "/settings"),
        ("GET", "/feed.xml"),
        ("OPTIONS", "/broadcast"),
        ("PUT", "/items"),
        ("POST", "/nope"),
    ])
    def test_open(self, method, path):
        assert requires_token(method, path) is False
