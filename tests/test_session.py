import json

import pytest

from domestika.config import Config, OSVariant, Strategy
from domestika.errors import ConfigError
from domestika.session import load_session


def write_cookies(tmp_path, data):
    path = tmp_path / "cookies.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_load_session_picks_the_session_cookie(tmp_path):
    path = write_cookies(
        tmp_path,
        [
            {"name": "locale", "value": "en"},
            {"name": "_domestika_session", "value": "abc123", "domain": ".domestika.org"},
        ],
    )

    credential = load_session(path)

    assert credential.value == "abc123"
    cookie = credential.as_cookie()
    assert cookie["name"] == "_domestika_session"
    assert cookie["domain"] == "www.domestika.org"
    assert cookie["path"] == "/"
    assert cookie["secure"] is True
    assert cookie["httpOnly"] is False


def test_missing_session_cookie_gives_empty_value(tmp_path):
    path = write_cookies(tmp_path, [{"name": "locale", "value": "en"}])

    credential = load_session(path)

    assert credential.value == ""
    assert credential.is_empty


def test_missing_session_cookie_is_fatal_when_strict(tmp_path):
    path = write_cookies(tmp_path, [])

    with pytest.raises(ConfigError):
        load_session(path, strict=True)


def test_missing_file_raises_config_error(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_session(tmp_path / "nope.json")


@pytest.mark.parametrize("content", ["{not json", '{"name": "_domestika_session"}'])
def test_invalid_file_raises_config_error(tmp_path, content):
    path = tmp_path / "cookies.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_session(path)


def test_config_validate_normalizes_strings():
    config = Config("https://www.domestika.org/x", os_variant="win", strategy="parallel").validate()

    assert config.os_variant is OSVariant.WIN
    assert config.strategy is Strategy.PARALLEL


@pytest.mark.parametrize(
    "kwargs",
    [
        {"os_variant": "linux"},
        {"strategy": "random"},
        {"max_parallel": 0},
        {"max_downloads": 0},
        {"subtitle_lang": ""},
    ],
)
def test_config_validate_rejects_bad_options(kwargs):
    with pytest.raises(ConfigError):
        Config("https://www.domestika.org/x", **kwargs).validate()


def test_config_validate_rejects_bad_url():
    with pytest.raises(ConfigError):
        Config("not-a-url").validate()
