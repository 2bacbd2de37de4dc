"""
Loads the persisted Domestika session cookie exported from a browser.
"""
from pathlib import Path

from .constants import SESSION_COOKIE_NAME
from .errors import ConfigError
from .helpers import read_json
from .logger import Logger
from .models import SessionCredential


def load_session(path: str | Path, strict: bool = False) -> SessionCredential:
    """
    Read a JSON list of ``{name, value}`` cookie records and build the session
    credential from the one named ``_domestika_session``.

    A missing record yields a credential with an empty value; pages still load
    but render no course data. Pass ``strict=True`` to fail instead.

    :param path(str | Path): path to the exported cookies file
    :param strict(bool): raise on an empty session value
    :return SessionCredential: the credential to inject in the browser
    :raises ConfigError: if the file is missing, is not JSON or is not a list
    """
    path = Path(path)

    try:
        records = read_json(path)
    except FileNotFoundError:
        raise ConfigError(f"Cookies file not found: {path}")
    except (OSError, ValueError) as e:
        raise ConfigError(f"Could not read cookies file {path}: {e}")

    if not isinstance(records, list):
        raise ConfigError(f"Cookies file {path} must contain a list of cookie records")

    value = ""
    for record in records:
        if isinstance(record, dict) and record.get("name") == SESSION_COOKIE_NAME:
            value = str(record.get("value") or "")
            break

    credential = SessionCredential(SESSION_COOKIE_NAME, value)

    if credential.is_empty:
        if strict:
            raise ConfigError(f"No {SESSION_COOKIE_NAME} value found in {path}")
        Logger.warning(f"No {SESSION_COOKIE_NAME} cookie in {path}, pages will load logged out")

    return credential
