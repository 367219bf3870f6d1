from __future__ import annotations

from typing import TypedDict

DEFAULT_LINK_PAGE = "/auth/linkaccount"
DEFAULT_SESSION_COOKIE_NAME = "session_id"


class Config(TypedDict, total=False):
    # Page that renders linking errors and success messages
    link_page: str

    # Create the user and its first account in a single transaction.
    # When False, the user is created first and the account afterwards,
    # so a failed account insert leaves the user row behind.
    atomic_sign_up: bool

    session_cookie_name: str

    # Shared secret the sign-in framework sends as a bearer token when it
    # posts an attempt to the callback route. Without it the route refuses
    # every request.
    callback_secret: str
