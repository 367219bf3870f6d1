from typing import Generator

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from oauth_linking.router import LinkingRouter

from ..conftest import CALLBACK_SECRET, MemoryAccountsStorage, MemorySessionStorage


@pytest.fixture
def router(
    accounts_storage: MemoryAccountsStorage,
    session_storage: MemorySessionStorage,
) -> LinkingRouter:
    return LinkingRouter(
        accounts_storage=accounts_storage,
        session_storage=session_storage,
        config={
            "link_page": "/settings/accounts",
            "callback_secret": CALLBACK_SECRET,
        },
    )


@pytest.fixture
def test_app(router: LinkingRouter) -> FastAPI:
    app = FastAPI()
    app.include_router(router)

    @app.get("/whoami")
    def whoami(request: Request) -> dict:
        session = router.get_current_session(request)
        return {"user_id": session.user_id if session else None}

    return app


@pytest.fixture
def client(test_app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(test_app) as c:
        yield c
