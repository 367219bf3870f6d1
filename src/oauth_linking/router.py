from collections.abc import Iterable

from cross_web import AsyncHTTPRequest
from fastapi import APIRouter, Request

from ._config import Config
from ._context import Context
from ._linking import LinkManager
from ._storage import AccountsStorage, Session, SessionStorage
from .social_providers import Provider


class LinkingRouter(APIRouter):
    _context: Context

    def __init__(
        self,
        accounts_storage: AccountsStorage,
        session_storage: SessionStorage,
        providers: Iterable[Provider] | None = None,
        config: Config | None = None,
    ):
        super().__init__()

        self.link_manager = LinkManager()

        self._context = Context(
            accounts_storage=accounts_storage,
            session_storage=session_storage,
            providers=providers,
            config=config,
        )

        for route in self.link_manager.routes:
            self.add_api_route(
                route.path,
                route.to_fastapi_endpoint(self._context),
                methods=route.methods,
                operation_id=route.operation_id,
                summary=route.summary,
            )

    def get_current_session(self, request: Request) -> Session | None:
        """Helper for apps that need the linking session outside these routes."""
        return self._context.get_session_from_request(
            AsyncHTTPRequest.from_fastapi(request)
        )
