from collections.abc import Iterable

from cross_web import AsyncHTTPRequest

from ._config import DEFAULT_LINK_PAGE, DEFAULT_SESSION_COOKIE_NAME, Config
from ._storage import AccountsStorage, Session, SessionStorage
from .social_providers import Provider, default_providers


class Context:
    def __init__(
        self,
        accounts_storage: AccountsStorage,
        session_storage: SessionStorage,
        providers: Iterable[Provider] | None = None,
        config: Config | None = None,
    ):
        self.accounts_storage = accounts_storage
        self.session_storage = session_storage
        self.providers: dict[str, Provider] = {
            provider.id: provider
            for provider in (
                providers if providers is not None else default_providers()
            )
        }
        self.config: Config = config or {}

    @property
    def link_page(self) -> str:
        return self.config.get("link_page", DEFAULT_LINK_PAGE)

    @property
    def atomic_sign_up(self) -> bool:
        return self.config.get("atomic_sign_up", True)

    @property
    def session_cookie_name(self) -> str:
        return self.config.get("session_cookie_name", DEFAULT_SESSION_COOKIE_NAME)

    @property
    def callback_secret(self) -> str | None:
        return self.config.get("callback_secret")

    def get_provider(self, provider_id: str) -> Provider | None:
        return self.providers.get(provider_id)

    def get_session_from_request(self, request: AsyncHTTPRequest) -> Session | None:
        session_id = request.cookies.get(self.session_cookie_name)

        if not session_id:
            return None

        return self.session_storage.get_session(session_id)
