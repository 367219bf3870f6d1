"""Account linking endpoints.

- POST /sign-in/callback - Decide on an OAuth sign-in attempt
- GET /linked-accounts - List linked and linkable providers of the current user
"""

import logging
import secrets

from cross_web import AsyncHTTPRequest
from pydantic import ValidationError

from ._context import Context
from ._decision import ACCOUNT_LINKED_MESSAGE, Allow, Deny, RedirectWithReason
from ._policy import decide_sign_in
from ._route import Route
from .models.sign_in import SignInAttempt
from .utils._redirect import build_link_page_url
from .utils._response import Response

logger = logging.getLogger(__name__)


class LinkManager:
    """Manager for the account linking routes."""

    def _is_trusted_caller(self, request: AsyncHTTPRequest, context: Context) -> bool:
        secret = context.callback_secret

        if not secret:
            logger.error("Sign in callback called but no callback secret is configured")
            return False

        authorization = request.headers.get("Authorization", "")
        scheme, _, token = authorization.partition(" ")

        if scheme.lower() != "bearer" or not token:
            logger.warning("Sign in callback called without credentials")
            return False

        return secrets.compare_digest(token.encode(), secret.encode())

    async def sign_in_callback(
        self, request: AsyncHTTPRequest, context: Context
    ) -> Response:
        """Run the linking policy for the attempt described in the body.

        Only the sign-in framework may call this route, authenticated with
        ``Authorization: Bearer <callback_secret>``. Returns 401 otherwise.

        Request body:
            - account: provider credential (provider, provider_account_id, tokens)
            - profile: claims reported by the provider
            - user: candidate user matched or synthesized by the framework
        """
        if not self._is_trusted_caller(request, context):
            return Response.error(
                "unauthorized",
                error_description="Invalid callback credentials",
                status_code=401,
            )

        try:
            body = await request.get_body()
            attempt = SignInAttempt.model_validate_json(body)
        except ValidationError as e:
            logger.warning("Invalid sign in attempt: %s", e)
            return Response.error(
                "invalid_request",
                error_description="Invalid request body",
                status_code=400,
            )

        session = context.get_session_from_request(request)
        decision = decide_sign_in(attempt, context, session)

        if isinstance(decision, RedirectWithReason):
            return Response.found(
                build_link_page_url(context.link_page, error=decision.detail)
            )

        if isinstance(decision, Deny):
            return Response.error(
                "access_denied",
                error_description=decision.reason.value,
                status_code=403,
            )

        assert isinstance(decision, Allow)

        if decision.link:
            try:
                context.accounts_storage.create_account(
                    user_id=decision.user_id, **attempt.account.account_fields()
                )
            except Exception as e:
                logger.error(
                    "Failed to link %s account to user %s",
                    attempt.account.provider,
                    decision.user_id,
                    exc_info=e,
                )
                return Response.error(
                    "access_denied",
                    error_description="persistence_failure",
                    status_code=403,
                )

        if session is None:
            return Response.json_body(
                {"result": "allow", "user_id": str(decision.user_id)}
            )

        provider = context.get_provider(attempt.account.provider)
        provider_name = provider.name if provider else attempt.account.provider

        return Response.found(
            build_link_page_url(
                context.link_page,
                message=ACCOUNT_LINKED_MESSAGE.format(provider=provider_name),
            )
        )

    async def linked_accounts(
        self, request: AsyncHTTPRequest, context: Context
    ) -> Response:
        """List the providers linked to the current user and those still available.

        Returns 401 if not authenticated via session.
        """
        session = context.get_session_from_request(request)

        if not session:
            return Response.error(
                "unauthorized",
                error_description="Not authenticated",
                status_code=401,
            )

        accounts = context.accounts_storage.find_accounts_by_user(session.user_id)
        linked = sorted({account.provider for account in accounts})

        available = [
            {"id": provider.id, "name": provider.name}
            for provider in context.providers.values()
            if provider.id not in linked
        ]

        return Response.json_body(
            {
                "user_id": str(session.user_id),
                "linked": linked,
                "available": available,
            }
        )

    @property
    def routes(self) -> list[Route]:
        """Return the account linking routes."""
        return [
            Route(
                path="/sign-in/callback",
                methods=["POST"],
                function=self.sign_in_callback,
                operation_id="sign_in_callback",
                summary="Decide on an OAuth sign-in attempt",
            ),
            Route(
                path="/linked-accounts",
                methods=["GET"],
                function=self.linked_accounts,
                operation_id="linked_accounts",
                summary="List linked and linkable providers",
            ),
        ]
