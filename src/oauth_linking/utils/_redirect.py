from urllib.parse import quote

from .._decision import Allow, LinkDecision, RedirectWithReason

# Characters encodeURIComponent leaves untouched besides unreserved ones
_COMPONENT_SAFE = "!'()*"


def build_link_page_url(
    link_page: str, *, error: str | None = None, message: str | None = None
) -> str:
    """
    Build the URL of the linking page carrying an error or a success message.

    Messages may contain newlines, which the page renders as separate lines.
    """
    if error is not None:
        return f"{link_page}?error={quote(error, safe=_COMPONENT_SAFE)}"

    if message is not None:
        return f"{link_page}?message={quote(message, safe=_COMPONENT_SAFE)}"

    return link_page


def to_callback_result(decision: LinkDecision, link_page: str) -> bool | str:
    """Serialize a decision for the sign-in framework.

    ``True`` lets the framework create the session, ``False`` aborts the
    sign in and a string redirects the user to the linking page.
    """
    if isinstance(decision, Allow):
        return True

    if isinstance(decision, RedirectWithReason):
        return build_link_page_url(link_page, error=decision.detail)

    return False
