from __future__ import annotations

import logging
from typing import Any, ClassVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)


class Provider:
    """OAuth provider as seen by the linking policy.

    Subclasses describe how the provider reports that the email address on
    a profile belongs to the person signing in.
    """

    id: ClassVar[str]
    name: ClassVar[str]
    profile_model: ClassVar[type[BaseModel] | None] = None

    def parse_profile(self, profile: dict[str, Any]) -> BaseModel | None:
        if self.profile_model is None:
            return None

        try:
            return self.profile_model.model_validate(profile)
        except ValidationError as e:
            logger.warning("Invalid %s profile", self.id, exc_info=e)
            return None

    def is_email_verified(self, profile: dict[str, Any]) -> bool:
        raise NotImplementedError
