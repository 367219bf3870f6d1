import json
from typing import Any, Self

from cross_web import Response as BaseResponse


class Response(BaseResponse):
    @classmethod
    def json_body(cls, data: dict[str, Any], status_code: int = 200) -> Self:
        return cls(
            status_code=status_code,
            body=json.dumps(data),
            headers={"Content-Type": "application/json"},
        )

    @classmethod
    def error(
        cls,
        error: str,
        error_description: str | None = None,
        status_code: int = 400,
    ) -> Self:
        body = {"error": error}

        if error_description:
            body["error_description"] = error_description

        return cls.json_body(body, status_code=status_code)

    @classmethod
    def found(cls, location: str) -> Self:
        return cls(status_code=302, body="", headers={"Location": location})
