from __future__ import annotations

import json
from typing import Any, Literal, Type, TypeVar

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from accounts.core.responses import validation_issues

M = TypeVar("M", bound=BaseModel)
Location = Literal["body", "params", "query"]


async def _read(request: Request, location: Location) -> Any:
    if location == "params":
        return dict(request.path_params)
    if location == "query":
        return dict(request.query_params)
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        raise RequestValidationError(
            [{"loc": ["body"], "msg": "Malformed JSON body", "type": "json_invalid"}]
        )


def validate(schema: Type[M], location: Location = "body"):
    """
    Depends(validate(UserCreate)) → the parsed, normalized model.

    Handlers only ever see the schema's output (lower-cased emails, trimmed
    URLs, parsed dates). A failure becomes a 400 before the handler runs.
    """

    async def dependency(request: Request) -> M:
        data = await _read(request, location)
        try:
            return schema.model_validate(data)
        except ValidationError as exc:
            issues = validation_issues(exc.errors())
            for issue in issues:
                issue["loc"] = [location, *issue["loc"]]
            raise RequestValidationError(issues)

    dependency.__name__ = f"validate_{location}_{schema.__name__}"
    return dependency
