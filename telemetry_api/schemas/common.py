from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field, StringConstraints


def _not_blank(value: str) -> str:
    # Identifiers are opaque: reject whitespace-only ids but never rewrite them
    if not value.strip():
        raise ValueError("must not be blank")
    return value


UserId = Annotated[str, Field(min_length=1, max_length=128), AfterValidator(_not_blank)]


def FreeText(max_length: int, min_length: int = 0):
    return Annotated[str, StringConstraints(strip_whitespace=True, min_length=min_length, max_length=max_length)]


class Ack(BaseModel):
    success: bool = True
