"""Immutable per-call context carrying credentials and token type."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

from qnsdk.auth.credentials import Credentials, TokenType


@dataclass(frozen=True)
class RequestContext:
    """Values attached to a call; derive new contexts instead of mutating."""

    credentials: Credentials | None = None
    token_type: TokenType | None = None


def with_credentials(ctx: RequestContext | None, cred: Credentials) -> RequestContext:
    """Return a context that carries the given credentials."""
    return dataclasses.replace(ctx or RequestContext(), credentials=cred)


def with_credentials_type(
    ctx: RequestContext | None, cred: Credentials, token_type: TokenType
) -> RequestContext:
    """Return a context that carries credentials and a token type."""
    return dataclasses.replace(with_credentials(ctx, cred), token_type=token_type)


def credentials_from_context(
    ctx: RequestContext | None,
) -> tuple[Credentials | None, TokenType]:
    """Credentials (or None) and token type, which defaults to QBox."""
    ctx = ctx or RequestContext()
    token_type = ctx.token_type if ctx.token_type is not None else TokenType.QBOX
    return ctx.credentials, token_type