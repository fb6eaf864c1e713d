"""Fastify hooks and Koa middleware -> AuthorizationInfo."""

from __future__ import annotations

from collections.abc import Sequence

from apiposture.authorization.patterns import (
    FASTIFY_HOOK_TABLE,
    KOA_MIDDLEWARE_TABLE,
    NamePatternTable,
)
from apiposture.models.endpoint import AuthorizationDraft, AuthorizationInfo


class HookAuthExtractor:
    """Any name the table recognizes marks the route authenticated and is kept as a guard."""

    def __init__(self, table: NamePatternTable) -> None:
        self.table = table

    def apply(self, names: Sequence[str], auth: AuthorizationDraft) -> AuthorizationDraft:
        auth.middleware_chain.extend(names)
        for name in names:
            if self.table.classify(name) is not None:
                auth.is_authenticated = True
                auth.guard_names.append(name)
        return auth

    def extract(self, names: Sequence[str]) -> AuthorizationInfo:
        return self.apply(names, AuthorizationDraft()).freeze()


def fastify_hook_extractor() -> HookAuthExtractor:
    return HookAuthExtractor(FASTIFY_HOOK_TABLE)


def koa_middleware_extractor() -> HookAuthExtractor:
    return HookAuthExtractor(KOA_MIDDLEWARE_TABLE)
