"""Express middleware -> AuthorizationInfo."""

from __future__ import annotations

from collections.abc import Sequence

from apiposture.authorization.patterns import (
    EXPRESS_MIDDLEWARE_TABLE,
    NameCategory,
    extract_roles,
)
from apiposture.models.endpoint import AuthorizationDraft, AuthorizationInfo


class ExpressAuthExtractor:
    """Classifies a route's middleware chain, router-inherited middleware first."""

    table = EXPRESS_MIDDLEWARE_TABLE

    def extract(
        self,
        middlewares: Sequence[str],
        router_middlewares: Sequence[str] = (),
    ) -> AuthorizationInfo:
        chain = [*router_middlewares, *middlewares]
        auth = AuthorizationDraft(middleware_chain=chain)
        for middleware in chain:
            self._apply(middleware.strip(), auth)
        return auth.freeze()

    def _apply(self, name: str, auth: AuthorizationDraft) -> None:
        category = self.table.classify(name)
        if category is NameCategory.PUBLIC:
            auth.is_explicitly_public = True
        elif category in (NameCategory.AUTHENTICATION, NameCategory.KEYWORD):
            auth.is_authenticated = True
            auth.guard_names.append(name)
        elif category is NameCategory.ROLE:
            auth.is_authenticated = True
            auth.roles.extend(extract_roles(name))
