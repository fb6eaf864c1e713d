"""NestJS decorators -> AuthorizationInfo."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from apiposture.authorization.patterns import (
    NEST_AUTH_GUARD_TABLE,
    NEST_DECORATOR_TABLE,
    NameCategory,
)
from apiposture.models.endpoint import AuthorizationDraft, AuthorizationInfo

GUARD_DECORATOR = "UseGuards"


@dataclass
class DecoratorSpec:
    """What the discoverer could read off one decorator.

    ``strings`` holds string-literal arguments, with the elements of an
    array-literal argument flattened in place. ``guards`` holds guard class
    names (``JwtAuthGuard`` or the callee of ``AuthGuard('jwt')``).
    """

    name: str
    strings: list[str] = field(default_factory=list)
    guards: list[str] = field(default_factory=list)


@dataclass
class ClassAuthContext:
    guards: list[str] = field(default_factory=list)
    roles: list[str] = field(default_factory=list)
    is_public: bool = False


def is_auth_guard(name: str) -> bool:
    return NEST_AUTH_GUARD_TABLE.classify(name) is NameCategory.AUTHENTICATION


class NestJSAuthExtractor:
    """Class-level context first, then method decorators in declaration order."""

    table = NEST_DECORATOR_TABLE

    def class_context(self, decorators: Sequence[DecoratorSpec]) -> ClassAuthContext:
        ctx = ClassAuthContext()
        for dec in decorators:
            if dec.name == GUARD_DECORATOR:
                ctx.guards.extend(dec.guards)
                continue
            category = self.table.classify(dec.name)
            if category is NameCategory.ROLE:
                ctx.roles.extend(dec.strings)
            elif category is NameCategory.PUBLIC:
                ctx.is_public = True
        return ctx

    def extract(
        self,
        decorators: Sequence[DecoratorSpec],
        context: ClassAuthContext | None = None,
    ) -> AuthorizationInfo:
        auth = AuthorizationDraft()

        if context is not None:
            for guard in context.guards:
                if is_auth_guard(guard):
                    auth.is_authenticated = True
                    auth.guard_names.append(guard)
            if context.roles:
                auth.roles.extend(context.roles)
                auth.is_authenticated = True
            if context.is_public:
                auth.is_explicitly_public = True

        for dec in decorators:
            self._apply(dec, auth)
        return auth.freeze()

    def _apply(self, dec: DecoratorSpec, auth: AuthorizationDraft) -> None:
        if dec.name == GUARD_DECORATOR:
            for guard in dec.guards:
                if is_auth_guard(guard):
                    auth.is_authenticated = True
                auth.guard_names.append(guard)
            return

        category = self.table.classify(dec.name)
        if category is NameCategory.PUBLIC:
            # isAuthenticated is kept so a guarded class + public method stays detectable
            auth.is_explicitly_public = True
        elif category is NameCategory.ROLE:
            auth.roles.extend(dec.strings)
            if dec.strings:
                auth.is_authenticated = True
        elif category is NameCategory.POLICY:
            auth.policies.extend(dec.strings)
            if dec.strings:
                auth.is_authenticated = True
