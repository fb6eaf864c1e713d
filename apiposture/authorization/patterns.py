"""Name-pattern tables — what a middleware, hook, guard or decorator name means."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum


class NameCategory(str, Enum):
    PUBLIC = "public"
    AUTHENTICATION = "authentication"
    ROLE = "role"
    POLICY = "policy"
    KEYWORD = "keyword"


_CALL_ARGS = re.compile(r"\(.*\)", re.DOTALL)
_QUOTED = re.compile(r"""(['"`])(.*?)\1""", re.DOTALL)


def strip_call(name: str) -> str:
    """``requireRole('admin')`` -> ``requireRole``."""
    return _CALL_ARGS.sub("", name).strip()


def last_segment(name: str) -> str:
    """Function name without its object prefix: ``passport.authenticate`` -> ``authenticate``."""
    return name.rsplit(".", 1)[-1]


@dataclass(frozen=True)
class PatternEntry:
    category: NameCategory
    patterns: tuple[re.Pattern[str], ...]
    # Match against the last dotted segment instead of the whole name
    segment_only: bool = True

    def matches(self, name: str) -> bool:
        target = last_segment(name) if self.segment_only else name
        return any(p.search(target) for p in self.patterns)


class NamePatternTable:
    """Ordered (category, patterns) entries; the first matching entry wins."""

    def __init__(self, entries: list[PatternEntry]) -> None:
        self.entries = entries

    def classify(self, name: str) -> NameCategory | None:
        bare = strip_call(name)
        if not bare:
            return None
        for entry in self.entries:
            if entry.matches(bare):
                return entry.category
        return None


def _exact(*names: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(rf"^{re.escape(n)}$", re.I) for n in names)


def _contains(*words: str) -> tuple[re.Pattern[str], ...]:
    return tuple(re.compile(re.escape(w), re.I) for w in words)


EXPRESS_PUBLIC_NAMES = ("allowAnonymous", "public", "skipAuth", "noAuth", "optional")

EXPRESS_AUTH_NAMES = (
    "jwt", "expressjwt", "requireAuth", "ensureAuthenticated", "isAuthenticated",
    "authenticate", "authMiddleware", "checkAuth", "verifyToken", "validateToken",
    "bearerToken", "auth", "protected",
)

EXPRESS_ROLE_NAMES = ("requireRole", "hasRole", "roles", "checkRole", "authorize", "can", "permit")

AUTH_KEYWORDS = ("auth", "jwt", "token", "session", "login", "secure")

_EXPRESS_AUTH_ENTRY = PatternEntry(NameCategory.AUTHENTICATION, _exact(*EXPRESS_AUTH_NAMES))

EXPRESS_MIDDLEWARE_TABLE = NamePatternTable([
    PatternEntry(NameCategory.PUBLIC, _exact(*EXPRESS_PUBLIC_NAMES)),
    _EXPRESS_AUTH_ENTRY,
    PatternEntry(NameCategory.ROLE, _exact(*EXPRESS_ROLE_NAMES)),
    PatternEntry(NameCategory.KEYWORD, _contains(*AUTH_KEYWORDS), segment_only=False),
])

FASTIFY_HOOK_TABLE = NamePatternTable([
    PatternEntry(
        NameCategory.AUTHENTICATION,
        _contains("authenticate", "verify", "jwt", "auth", "guard", "protected"),
        segment_only=False,
    ),
])

KOA_MIDDLEWARE_TABLE = NamePatternTable([
    PatternEntry(
        NameCategory.AUTHENTICATION,
        _contains("authenticate", "auth", "jwt", "passport", "protect", "guard", "verify"),
        segment_only=False,
    ),
])

NEST_AUTH_GUARD_TABLE = NamePatternTable([
    PatternEntry(
        NameCategory.AUTHENTICATION,
        _contains(
            "AuthGuard", "JwtAuthGuard", "LocalAuthGuard", "SessionGuard", "BearerGuard",
            "TokenGuard",
        ),
        segment_only=False,
    ),
])

NEST_PUBLIC_DECORATORS = ("Public", "AllowAnonymous", "SkipAuth", "NoAuth", "IsPublic")
NEST_ROLE_DECORATORS = ("Roles", "RequireRoles", "HasRoles", "Authorize")
NEST_POLICY_DECORATORS = ("Policies", "RequirePolicies", "CheckPolicies")

# Decorator names are case-sensitive in TypeScript
NEST_DECORATOR_TABLE = NamePatternTable([
    PatternEntry(
        NameCategory.PUBLIC,
        tuple(re.compile(rf"^{n}$") for n in NEST_PUBLIC_DECORATORS),
    ),
    PatternEntry(
        NameCategory.ROLE,
        tuple(re.compile(rf"^{n}$") for n in NEST_ROLE_DECORATORS),
    ),
    PatternEntry(
        NameCategory.POLICY,
        tuple(re.compile(rf"^{n}$") for n in NEST_POLICY_DECORATORS),
    ),
])


def extract_roles(name: str) -> list[str]:
    """Role names carried by a role middleware name.

    ``requireRole('admin')`` -> ["admin"]; ``hasRole(['user', 'admin'])`` ->
    ["user", "admin"]; ``acl.permit`` -> ["permit"]. Quoted literals inside the
    call win over the dotted-segment fallback.
    """
    call = _CALL_ARGS.search(name)
    if call:
        roles = [m.group(2).strip() for m in _QUOTED.finditer(call.group(0))]
        roles = [r for r in roles if r]
        if roles:
            return roles

    bare = strip_call(name)
    if "." in bare:
        tail = last_segment(bare)
        if _EXPRESS_AUTH_ENTRY.matches(tail):
            return []
        return [tail]
    return []
