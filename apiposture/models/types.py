"""Enums shared across discovery, rules, and reporting."""

from __future__ import annotations

from enum import Enum


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    ALL = "ALL"

    @classmethod
    def parse(cls, value: str) -> HttpMethod | None:
        try:
            return cls(value.strip().upper())
        except ValueError:
            return None


WRITE_METHODS = frozenset({HttpMethod.POST, HttpMethod.PUT, HttpMethod.DELETE, HttpMethod.PATCH})


def is_write_method(method: HttpMethod) -> bool:
    return method in WRITE_METHODS


class Severity(str, Enum):
    INFO = "info"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @classmethod
    def parse(cls, value: str) -> Severity | None:
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


_SEVERITY_RANK: dict[Severity, int] = {
    Severity.INFO: 0,
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.CRITICAL: 4,
}


class SecurityClassification(str, Enum):
    """Ordered by how restrictive the evidence is, not by risk."""

    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    ROLE_RESTRICTED = "role-restricted"
    POLICY_RESTRICTED = "policy-restricted"

    @classmethod
    def parse(cls, value: str) -> SecurityClassification | None:
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


class FrameworkType(str, Enum):
    EXPRESS = "express"
    NESTJS = "nestjs"
    FASTIFY = "fastify"
    KOA = "koa"

    @classmethod
    def parse(cls, value: str) -> FrameworkType | None:
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None
