"""Endpoint and authorization models produced by discovery."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field, computed_field

from apiposture.models.types import FrameworkType, HttpMethod, SecurityClassification


class SourceLocation(BaseModel):
    """1-based position of a discovered call or declaration."""

    model_config = ConfigDict(frozen=True)

    file_path: str
    line: int = 1
    column: int = 1

    def format(self) -> str:
        return f"{self.file_path}:{self.line}:{self.column}"


def determine_classification(
    is_authenticated: bool,
    roles: Sequence[str],
    policies: Sequence[str],
) -> SecurityClassification:
    """Derive the security tier. Explicit-public markers are deliberately not an input."""
    if policies:
        return SecurityClassification.POLICY_RESTRICTED
    if roles:
        return SecurityClassification.ROLE_RESTRICTED
    if is_authenticated:
        return SecurityClassification.AUTHENTICATED
    return SecurityClassification.PUBLIC


class AuthorizationInfo(BaseModel):
    """Normalized authorization evidence for one endpoint. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    is_authenticated: bool = False
    is_explicitly_public: bool = False
    roles: tuple[str, ...] = ()
    policies: tuple[str, ...] = ()
    middleware_chain: tuple[str, ...] = ()
    guard_names: tuple[str, ...] = ()

    @computed_field  # type: ignore[prop-decorator]
    @property
    def classification(self) -> SecurityClassification:
        return determine_classification(self.is_authenticated, self.roles, self.policies)


class AuthorizationDraft(BaseModel):
    """Mutable evidence the extractors fill in before freezing it for an Endpoint."""

    is_authenticated: bool = False
    is_explicitly_public: bool = False
    roles: list[str] = Field(default_factory=list)
    policies: list[str] = Field(default_factory=list)
    middleware_chain: list[str] = Field(default_factory=list)
    guard_names: list[str] = Field(default_factory=list)

    def freeze(self) -> AuthorizationInfo:
        return AuthorizationInfo(**self.model_dump())


class Endpoint(BaseModel):
    """One route + method + handler binding."""

    model_config = ConfigDict(frozen=True)

    route: str
    method: HttpMethod
    handler_name: str = "anonymous"
    controller_name: str | None = None
    framework: FrameworkType
    location: SourceLocation
    authorization: AuthorizationInfo = Field(default_factory=AuthorizationInfo)

    def display(self) -> str:
        return f"{self.method.value} {self.route}"
