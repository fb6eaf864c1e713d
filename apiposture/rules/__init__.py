"""Security rules AP001-AP008 and the engine that runs them."""

from apiposture.rules.base import SecurityRule
from apiposture.rules.consistency import ControllerActionConflict, MissingAuthOnWrites
from apiposture.rules.engine import RuleEngine, default_rules
from apiposture.rules.exposure import AllowAnonymousOnWrite, PublicWithoutExplicitIntent
from apiposture.rules.privilege import ExcessiveRoleAccess, WeakRoleNaming
from apiposture.rules.surface import SensitiveRouteKeywords, UnprotectedEndpoint

__all__ = [
    "AllowAnonymousOnWrite",
    "ControllerActionConflict",
    "ExcessiveRoleAccess",
    "MissingAuthOnWrites",
    "PublicWithoutExplicitIntent",
    "RuleEngine",
    "SecurityRule",
    "SensitiveRouteKeywords",
    "UnprotectedEndpoint",
    "WeakRoleNaming",
    "default_rules",
]
