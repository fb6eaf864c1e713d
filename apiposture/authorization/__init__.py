"""Authorization evidence extraction and name classification."""

from apiposture.authorization.express import ExpressAuthExtractor
from apiposture.authorization.global_auth import GlobalAuthAnalyzer
from apiposture.authorization.hooks import (
    HookAuthExtractor,
    fastify_hook_extractor,
    koa_middleware_extractor,
)
from apiposture.authorization.nestjs import ClassAuthContext, DecoratorSpec, NestJSAuthExtractor
from apiposture.authorization.patterns import NameCategory, NamePatternTable, extract_roles

__all__ = [
    "ClassAuthContext",
    "DecoratorSpec",
    "ExpressAuthExtractor",
    "GlobalAuthAnalyzer",
    "HookAuthExtractor",
    "NameCategory",
    "NamePatternTable",
    "NestJSAuthExtractor",
    "extract_roles",
    "fastify_hook_extractor",
    "koa_middleware_extractor",
]
