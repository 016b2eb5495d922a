"""Declarative Routing — route/group descriptors and their registration into FastAPI.

Handler objects describe their endpoints with Route and GroupRouter descriptors.
The registrar finds those descriptors (capability interface first, method
signature discovery second), validates them, and binds each one as a FastAPI
route whose dependencies run the middleware/handler chain in order.

Invariants:
    - Route.validate() is pure: empty path or no handlers -> RouteValidationError
    - Bound chain order is middlewares then handlers, each in declaration order
    - Every chain element except the last runs as a dependency; the last is the endpoint
    - Paths are normalized to a leading "/" before binding
    - A group is validated in full before any of its routes is bound
    - routes()/groups() take precedence over per-method discovery

Design Decisions:
    - Chain elements are ordinary FastAPI dependencies: a middleware aborts by raising
    - Dependencies bound with use_cache=False so a repeated element runs at every position
    - Unrecognized methods bind as GET and log a warning
    - A discovery method may be annotated `-> Route | None`; returning None skips it
"""

import inspect
import logging
import types
import typing
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Iterator, Protocol, runtime_checkable

from fastapi import APIRouter, Depends, FastAPI

from app.core.errors import RouteRegistrationError, RouteValidationError

logger = logging.getLogger(__name__)

Handler = Callable[..., Any]
Engine = FastAPI | APIRouter


class Method(str, Enum):
    """HTTP methods a Route can be bound under."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"
    ANY = "ANY"


ANY_METHODS = [
    "GET", "POST", "PUT", "PATCH", "HEAD",
    "OPTIONS", "DELETE", "CONNECT", "TRACE",
]


@dataclass
class Route:
    """Single endpoint: method + path bound to a middleware/handler chain."""

    path: str
    method: Method | str = Method.GET
    handlers: list[Handler] = field(default_factory=list)
    middlewares: list[Handler] = field(default_factory=list)
    description: str = ""

    def handle(self, *handlers: Handler) -> "Route":
        self.handlers.extend(handlers)
        return self

    def use(self, *middlewares: Handler) -> "Route":
        self.middlewares.extend(middlewares)
        return self

    def with_description(self, description: str) -> "Route":
        self.description = description
        return self

    def validate(self) -> None:
        """Raise RouteValidationError if the route cannot be bound."""
        if not self.path:
            raise RouteValidationError("Route path cannot be empty")
        if not self.handlers:
            raise RouteValidationError("Route must have at least one handler")

    def chain(self) -> list[Handler]:
        return [*self.middlewares, *self.handlers]


@dataclass
class GroupRouter:
    """Routes sharing a path prefix and a middleware chain."""

    path: str
    routes: list[Route] = field(default_factory=list)
    middlewares: list[Handler] = field(default_factory=list)

    def use(self, *middlewares: Handler) -> "GroupRouter":
        self.middlewares.extend(middlewares)
        return self

    def add_route(self, route: Route) -> "GroupRouter":
        self.routes.append(route)
        return self


@runtime_checkable
class RoutesProvider(Protocol):
    """Handler object that lists its routes explicitly."""

    def routes(self) -> list[Route]: ...


@runtime_checkable
class GroupsProvider(Protocol):
    """Handler object that lists its route groups explicitly."""

    def groups(self) -> list[GroupRouter]: ...


# ─── Registration ───────────────────────────────────────────────

def register(engine: Engine, handler: object) -> None:
    """Bind every Route the handler object produces onto the engine.

    Raises RouteRegistrationError on the first invalid route; routes bound
    before it stay bound.
    """
    if _provides(handler, RoutesProvider, "routes"):
        source = f"{_handler_name(handler)}.routes"
        found = ((source, route) for route in handler.routes())
    else:
        found = _discover(handler, Route)

    for source, route in found:
        if route is None:
            continue
        try:
            route.validate()
        except RouteValidationError as exc:
            raise RouteRegistrationError(
                f"invalid route from {source}: {exc.message}", source,
            ) from exc
        _bind(engine, route)


def register_group(engine: Engine, handler: object) -> None:
    """Bind every GroupRouter the handler object produces onto the engine.

    Each group is all-or-nothing: its routes are validated before a
    sub-router is created for it.
    """
    if _provides(handler, GroupsProvider, "groups"):
        source = f"{_handler_name(handler)}.groups"
        found = ((source, group) for group in handler.groups())
    else:
        found = _discover(handler, GroupRouter)

    for source, group in found:
        if group is None:
            continue
        for route in group.routes:
            try:
                route.validate()
            except RouteValidationError as exc:
                raise RouteRegistrationError(
                    f"invalid route in group {group.path} from {source}: "
                    f"{exc.message}",
                    source, group_path=group.path,
                ) from exc

        router = APIRouter(
            prefix=_normalize_prefix(group.path),
            dependencies=_as_dependencies(group.middlewares),
        )
        for route in group.routes:
            _bind(router, route)
        engine.include_router(router)
        logger.info(
            f"Registered group {router.prefix or '/'} "
            f"({len(group.routes)} routes) from {source}",
        )


def must_register(engine: Engine, handler: object) -> None:
    """register(), terminating the process if a route is malformed."""
    try:
        register(engine, handler)
    except RouteRegistrationError as exc:
        logger.critical(f"Route registration failed: {exc.message}")
        raise SystemExit(1) from exc


def must_register_group(engine: Engine, handler: object) -> None:
    """register_group(), terminating the process if a route is malformed."""
    try:
        register_group(engine, handler)
    except RouteRegistrationError as exc:
        logger.critical(f"Route group registration failed: {exc.message}")
        raise SystemExit(1) from exc


# ─── Discovery ──────────────────────────────────────────────────

def _discover(handler: object, produces: type) -> Iterator[tuple[str, Any]]:
    """Yield (source, descriptor) from public zero-argument methods returning `produces`."""
    owner = _handler_name(handler)
    for name in sorted(dir(type(handler))):
        if name.startswith("_"):
            continue
        if not inspect.isfunction(inspect.getattr_static(handler, name)):
            continue
        method = getattr(handler, name)
        if not _returns_descriptor(method, produces):
            continue
        yield f"{owner}.{name}", method()


def _returns_descriptor(method: Callable, produces: type) -> bool:
    try:
        signature = inspect.signature(method, eval_str=True)
    except (NameError, TypeError, ValueError):
        return False
    if signature.parameters:
        return False
    annotation = _strip_optional(signature.return_annotation)
    # list[Route] and friends are not descriptors
    if isinstance(annotation, types.GenericAlias) or not inspect.isclass(annotation):
        return False
    return issubclass(annotation, produces)


def _strip_optional(annotation: Any) -> Any:
    """Route | None and Optional[Route] count as Route."""
    if typing.get_origin(annotation) not in (typing.Union, types.UnionType):
        return annotation
    args = [a for a in typing.get_args(annotation) if a is not type(None)]
    return args[0] if len(args) == 1 else annotation


def _provides(handler: object, protocol: type, method: str) -> bool:
    # runtime_checkable only checks the attribute exists
    return isinstance(handler, protocol) and callable(getattr(handler, method))


def _handler_name(handler: object) -> str:
    return type(handler).__qualname__


# ─── Binding ────────────────────────────────────────────────────

def _bind(engine: Engine, route: Route) -> None:
    *dependencies, endpoint = route.chain()
    engine.add_api_route(
        _normalize_path(route.path),
        endpoint,
        methods=_resolve_methods(route.method),
        dependencies=_as_dependencies(dependencies),
        summary=route.description or None,
    )


def _as_dependencies(chain: list[Handler]) -> list:
    return [Depends(element, use_cache=False) for element in chain]


def _resolve_methods(method: Method | str) -> list[str]:
    try:
        resolved = Method(method)
    except ValueError:
        logger.warning(f"Unrecognized HTTP method {method!r}, binding as GET")
        return [Method.GET.value]
    if resolved is Method.ANY:
        return list(ANY_METHODS)
    return [resolved.value]


def _normalize_path(path: str) -> str:
    return path if path.startswith("/") else "/" + path


def _normalize_prefix(path: str) -> str:
    prefix = path.rstrip("/")
    if prefix and not prefix.startswith("/"):
        prefix = "/" + prefix
    return prefix
