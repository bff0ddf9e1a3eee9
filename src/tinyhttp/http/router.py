"""
=============================================================================
URL ROUTER
=============================================================================

Maps (method, path) pairs to handler functions.

Supports:
- Static paths: /, /user-agent
- Wildcard tails: /echo/*text, /files/*name
- Prefix wildcards, where the capture follows static text: /files*rest

=============================================================================
ROUTING FLOW
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                        ROUTING FLOW                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Incoming Request                                                   │
    │   GET /echo/abc                                                      │
    │        │                                                             │
    │        ▼                                                             │
    │   ┌─────────────────────────────────────────────────────────────┐   │
    │   │  ROUTER (checked top to bottom, first match wins)           │   │
    │   │  ┌────────────────────────────────────────────────────────┐ │   │
    │   │  │ GET  /             → index                             │ │   │
    │   │  │ GET  /user-agent   → user_agent                        │ │   │
    │   │  │ GET  /echo/*text   → echo          ← MATCH!            │ │   │
    │   │  │ GET  /files/*name  → files.serve                       │ │   │
    │   │  │ POST /files*rest   → files.upload                      │ │   │
    │   │  └────────────────────────────────────────────────────────┘ │   │
    │   │                                                              │   │
    │   │  Extracted: path_params = {"text": "abc"}                   │   │
    │   └─────────────────────────────────────────────────────────────┘   │
    │        │                                                             │
    │        ▼                                                             │
    │   echo(request)                                                      │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
ROUTE PATTERNS
=============================================================================

1. STATIC PATHS: exact string match, byte for byte

   Pattern: /user-agent
   Matches: /user-agent
   Doesn't match: /user-agent/, /User-Agent, /user-agent?x=1

2. WILDCARD (*name): captures the rest of the path, "/" included,
   possibly empty. Must come last.

   Pattern: /echo/*text
   Matches: /echo/abc   → {"text": "abc"}
            /echo/a/b   → {"text": "a/b"}
            /echo/      → {"text": ""}
   Doesn't match: /echo

3. PREFIX WILDCARD: *name after static text in the same segment

   Pattern: /files*rest
   Matches: /files      → {"rest": ""}
            /files/a    → {"rest": "/a"}
            /filesx     → {"rest": "x"}

=============================================================================
NO NORMALIZATION
=============================================================================

The request path is matched exactly as it appeared on the request line.
No trailing-slash stripping, no percent-decoding, no query splitting:

    GET /echo/a%20b    → text = "a%20b"
    GET /?x=1          → 404 (not the greeting)

=============================================================================
UNMATCHED REQUESTS
=============================================================================

    Method has no routes at all ("PUT", "DELETE", ...)
        → UnsupportedMethodError   → 405, bare status line

    Method is routed, path is not
        → UnmatchedRouteError      → 404, body "Path not found\\n"

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Callable, Optional, Dict, List
import re

from .errors import UnmatchedRouteError, UnsupportedMethodError
from .request import HTTPRequest
from .response import HTTPResponse


# Type alias for handler functions
Handler = Callable[[HTTPRequest], HTTPResponse]


@dataclass
class Route:
    """
    Represents a registered route.

    =========================================================================
    ANATOMY OF A ROUTE
    =========================================================================

        @router.get("/echo/*text")
        def echo(request):
            ...

        Route(
            path="/echo/*text",          # URL pattern
            method="GET",                 # HTTP method
            handler=echo,                 # Handler function
            _pattern=<compiled>,          # ^/echo/(?P<text>.*)$
            _param_names=["text"]         # Capture names, in order
        )

    =========================================================================
    """

    path: str                        # URL pattern (e.g., /echo/*text)
    method: str                      # HTTP method, upper case
    handler: Handler                 # Handler function to call

    # Internal: compiled regex pattern for matching
    _pattern: Optional[re.Pattern] = field(default=None, repr=False)
    # Internal: ordered list of capture names in pattern
    _param_names: List[str] = field(default_factory=list, repr=False)


@dataclass
class RouteMatch:
    """
    Result of a successful route match.

    Example:
        Pattern: /files/*name
        Path:    /files/notes.txt
        Result:  RouteMatch(route=<Route>, params={"name": "notes.txt"})
    """
    route: Route                     # The Route that matched
    params: Dict[str, str]           # Extracted path parameters


class Router:
    """
    Ordered table of routes with first-match-wins dispatch.

    Routes are registered with decorators or add_route():

        router = Router()

        @router.get("/")
        def index(request):
            return greeting()

        router.add_route("/files*rest", files.upload, method="POST")

    Registration order is precedence order. handle() injects the captures
    into request.path_params before calling the handler.
    """

    def __init__(self):
        self._routes: List[Route] = []     # All registered routes, in order

    # =========================================================================
    # ROUTE REGISTRATION
    # =========================================================================

    def add_route(self, path: str, handler: Handler, method: str = "GET") -> Route:
        """
        Register a route.

        Args:
            path: URL pattern (e.g., /files/*name)
            handler: Handler function that takes request, returns response
            method: HTTP method the route answers

        Returns:
            The registered Route object

        Raises:
            ValueError: If a wildcard is not the last part of the pattern.
        """
        pattern, param_names = self._compile_pattern(path)

        route = Route(
            path=path,
            method=method.upper(),
            handler=handler,
            _pattern=pattern,
            _param_names=param_names,
        )

        self._routes.append(route)
        return route

    def _compile_pattern(self, path: str) -> tuple[re.Pattern, List[str]]:
        """
        Compile a path pattern into an anchored regex.

        =====================================================================
        PATTERN COMPILATION
        =====================================================================

        Input:  "/files*rest"

        Step 1: Split by "/", keeping empty segments
                ["", "files*rest"]

        Step 2: Process each segment
                ""           → ""                         (leading slash)
                "files*rest" → files(?P<rest>.*)          (prefix wildcard)

        Step 3: Join with "/" and add anchors
                ^/files(?P<rest>.*)$

        =====================================================================

        Returns:
            Tuple of (compiled regex, list of parameter names)
        """
        param_names: List[str] = []
        regex_segments: List[str] = []

        segments = path.split("/")
        for i, segment in enumerate(segments):
            if "*" in segment:
                # "files*rest" → files(?P<rest>.*), everything remaining
                if i != len(segments) - 1:
                    raise ValueError(f"Wildcard must be last in pattern: {path}")
                prefix, _, param_name = segment.partition("*")
                param_name = param_name or "wildcard"
                param_names.append(param_name)
                regex_segments.append(f"{re.escape(prefix)}(?P<{param_name}>.*)")

            else:
                regex_segments.append(re.escape(segment))

        # DOTALL so a capture never stops short at an odd byte
        pattern = re.compile("^" + "/".join(regex_segments) + "$", re.DOTALL)
        return pattern, param_names

    # =========================================================================
    # ROUTE MATCHING
    # =========================================================================

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """
        Find the first route for this method whose pattern matches the path.

        Returns:
            RouteMatch if found, None otherwise
        """
        for route in self._routes:
            if route.method != method:
                continue

            if route._pattern:
                match = route._pattern.match(path)
                if match:
                    return RouteMatch(route=route, params=match.groupdict())

        return None

    @property
    def methods(self) -> List[str]:
        """Methods with at least one registered route, sorted."""
        return sorted({route.method for route in self._routes})

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Route a request to its handler.

        Raises:
            UnsupportedMethodError: No route exists for the method (405).
            UnmatchedRouteError: The method is routed, the path is not (404).
            HTTPError: Whatever the handler raises.
        """
        match = self.match(request.method, request.path)

        if match:
            # Handler reads captures via request.path_params
            request.path_params = match.params
            return match.route.handler(request)

        if request.method not in self.methods:
            raise UnsupportedMethodError(f"Method not allowed: {request.method}")

        raise UnmatchedRouteError(f"No route matches {request.path}")

    # =========================================================================
    # DECORATOR-STYLE ROUTE REGISTRATION
    # =========================================================================

    def route(self, path: str, method: str = "GET") -> Callable[[Handler], Handler]:
        """
        Decorator for registering routes.

        Usage:
            @router.route("/user-agent", method="GET")
            def user_agent(request):
                ...
        """
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method)
            return handler  # Return handler unchanged (allows stacking decorators)
        return decorator

    def get(self, path: str) -> Callable[[Handler], Handler]:
        """Register a GET route."""
        return self.route(path, "GET")

    def post(self, path: str) -> Callable[[Handler], Handler]:
        """Register a POST route."""
        return self.route(path, "POST")

    # =========================================================================
    # INTROSPECTION
    # =========================================================================

    @property
    def routes(self) -> List[Route]:
        """All registered routes, in precedence order."""
        return list(self._routes)

    def describe(self) -> List[str]:
        """
        One line per route, for startup logging.

            GET      /
            GET      /user-agent
            POST     /files*rest
        """
        return [f"{route.method:8} {route.path}" for route in self._routes]
