"""Public contracts — value types and the domain resolver interface."""

from route2ingress.pacts.types import (
    BackendSplit, Challenge, Defaults, FrozenMap, HeaderMatch, HTTPIngressPath,
    IngressRule, IngressSpec, IngressTLS, NetworkConfig, RevisionTarget,
    Route, RouteContext, TrafficConfig, Visibility,
)
from route2ingress.pacts.domains import (
    DomainResolutionError, DomainResolver, TemplateDomainResolver,
)

__all__ = [
    "BackendSplit",
    "Challenge",
    "Defaults",
    "FrozenMap",
    "HeaderMatch",
    "HTTPIngressPath",
    "IngressRule",
    "IngressSpec",
    "IngressTLS",
    "NetworkConfig",
    "RevisionTarget",
    "Route",
    "RouteContext",
    "TrafficConfig",
    "Visibility",
    "DomainResolutionError",
    "DomainResolver",
    "TemplateDomainResolver",
]
