"""route2ingress — translate route traffic targets into an ingress routing spec.

Re-exports the public API. Custom domain resolvers can import from here
or from route2ingress.pacts.
"""

from route2ingress.pacts.types import (
    BackendSplit, Challenge, Defaults, HeaderMatch, HTTPIngressPath,
    IngressRule, IngressSpec, IngressTLS, NetworkConfig, RevisionTarget,
    Route, RouteContext, TrafficConfig, Visibility,
)
from route2ingress.pacts.domains import (
    DomainResolutionError, DomainResolver, TemplateDomainResolver,
)
from route2ingress.core.ingress import make_ingress_spec, make_ingress_tls

__all__ = [
    "BackendSplit",
    "Challenge",
    "Defaults",
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
    "make_ingress_spec",
    "make_ingress_tls",
]
