"""Public data types — inputs to the builders and the ingress spec they produce."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum

from route2ingress.core.constants import (
    CLUSTER_DOMAIN, DEFAULT_DOMAIN, DEFAULT_DOMAIN_TEMPLATE,
    DEFAULT_REVISION_TIMEOUT_SECONDS, DEFAULT_TAG_TEMPLATE,
)


class Visibility(str, Enum):
    """Where an ingress rule is reachable from."""
    CLUSTER_LOCAL = "ClusterLocal"
    EXTERNAL_IP = "ExternalIP"


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RevisionTarget:
    """One weighted revision backend of a traffic target."""
    revision_name: str
    service_name: str
    protocol: str = ""
    percent: int | None = None
    timeout: timedelta | None = None


@dataclass(frozen=True)
class Route:
    """Identity of the route being translated."""
    name: str
    namespace: str
    labels: dict = field(default_factory=dict)
    annotations: dict = field(default_factory=dict)


@dataclass(frozen=True)
class TrafficConfig:
    """Targets keyed by tag name, plus the (partial) per-tag visibility map."""
    targets: dict[str, tuple[RevisionTarget, ...]] = field(default_factory=dict)
    visibility: dict[str, Visibility] = field(default_factory=dict)


@dataclass(frozen=True)
class Defaults:
    """Cluster defaults that feed path construction."""
    revision_timeout_seconds: int = DEFAULT_REVISION_TIMEOUT_SECONDS

    @property
    def revision_timeout(self) -> timedelta:
        return timedelta(seconds=self.revision_timeout_seconds)


@dataclass(frozen=True)
class NetworkConfig:
    """Network-wide settings read by the builders and the domain resolver.

    *domains* maps a domain suffix to the label selector a route must match
    to be served under it; an empty selector matches every route.
    """
    tag_header_based_routing: bool = False
    domain_template: str = DEFAULT_DOMAIN_TEMPLATE
    tag_template: str = DEFAULT_TAG_TEMPLATE
    cluster_domain: str = CLUSTER_DOMAIN
    domains: dict[str, dict] = field(default_factory=lambda: {DEFAULT_DOMAIN: {}})


@dataclass(frozen=True)
class RouteContext:
    """Read-only ambient configuration passed through a build."""
    network: NetworkConfig = field(default_factory=NetworkConfig)


@dataclass(frozen=True)
class Challenge:
    """An ACME HTTP-01 challenge and the backend that answers it."""
    host: str
    path: str
    service_namespace: str
    service_name: str
    service_port: int | str


# ---------------------------------------------------------------------------
# Ingress spec
# ---------------------------------------------------------------------------

class FrozenMap(Mapping):
    """Read-only, hashable mapping holding its own copy of the items."""
    __slots__ = ("_data",)

    def __init__(self, *args, **kwargs):
        self._data = dict(*args, **kwargs)

    def __getitem__(self, key):
        return self._data[key]

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def __hash__(self):
        return hash(frozenset(self._data.items()))

    def __repr__(self):
        return f"FrozenMap({self._data!r})"


def _freeze(obj, **fields) -> None:
    """Store *fields* on a frozen dataclass instance during __post_init__."""
    for name, value in fields.items():
        object.__setattr__(obj, name, value)


@dataclass(frozen=True)
class HeaderMatch:
    """Exact-match predicate on a request header."""
    exact: str


@dataclass(frozen=True)
class BackendSplit:
    """A weighted share of traffic sent to one backend service."""
    service_namespace: str
    service_name: str
    service_port: int | str
    percent: int
    append_headers: Mapping[str, str] = field(default_factory=FrozenMap)

    def __post_init__(self):
        _freeze(self, append_headers=FrozenMap(self.append_headers))


@dataclass(frozen=True)
class HTTPIngressPath:
    """One path of a rule. Paths are evaluated first-match, in list order."""
    splits: tuple[BackendSplit, ...] = ()
    headers: Mapping[str, HeaderMatch] = field(default_factory=FrozenMap)
    append_headers: Mapping[str, str] = field(default_factory=FrozenMap)
    timeout: timedelta | None = None
    path: str = ""

    def __post_init__(self):
        _freeze(self, splits=tuple(self.splits),
                headers=FrozenMap(self.headers),
                append_headers=FrozenMap(self.append_headers))


@dataclass(frozen=True)
class IngressRule:
    """Host-matching rule with its ordered paths."""
    hosts: tuple[str, ...]
    visibility: Visibility
    paths: tuple[HTTPIngressPath, ...] = ()

    def __post_init__(self):
        _freeze(self, hosts=tuple(self.hosts), paths=tuple(self.paths))


@dataclass(frozen=True)
class IngressTLS:
    """Certificate secret bound to a set of hosts (passed through untouched)."""
    hosts: tuple[str, ...] = ()
    secret_name: str = ""
    secret_namespace: str = ""

    def __post_init__(self):
        _freeze(self, hosts=tuple(self.hosts))


@dataclass(frozen=True)
class IngressSpec:
    """Declarative routing description consumed by the ingress implementation."""
    rules: tuple[IngressRule, ...] = ()
    tls: tuple[IngressTLS, ...] = ()

    def __post_init__(self):
        _freeze(self, rules=tuple(self.rules), tls=tuple(self.tls))
