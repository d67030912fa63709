"""Config loading — YAML route/traffic descriptor to typed builder inputs."""

import os
from datetime import timedelta
from urllib.parse import urlsplit

import yaml

from route2ingress.core.constants import DEFAULT_REVISION_TIMEOUT_SECONDS, SERVICE_PORTS
from route2ingress.core.ingress import make_ingress_tls
from route2ingress.pacts.types import (
    Challenge, Defaults, NetworkConfig, RevisionTarget, Route, RouteContext,
    TrafficConfig, Visibility,
)


class ConfigError(ValueError):
    """Raised when the route descriptor cannot be turned into builder inputs."""


def load_config(path: str) -> dict:
    """Load a route descriptor and fill in defaults."""
    if not os.path.exists(path):
        raise ConfigError(f"config file not found: {path}")
    with open(path, encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ConfigError(f"{path}: expected a mapping at the top level")
    # Empty sections ("defaults:" with nothing under it) load as None
    for key in ("route", "traffic", "defaults", "network"):
        if not cfg.get(key):
            cfg[key] = {}
        elif not isinstance(cfg[key], dict):
            raise ConfigError(f"{path}: '{key}' must be a mapping")
    cfg["defaults"].setdefault("revisionTimeoutSeconds", DEFAULT_REVISION_TIMEOUT_SECONDS)
    cfg["network"].setdefault("tagHeaderBasedRouting", False)
    if not cfg.get("domains"):
        cfg["domains"] = {"example.com": {}}
    for key in ("tls", "challenges"):
        if not cfg.get(key):
            cfg[key] = []
    return cfg


def _parse_int(value, what: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{what}: expected an integer, got {value!r}")
    return value


def _parse_target(entry: dict, tag: str, warnings: list[str]) -> RevisionTarget:
    """Parse one revision target entry of a traffic tag."""
    revision = entry.get("revisionName", "")
    if not revision:
        raise ConfigError(f"traffic target '{tag}': revisionName is required")
    protocol = entry.get("protocol", "")
    if protocol and protocol not in SERVICE_PORTS:
        warnings.append(
            f"traffic target '{tag}/{revision}': unknown protocol '{protocol}', "
            "using the http1 port")
    percent = entry.get("percent")
    if percent is not None:
        percent = _parse_int(percent, f"traffic target '{tag}/{revision}' percent")
    timeout = entry.get("timeoutSeconds")
    if timeout is not None:
        timeout = timedelta(seconds=_parse_int(
            timeout, f"traffic target '{tag}/{revision}' timeoutSeconds"))
    return RevisionTarget(
        revision_name=revision,
        service_name=entry.get("serviceName", revision),
        protocol=protocol,
        percent=percent,
        timeout=timeout,
    )


def _parse_traffic(traffic: dict, warnings: list[str]) -> TrafficConfig:
    targets = {}
    for tag, entries in (traffic.get("targets") or {}).items():
        targets[str(tag)] = tuple(
            _parse_target(e or {}, str(tag), warnings) for e in (entries or []))

    visibility = {}
    for tag, value in (traffic.get("visibility") or {}).items():
        try:
            visibility[str(tag)] = Visibility(value)
        except ValueError:
            raise ConfigError(
                f"traffic visibility '{tag}': unknown value {value!r}") from None
    return TrafficConfig(targets=targets, visibility=visibility)


def _parse_challenge(entry: dict) -> Challenge:
    """Parse a challenge given by URL (http://host/path) plus service coordinates.

    The host is kept as written in the URL, port included, since it is
    matched verbatim against rule hosts.
    """
    url = urlsplit(entry.get("url", ""))
    host = url.netloc.rpartition("@")[2]
    if not host:
        raise ConfigError(f"challenge {entry.get('url')!r}: URL has no host")
    return Challenge(
        host=host,
        path=url.path,
        service_namespace=entry.get("serviceNamespace", ""),
        service_name=entry.get("serviceName", ""),
        service_port=entry.get("servicePort", 80),
    )


def build_inputs(config: dict) -> tuple[dict, list[str]]:
    """Convert a loaded config into builder inputs.

    Returns (inputs, warnings). *inputs* holds route, traffic, defaults,
    ctx, tls and challenges.
    """
    warnings: list[str] = []
    route_cfg = config.get("route") or {}
    if not route_cfg.get("name"):
        raise ConfigError("route.name is required")
    route = Route(
        name=route_cfg["name"],
        namespace=route_cfg.get("namespace", "default"),
        labels=dict(route_cfg.get("labels") or {}),
        annotations=dict(route_cfg.get("annotations") or {}),
    )

    defaults_cfg = config.get("defaults") or {}
    defaults = Defaults(revision_timeout_seconds=_parse_int(
        defaults_cfg.get("revisionTimeoutSeconds", DEFAULT_REVISION_TIMEOUT_SECONDS),
        "defaults.revisionTimeoutSeconds"))

    net_cfg = config.get("network") or {}
    network_kwargs = {
        "tag_header_based_routing": bool(net_cfg.get("tagHeaderBasedRouting", False)),
        "domains": {str(k): dict(v or {}) for k, v in (config.get("domains") or {}).items()},
    }
    for key, attr in (("domainTemplate", "domain_template"),
                      ("tagTemplate", "tag_template"),
                      ("clusterDomain", "cluster_domain")):
        if net_cfg.get(key):
            network_kwargs[attr] = net_cfg[key]

    tls = [make_ingress_tls(t.get("secretName", ""), t.get("secretNamespace", ""),
                            t.get("hosts") or [])
           for t in config.get("tls") or []]

    inputs = {
        "route": route,
        "traffic": _parse_traffic(config.get("traffic") or {}, warnings),
        "defaults": defaults,
        "ctx": RouteContext(network=NetworkConfig(**network_kwargs)),
        "tls": tls,
        "challenges": [_parse_challenge(c or {}) for c in config.get("challenges") or []],
    }
    return inputs, warnings
