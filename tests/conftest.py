"""Shared fixtures for route2ingress tests."""

from datetime import timedelta

import pytest

from route2ingress.pacts.domains import DomainResolutionError, DomainResolver
from route2ingress.pacts.types import (
    Defaults, NetworkConfig, RevisionTarget, Route, RouteContext,
)


def target(revision, percent=None, timeout=None, protocol="http1"):
    """RevisionTarget whose service is named after the revision."""
    return RevisionTarget(
        revision_name=revision,
        service_name=revision,
        protocol=protocol,
        percent=percent,
        timeout=timedelta(seconds=timeout) if timeout is not None else None,
    )


class StaticResolver(DomainResolver):
    """Resolve every target to ``<tag>.<visibility>.test`` unless overridden."""
    name = "static"

    def __init__(self, hosts=None, fail_on=None):
        self.hosts = hosts or {}
        self.fail_on = fail_on
        self.calls = []

    def resolve(self, ctx, target_name, route, visibility):
        self.calls.append((target_name, visibility))
        if target_name == self.fail_on:
            raise DomainResolutionError(f"cannot resolve {target_name}")
        return self.hosts.get((target_name, visibility),
                              f"{target_name}.{visibility.value.lower()}.test")


@pytest.fixture
def route():
    return Route(name="svc", namespace="ns")


@pytest.fixture
def defaults():
    return Defaults(revision_timeout_seconds=30)


@pytest.fixture
def ctx():
    return RouteContext()


@pytest.fixture
def tag_ctx():
    return RouteContext(network=NetworkConfig(tag_header_based_routing=True))
