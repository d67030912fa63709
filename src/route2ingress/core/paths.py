"""Path builders — backend splits, tag-header routing, ACME challenge paths.

Every function here is pure: it returns new values and never touches its
arguments. Path order matters downstream (first match wins), so the
builders only ever prepend the more specific paths.
"""

from dataclasses import replace

from route2ingress.core.constants import (
    DEFAULT_ROUTE_HEADER, DEFAULT_SERVICE_PORT, DEFAULT_TARGET,
    REVISION_HEADER, REVISION_NAMESPACE_HEADER, SERVICE_PORTS, TAG_HEADER,
)
from route2ingress.pacts.types import (
    BackendSplit, Challenge, Defaults, HeaderMatch, HTTPIngressPath,
    IngressRule, RevisionTarget, Visibility,
)


def service_port(protocol: str) -> int:
    """Port on the public service for a revision protocol (http1 unless h2c)."""
    return SERVICE_PORTS.get(protocol, DEFAULT_SERVICE_PORT)


def make_base_path(namespace: str, targets: tuple[RevisionTarget, ...],
                   defaults: Defaults) -> HTTPIngressPath:
    """Build a single path splitting traffic across *targets*.

    Targets without traffic (percent unset or zero) are skipped. The path
    only carries a timeout when some live target asks for more than the
    default revision timeout; otherwise the field stays unset.
    """
    splits = []
    timeout = defaults.revision_timeout
    saw_timeout = False

    for t in targets:
        if not t.percent:
            continue
        if t.timeout is not None and t.timeout > timeout:
            timeout = t.timeout
            saw_timeout = True
        splits.append(BackendSplit(
            service_namespace=namespace,
            service_name=t.service_name,
            service_port=service_port(t.protocol),
            percent=t.percent,
            append_headers={
                REVISION_HEADER: t.revision_name,
                REVISION_NAMESPACE_HEADER: namespace,
            },
        ))

    return HTTPIngressPath(
        splits=tuple(splits),
        timeout=timeout if saw_timeout else None,
    )


def make_tag_paths(namespace: str, targets: dict[str, tuple[RevisionTarget, ...]],
                   names: list[str], defaults: Defaults) -> list[HTTPIngressPath]:
    """One header-matched path per non-default tag, in *names* order."""
    paths = []
    for name in names:
        if name == DEFAULT_TARGET:
            continue
        path = make_base_path(namespace, targets[name], defaults)
        paths.append(replace(path, headers={TAG_HEADER: HeaderMatch(exact=name)}))
    return paths


def _with_appended_header(path: HTTPIngressPath, key: str, value: str) -> HTTPIngressPath:
    return replace(path, append_headers={**path.append_headers, key: value})


def apply_tag_routing(rule: IngressRule, name: str, namespace: str,
                      targets: dict[str, tuple[RevisionTarget, ...]],
                      names: list[str], defaults: Defaults) -> IngressRule:
    """Layer tag-header routing onto the rule built for target *name*.

    The default rule gets the default-route marker and, in front of it,
    a header-matched path for every other tag. A tag's own hostname rule
    gets the tag header appended, so requests look the same downstream
    whichever way they selected the tag.
    """
    base, *rest = rule.paths
    if name == DEFAULT_TARGET:
        base = _with_appended_header(base, DEFAULT_ROUTE_HEADER, "true")
        paths = make_tag_paths(namespace, targets, names, defaults) + [base, *rest]
    else:
        paths = [_with_appended_header(base, TAG_HEADER, name), *rest]
    return replace(rule, paths=tuple(paths))


def index_challenges(challenges) -> dict[str, Challenge]:
    """Index challenges by host (a later challenge for the same host wins)."""
    return {c.host: c for c in challenges}


def make_acme_paths(challenges_by_host: dict[str, Challenge],
                    hosts) -> list[HTTPIngressPath]:
    """Challenge-serving paths for the *hosts* that have a pending challenge."""
    paths = []
    for host in hosts:
        challenge = challenges_by_host.get(host)
        if challenge is None:
            continue
        paths.append(HTTPIngressPath(
            splits=(BackendSplit(
                service_namespace=challenge.service_namespace,
                service_name=challenge.service_name,
                service_port=challenge.service_port,
                percent=100,
            ),),
            path=challenge.path,
        ))
    return paths


def apply_acme_paths(rule: IngressRule,
                     challenges_by_host: dict[str, Challenge]) -> IngressRule:
    """Prepend challenge paths to an externally visible rule.

    Cluster-local rules are returned unchanged.
    """
    if rule.visibility != Visibility.EXTERNAL_IP:
        return rule
    acme = make_acme_paths(challenges_by_host, rule.hosts)
    if not acme:
        return rule
    return replace(rule, paths=(*acme, *rule.paths))
