"""Rule assembly — traffic targets to an ordered list of ingress rules."""

from route2ingress.core.paths import (
    apply_acme_paths, apply_tag_routing, index_challenges, make_base_path,
)
from route2ingress.pacts.domains import DomainResolver, TemplateDomainResolver
from route2ingress.pacts.types import (
    Defaults, IngressRule, IngressSpec, IngressTLS, RevisionTarget, Route,
    RouteContext, Visibility,
)


def make_ingress_tls(secret_name: str, secret_namespace: str, hosts) -> IngressTLS:
    """Bind a certificate secret to the given host names."""
    return IngressTLS(hosts=tuple(hosts), secret_name=secret_name,
                      secret_namespace=secret_namespace)


def rule_visibilities(name: str, visibility: dict[str, Visibility]) -> list[Visibility]:
    """Visibilities a target gets a rule for — always cluster-local, then
    external unless the target is explicitly marked cluster-local."""
    result = [Visibility.CLUSTER_LOCAL]
    if visibility.get(name, Visibility.EXTERNAL_IP) == Visibility.EXTERNAL_IP:
        result.append(Visibility.EXTERNAL_IP)
    return result


def make_ingress_rule(hosts, namespace: str, visibility: Visibility,
                      targets: tuple[RevisionTarget, ...], defaults: Defaults) -> IngressRule:
    """A rule with a single base path for *targets*."""
    return IngressRule(
        hosts=tuple(hosts),
        visibility=visibility,
        paths=(make_base_path(namespace, targets, defaults),),
    )


def make_ingress_spec(ctx: RouteContext, route: Route, tls,
                      targets: dict[str, tuple[RevisionTarget, ...]],
                      visibility: dict[str, Visibility],
                      defaults: Defaults,
                      challenges=(),
                      resolver: DomainResolver | None = None) -> IngressSpec:
    """Build the ingress spec for a route.

    Target names are sorted so that repeated builds from the same input
    produce identical rule order. The first domain resolution failure is
    raised as-is; no partial spec is returned.
    """
    resolver = resolver or TemplateDomainResolver()
    names = sorted(targets)
    challenges_by_host = index_challenges(challenges)

    rules = []
    for name in names:
        for vis in rule_visibilities(name, visibility):
            domain = resolver.resolve(ctx, name, route, vis)
            rule = make_ingress_rule([domain], route.namespace, vis,
                                     targets[name], defaults)
            if ctx.network.tag_header_based_routing:
                rule = apply_tag_routing(rule, name, route.namespace,
                                         targets, names, defaults)
            rule = apply_acme_paths(rule, challenges_by_host)
            rules.append(rule)

    return IngressSpec(rules=tuple(rules), tls=tuple(tls))
