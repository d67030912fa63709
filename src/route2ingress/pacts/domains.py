"""Domain resolver base class and the default template-based resolver."""

from route2ingress.core.constants import (
    DEFAULT_TARGET, DNS1123_SUBDOMAIN_MAX_LENGTH,
    VISIBILITY_LABEL, _DNS1123_SUBDOMAIN_RE, _TEMPLATE_FIELD_RE,
)
from route2ingress.pacts.types import Route, RouteContext, Visibility


class DomainResolutionError(Exception):
    """Raised when a hostname cannot be produced for a route target."""


class DomainResolver:
    """Base class for domain resolvers.

    Subclass to plug in a different naming scheme. A resolver turns a
    target (tag) name of a route into the fully-qualified hostname its
    ingress rule matches on, for the given visibility.
    """
    name: str = ""

    def resolve(self, ctx: RouteContext, target_name: str, route: Route,
                visibility: Visibility) -> str:
        """Return the hostname, or raise DomainResolutionError."""
        raise NotImplementedError


def render_template(template: str, values: dict[str, str]) -> str:
    """Render a ``{{.Field}}`` template.

    Unknown fields and stray braces raise DomainResolutionError.
    """
    def _sub(m):
        key = m.group(1)
        if key not in values:
            raise DomainResolutionError(
                f"template {template!r}: unknown field '.{key}'")
        return values[key]

    rendered = _TEMPLATE_FIELD_RE.sub(_sub, template)
    if "{{" in rendered or "}}" in rendered:
        raise DomainResolutionError(f"template {template!r}: malformed placeholder")
    return rendered


def _select_domain(domains: dict[str, dict], labels: dict) -> str | None:
    """Pick the domain whose selector matches *labels* with the most keys."""
    best = None
    best_size = -1
    for domain in sorted(domains):
        selector = domains[domain] or {}
        if not all(labels.get(k) == v for k, v in selector.items()):
            continue
        if len(selector) > best_size:
            best, best_size = domain, len(selector)
    return best


def _validate_hostname(hostname: str) -> str:
    if len(hostname) > DNS1123_SUBDOMAIN_MAX_LENGTH:
        raise DomainResolutionError(
            f"domain {hostname!r} exceeds {DNS1123_SUBDOMAIN_MAX_LENGTH} characters")
    if not _DNS1123_SUBDOMAIN_RE.match(hostname):
        raise DomainResolutionError(
            f"domain {hostname!r} is not a valid DNS-1123 subdomain")
    return hostname


class TemplateDomainResolver(DomainResolver):
    """Render hostnames from the tag and domain templates of the network config.

    The default target is served under the bare route name; other tags go
    through the tag template first. Cluster-local rules use the cluster
    domain, external ones the configured domain whose label selector best
    matches the route.
    """
    name = "template"

    def resolve(self, ctx, target_name, route, visibility):
        network = ctx.network
        if target_name == DEFAULT_TARGET:
            host = route.name
        else:
            host = render_template(network.tag_template,
                                   {"Name": route.name, "Tag": target_name})

        # Visibility comes from the rule; the route's own visibility label is ignored
        if visibility == Visibility.CLUSTER_LOCAL:
            domain = network.cluster_domain
        else:
            labels = {k: v for k, v in route.labels.items() if k != VISIBILITY_LABEL}
            domain = _select_domain(network.domains, labels)
            if domain is None:
                raise DomainResolutionError(
                    f"route {route.namespace}/{route.name}: no domain matches its labels")

        return _validate_hostname(render_template(network.domain_template, {
            "Name": host,
            "Namespace": route.namespace,
            "Domain": domain,
        }))
