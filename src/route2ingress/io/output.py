"""Output — ingress spec to Kubernetes-shaped dicts and YAML."""

import sys
from datetime import timedelta

import yaml

from route2ingress.core.constants import (
    INGRESS_API_VERSION, INGRESS_CLASS_ANNOTATION, LAST_APPLIED_ANNOTATION,
    ROUTE_LABEL, ROUTE_NAMESPACE_LABEL,
)
from route2ingress.pacts.types import HTTPIngressPath, IngressSpec, Route


def format_duration(d: timedelta) -> str:
    """Format like Go's time.Duration.String() (``40s``, ``1m30s``, ``500ms``).

    Precision stops at microseconds, the resolution of timedelta.
    """
    micros = (d.days * 86400 + d.seconds) * 1_000_000 + d.microseconds
    if micros == 0:
        return "0s"
    sign = "-" if micros < 0 else ""
    micros = abs(micros)
    # Under a second Go switches to ms / µs
    if micros < 1000:
        return f"{sign}{micros}µs"
    if micros < 1_000_000:
        ms, frac = divmod(micros, 1000)
        return f"{sign}{ms}" + (f".{frac:03d}".rstrip("0") if frac else "") + "ms"
    whole, frac = divmod(micros, 1_000_000)
    hours, rem = divmod(whole, 3600)
    minutes, secs = divmod(rem, 60)
    seconds = str(secs)
    if frac:
        seconds += f".{frac:06d}".rstrip("0")
    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


def _path_to_dict(path: HTTPIngressPath) -> dict:
    out = {}
    if path.headers:
        out["headers"] = {k: {"exact": m.exact} for k, m in path.headers.items()}
    if path.path:
        out["path"] = path.path
    splits = []
    for s in path.splits:
        split = {
            "serviceNamespace": s.service_namespace,
            "serviceName": s.service_name,
            "servicePort": s.service_port,
            "percent": s.percent,
        }
        if s.append_headers:
            split["appendHeaders"] = dict(s.append_headers)
        splits.append(split)
    out["splits"] = splits
    if path.append_headers:
        out["appendHeaders"] = dict(path.append_headers)
    if path.timeout is not None:
        out["timeout"] = format_duration(path.timeout)
    return out


def spec_to_dict(spec: IngressSpec) -> dict:
    """Render a spec with the camelCase field names the ingress CRD uses."""
    out = {
        "rules": [{
            "hosts": list(rule.hosts),
            "visibility": rule.visibility.value,
            "http": {"paths": [_path_to_dict(p) for p in rule.paths]},
        } for rule in spec.rules],
    }
    if spec.tls:
        out["tls"] = [{
            "hosts": list(t.hosts),
            "secretName": t.secret_name,
            "secretNamespace": t.secret_namespace,
        } for t in spec.tls]
    return out


def ingress_manifest(route: Route, spec: IngressSpec, ingress_class: str = "") -> dict:
    """Wrap a spec into an Ingress object named and labelled after its route."""
    labels = {**route.labels, ROUTE_LABEL: route.name, ROUTE_NAMESPACE_LABEL: route.namespace}
    annotations = {}
    if ingress_class:
        annotations[INGRESS_CLASS_ANNOTATION] = ingress_class
    annotations.update(route.annotations)
    annotations.pop(LAST_APPLIED_ANNOTATION, None)

    metadata = {"name": route.name, "namespace": route.namespace, "labels": labels}
    if annotations:
        metadata["annotations"] = annotations
    return {
        "apiVersion": INGRESS_API_VERSION,
        "kind": "Ingress",
        "metadata": metadata,
        "spec": spec_to_dict(spec),
    }


def write_manifest(manifest: dict, path: str) -> None:
    """Write the manifest as YAML (``-`` writes to stdout)."""
    header = "# Generated by route2ingress — do not edit manually\n"
    if path == "-":
        sys.stdout.write(header)
        yaml.dump(manifest, sys.stdout, default_flow_style=False, sort_keys=False)
        return
    with open(path, "w", encoding="utf-8") as f:
        f.write(header)
        yaml.dump(manifest, f, default_flow_style=False, sort_keys=False)
    print(f"Wrote {path}", file=sys.stderr)
