"""Command-line entry point."""

import argparse
import dataclasses
import sys

from route2ingress.core.ingress import make_ingress_spec
from route2ingress.io.config import ConfigError, build_inputs, load_config
from route2ingress.io.output import ingress_manifest, write_manifest
from route2ingress.pacts.domains import DomainResolutionError


def emit_warnings(warnings: list[str]) -> None:
    """Print all warnings to stderr."""
    for w in warnings:
        print(f"⚠ {w}", file=sys.stderr)


def main(argv=None):
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Translate a route traffic descriptor into an Ingress manifest"
    )
    parser.add_argument(
        "-f", "--config", required=True,
        help="Route descriptor YAML (route, traffic, defaults, network, tls, challenges)",
    )
    parser.add_argument(
        "-o", "--output", default="-",
        help="Where to write the Ingress manifest (default: stdout)",
    )
    parser.add_argument(
        "--ingress-class", default="",
        help="Value of the networking.knative.dev/ingress.class annotation",
    )
    parser.add_argument(
        "--tag-header-routing", action="store_true",
        help="Enable tag-header-based routing regardless of the config",
    )
    args = parser.parse_args(argv)

    try:
        inputs, warnings = build_inputs(load_config(args.config))
        ctx = inputs["ctx"]
        if args.tag_header_routing:
            ctx = dataclasses.replace(ctx, network=dataclasses.replace(
                ctx.network, tag_header_based_routing=True))
        spec = make_ingress_spec(
            ctx, inputs["route"], inputs["tls"],
            inputs["traffic"].targets, inputs["traffic"].visibility,
            inputs["defaults"], inputs["challenges"],
        )
    except (ConfigError, DomainResolutionError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)

    emit_warnings(warnings)
    write_manifest(ingress_manifest(inputs["route"], spec, args.ingress_class), args.output)


if __name__ == "__main__":
    main()
