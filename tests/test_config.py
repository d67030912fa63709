"""Tests for route descriptor loading."""

from datetime import timedelta

import pytest

from route2ingress.io.config import ConfigError, build_inputs, load_config
from route2ingress.pacts.types import Challenge, IngressTLS, Visibility

DESCRIPTOR = """\
route:
  name: svc
  namespace: ns
  labels:
    app: web
traffic:
  targets:
    default:
      - revisionName: rev-a
        percent: 90
        timeoutSeconds: 40
      - revisionName: rev-b
        serviceName: rev-b-private
        protocol: h2c
        percent: 10
    canary:
      - revisionName: rev-b
        percent: 100
  visibility:
    canary: ClusterLocal
defaults:
  revisionTimeoutSeconds: 60
network:
  tagHeaderBasedRouting: true
  tagTemplate: "{{.Name}}-{{.Tag}}"
domains:
  example.org: {}
tls:
  - hosts: [svc.ns.example.org]
    secretName: route-cert
    secretNamespace: ns
challenges:
  - url: http://svc.ns.example.org/.well-known/acme-challenge/abc
    serviceNamespace: ns
    serviceName: cm-acme-http-solver
    servicePort: 8089
"""


def _write(tmp_path, text):
    path = tmp_path / "route.yaml"
    path.write_text(text)
    return str(path)


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_filled(self, tmp_path):
        cfg = load_config(_write(tmp_path, "route:\n  name: svc\n"))

        assert cfg["defaults"]["revisionTimeoutSeconds"] == 300
        assert cfg["network"]["tagHeaderBasedRouting"] is False
        assert cfg["domains"] == {"example.com": {}}
        assert cfg["tls"] == []
        assert cfg["challenges"] == []

    def test_empty_file(self, tmp_path):
        cfg = load_config(_write(tmp_path, ""))

        assert cfg["route"] == {}

    def test_null_sections_get_defaults(self, tmp_path):
        cfg = load_config(_write(tmp_path, "route: {name: svc}\ndefaults:\nnetwork:\n"
                                           "traffic:\ndomains:\ntls:\nchallenges:\n"))

        assert cfg["defaults"] == {"revisionTimeoutSeconds": 300}
        assert cfg["network"] == {"tagHeaderBasedRouting": False}
        assert cfg["traffic"] == {}
        assert cfg["domains"] == {"example.com": {}}
        assert cfg["tls"] == []
        assert cfg["challenges"] == []
        inputs, _ = build_inputs(cfg)
        assert inputs["defaults"].revision_timeout == timedelta(seconds=300)

    def test_section_not_a_mapping(self, tmp_path):
        with pytest.raises(ConfigError, match="'network' must be a mapping"):
            load_config(_write(tmp_path, "route: {name: svc}\nnetwork: [a]\n"))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(str(tmp_path / "missing.yaml"))

    def test_non_mapping(self, tmp_path):
        with pytest.raises(ConfigError, match="mapping"):
            load_config(_write(tmp_path, "- a\n- b\n"))


class TestBuildInputs:
    """Tests for build_inputs."""

    def test_full_descriptor(self, tmp_path):
        inputs, warnings = build_inputs(load_config(_write(tmp_path, DESCRIPTOR)))

        assert warnings == []
        route = inputs["route"]
        assert (route.name, route.namespace, route.labels) == ("svc", "ns", {"app": "web"})

        traffic = inputs["traffic"]
        rev_a, rev_b = traffic.targets["default"]
        assert rev_a.service_name == "rev-a"
        assert rev_a.timeout == timedelta(seconds=40)
        assert (rev_b.service_name, rev_b.protocol, rev_b.percent) == ("rev-b-private", "h2c", 10)
        assert traffic.visibility == {"canary": Visibility.CLUSTER_LOCAL}

        assert inputs["defaults"].revision_timeout == timedelta(seconds=60)
        network = inputs["ctx"].network
        assert network.tag_header_based_routing is True
        assert network.tag_template == "{{.Name}}-{{.Tag}}"
        assert network.domain_template == "{{.Name}}.{{.Namespace}}.{{.Domain}}"
        assert network.domains == {"example.org": {}}

        assert inputs["tls"] == [IngressTLS(hosts=("svc.ns.example.org",),
                                            secret_name="route-cert", secret_namespace="ns")]
        assert inputs["challenges"] == [Challenge(
            host="svc.ns.example.org", path="/.well-known/acme-challenge/abc",
            service_namespace="ns", service_name="cm-acme-http-solver", service_port=8089)]

    def test_route_name_required(self):
        with pytest.raises(ConfigError, match="route.name"):
            build_inputs({"route": {}})

    def test_unknown_visibility(self):
        cfg = {"route": {"name": "svc"}, "traffic": {"visibility": {"default": "Public"}}}

        with pytest.raises(ConfigError, match="Public"):
            build_inputs(cfg)

    def test_non_integer_percent(self):
        cfg = {"route": {"name": "svc"},
               "traffic": {"targets": {"default": [{"revisionName": "a", "percent": "50"}]}}}

        with pytest.raises(ConfigError, match="percent"):
            build_inputs(cfg)

    def test_missing_revision_name(self):
        cfg = {"route": {"name": "svc"},
               "traffic": {"targets": {"default": [{"percent": 100}]}}}

        with pytest.raises(ConfigError, match="revisionName"):
            build_inputs(cfg)

    def test_unknown_protocol_warns(self):
        cfg = {"route": {"name": "svc"},
               "traffic": {"targets": {"default": [
                   {"revisionName": "a", "percent": 100, "protocol": "grpc"}]}}}

        inputs, warnings = build_inputs(cfg)

        assert inputs["traffic"].targets["default"][0].protocol == "grpc"
        assert len(warnings) == 1
        assert "unknown protocol 'grpc'" in warnings[0]

    def test_challenge_host_keeps_port_and_case(self):
        cfg = {"route": {"name": "svc"}, "challenges": [
            {"url": "http://Svc.Example.com:8080/.well-known/acme-challenge/abc"}]}

        inputs, _ = build_inputs(cfg)

        challenge = inputs["challenges"][0]
        assert challenge.host == "Svc.Example.com:8080"
        assert challenge.path == "/.well-known/acme-challenge/abc"

    def test_challenge_without_host(self):
        cfg = {"route": {"name": "svc"}, "challenges": [{"url": "/just/a/path"}]}

        with pytest.raises(ConfigError, match="no host"):
            build_inputs(cfg)
