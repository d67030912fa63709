"""Constants, regexes, and header names shared by the ingress builders."""

import re

# Traffic target that receives untagged requests
DEFAULT_TARGET = "default"

# Headers the downstream proxy expects (must match byte-for-byte)
DEFAULT_ROUTE_HEADER = "Knative-Serving-Default-Route"
TAG_HEADER = "Knative-Serving-Tag"
REVISION_HEADER = "Knative-Serving-Revision"
REVISION_NAMESPACE_HEADER = "Knative-Serving-Namespace"

# Protocol → port on the public service (must match the activator's ports)
PROTOCOL_HTTP1 = "http1"
PROTOCOL_H2C = "h2c"
SERVICE_PORTS = {PROTOCOL_HTTP1: 80, PROTOCOL_H2C: 81}
DEFAULT_SERVICE_PORT = 80

DEFAULT_REVISION_TIMEOUT_SECONDS = 300

# Domain templates ({{.Field}} placeholders, Go template style)
DEFAULT_DOMAIN_TEMPLATE = "{{.Name}}.{{.Namespace}}.{{.Domain}}"
DEFAULT_TAG_TEMPLATE = "{{.Tag}}-{{.Name}}"
DEFAULT_DOMAIN = "example.com"
CLUSTER_DOMAIN = "svc.cluster.local"

# Labels / annotations
VISIBILITY_LABEL = "networking.knative.dev/visibility"
ROUTE_LABEL = "serving.knative.dev/route"
ROUTE_NAMESPACE_LABEL = "serving.knative.dev/routeNamespace"
INGRESS_CLASS_ANNOTATION = "networking.knative.dev/ingress.class"
LAST_APPLIED_ANNOTATION = "kubectl.kubernetes.io/last-applied-configuration"

INGRESS_API_VERSION = "networking.internal.knative.dev/v1alpha1"

# {{.Field}} placeholder in a domain/tag template
_TEMPLATE_FIELD_RE = re.compile(r'\{\{\s*\.([A-Za-z_][A-Za-z0-9_]*)\s*\}\}')

# RFC 1123 subdomain: dot-separated labels, 253 chars max
_DNS1123_SUBDOMAIN_RE = re.compile(
    r'^[a-z0-9]([-a-z0-9]*[a-z0-9])?'          # first label
    r'(\.[a-z0-9]([-a-z0-9]*[a-z0-9])?)*$'     # further labels
)
DNS1123_SUBDOMAIN_MAX_LENGTH = 253
