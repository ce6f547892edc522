"""
Service and region resolution for SigV4 credential scopes

The service name and region come either from explicit input or from the
request host. Hosts are split into dot-separated labels, the cloud domain
suffix is stripped, and the remaining labels are matched against an ordered
rule table. The first matching rule wins.

    dynamodb.us-east-1.amazonaws.com            -> dynamodb / us-east-1
    search-mydomain.us-west-2.es.amazonaws.com  -> es / us-west-2
    iam.amazonaws.com                           -> iam / (unresolved)
"""

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence, Tuple

from ..exceptions import UnresolvableServiceInfoError
from .types import ServiceInfo, SignableRequest, SigningErrorCodes
from .utils import parse_url

DEFAULT_DOMAIN_SUFFIXES: Tuple[str, ...] = ("amazonaws.com", "amazonaws.com.cn")

# Search service hostnames put the region before the service marker
ELASTICSEARCH_SERVICE = "es"

HostLabels = Tuple[str, ...]


@dataclass(frozen=True)
class HostRule:
    """
    Mapping from host labels to a (possibly partial) ServiceInfo

    Attributes:
        name: Rule name, used in diagnostics
        matches: Predicate over the labels preceding the domain suffix
        resolve: Builds the ServiceInfo from those labels
    """
    name: str
    matches: Callable[[HostLabels], bool]
    resolve: Callable[[HostLabels], ServiceInfo]


HOST_RULES: Tuple[HostRule, ...] = (
    HostRule(
        name="elasticsearch",
        matches=lambda labels: len(labels) >= 2 and labels[-1] == ELASTICSEARCH_SERVICE,
        resolve=lambda labels: ServiceInfo(service=labels[-1], region=labels[-2]),
    ),
    HostRule(
        name="service-region",
        matches=lambda labels: len(labels) >= 2,
        resolve=lambda labels: ServiceInfo(service=labels[-2], region=labels[-1]),
    ),
    HostRule(
        name="global-service",
        matches=lambda labels: len(labels) == 1,
        resolve=lambda labels: ServiceInfo(service=labels[0]),
    ),
)


def split_host_labels(hostname: str, domain_suffixes: Iterable[str] = DEFAULT_DOMAIN_SUFFIXES) -> Optional[HostLabels]:
    """
    Tokenize a host name into the labels preceding a known domain suffix.

    Args:
        hostname: Host name without port
        domain_suffixes: Recognised cloud domain suffixes

    Returns:
        tuple or None: Labels before the suffix, None if no suffix matches
    """
    host = hostname.strip().lower().rstrip(".")

    for suffix in sorted((s.lower().strip(".") for s in domain_suffixes), key=len, reverse=True):
        if not suffix or not host.endswith("." + suffix):
            continue

        labels = tuple(host[:-(len(suffix) + 1)].split("."))
        if any(not label for label in labels):
            return None
        return labels

    return None


def parse_service_info(
    hostname: str,
    domain_suffixes: Iterable[str] = DEFAULT_DOMAIN_SUFFIXES,
    rules: Sequence[HostRule] = HOST_RULES
) -> ServiceInfo:
    """
    Derive service and region from a host name.

    Args:
        hostname: Host name without port
        domain_suffixes: Recognised cloud domain suffixes
        rules: Ordered rule table

    Returns:
        ServiceInfo: Parsed values; fields are None when they cannot be derived
    """
    labels = split_host_labels(hostname, domain_suffixes)
    if labels is None:
        return ServiceInfo()

    for rule in rules:
        if rule.matches(labels):
            return rule.resolve(labels)

    return ServiceInfo()


class ServiceInfoResolver:
    """
    Resolves the service and region used in the credential scope
    """

    def __init__(
        self,
        domain_suffixes: Iterable[str] = DEFAULT_DOMAIN_SUFFIXES,
        rules: Sequence[HostRule] = HOST_RULES
    ):
        self.domain_suffixes = tuple(domain_suffixes)
        self.rules = tuple(rules)

    def resolve(
        self,
        request: SignableRequest,
        service_info: Optional[ServiceInfo] = None,
        default: Optional[ServiceInfo] = None
    ) -> ServiceInfo:
        """
        Resolve service info for a request.

        Each field is taken independently from, in order of precedence: the
        explicit service_info, the request's own service/region, the
        configured default, the host.

        Args:
            request: Request being signed
            service_info: Optional explicit override
            default: Optional configured default

        Returns:
            ServiceInfo: Complete service info

        Raises:
            MalformedRequestError: If the request URL has no usable host
            UnresolvableServiceInfoError: If service or region stays unknown
        """
        url_parts = parse_url(request.url)
        override = service_info or ServiceInfo()
        fallback = default or ServiceInfo()

        service = override.service or request.service or fallback.service
        region = override.region or request.region or fallback.region

        parsed = ServiceInfo()
        if not service or not region:
            parsed = parse_service_info(url_parts["hostname"], self.domain_suffixes, self.rules)

        resolved = ServiceInfo(service=service or parsed.service, region=region or parsed.region)

        if not resolved.is_complete:
            missing = [name for name in ("service", "region") if not getattr(resolved, name)]
            raise UnresolvableServiceInfoError(
                f"Cannot resolve {' and '.join(missing)} for host {url_parts['hostname']}",
                SigningErrorCodes.UNRESOLVABLE_SERVICE_INFO,
                {"host": url_parts["hostname"], "missing": missing}
            )

        return resolved


def resolve_service_info(
    request: SignableRequest,
    service_info: Optional[ServiceInfo] = None,
    domain_suffixes: Iterable[str] = DEFAULT_DOMAIN_SUFFIXES
) -> ServiceInfo:
    """
    Resolve service info with the default rule table.
    """
    return ServiceInfoResolver(domain_suffixes).resolve(request, service_info)
