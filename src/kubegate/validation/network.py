# src/kubegate/validation/network.py
"""Control plane endpoint and CNI (Cilium) network policy checks."""

import ipaddress
from typing import List

from ..core.exceptions import ConfigurationError, PolicyViolation
from ..models.spec import CiliumConfig, ClusterNetwork

PRIVATE_NETWORKS = [
    ipaddress.ip_network("10.0.0.0/8"),
    ipaddress.ip_network("172.16.0.0/12"),
    ipaddress.ip_network("192.168.0.0/16"),
]

# Last octets reserved for gateways and broadcast.
RESERVED_LAST_OCTETS = (1, 254, 255)
# .221-.253 are kept free for control plane endpoints on every site subnet.
MIN_ENDPOINT_LAST_OCTET = 221

REQUIRED_POD_CIDR = "10.128.0.0/18"
REQUIRED_SERVICE_CIDR = "10.128.32.0/18"

POLICY_ENFORCEMENT_MODES = ["default", "always", "never"]
ROUTING_MODES = ["default", "direct"]
DIRECT_ROUTING_MODE = "direct"


def is_private_ipv4(ip: ipaddress.IPv4Address) -> bool:
    return any(ip in network for network in PRIVATE_NETWORKS)


def validate_control_plane_endpoint(endpoint: str) -> None:
    if not endpoint:
        raise ConfigurationError("cluster controlPlaneConfiguration.Endpoint.Host is required")

    try:
        ip = ipaddress.ip_address(endpoint)
    except ValueError:
        raise PolicyViolation(
            f"cluster controlPlaneConfiguration.Endpoint.Host must be a valid IP address, got: {endpoint}"
        ) from None

    try:
        validate_endpoint_ip(ip)
    except PolicyViolation as e:
        raise PolicyViolation(f"cluster controlPlaneConfiguration.Endpoint.Host IP validation failed: {e}") from e


def validate_endpoint_ip(ip) -> None:
    # IPv4-mapped IPv6 (::ffff:a.b.c.d) is checked as the embedded IPv4 address.
    if ip.version == 6 and ip.ipv4_mapped is not None:
        ip = ip.ipv4_mapped
    if ip.version != 4:
        raise PolicyViolation(f"endpoint must be an IPv4 address, got: {ip}")
    if ip.is_unspecified:
        raise PolicyViolation("endpoint cannot be unspecified address (0.0.0.0)")
    if ip.is_loopback:
        raise PolicyViolation(f"endpoint cannot be loopback address ({ip})")
    if ip.is_link_local:
        raise PolicyViolation(f"endpoint cannot be link-local address ({ip})")
    if ip.is_multicast:
        raise PolicyViolation(f"endpoint cannot be multicast address ({ip})")
    if not is_private_ipv4(ip):
        raise PolicyViolation(
            "endpoint IP must be in a private network range (10.0.0.0/8, 172.16.0.0/12, or 192.168.0.0/16), "
            f"got {ip}"
        )

    last_octet = ip.packed[3]
    if last_octet in RESERVED_LAST_OCTETS:
        raise PolicyViolation(f"endpoint IP cannot be a gateway address (last octet .1 or .254, .255), got {ip}")
    if last_octet < MIN_ENDPOINT_LAST_OCTET:
        raise PolicyViolation(
            f"endpoint IP must have last octet of {MIN_ENDPOINT_LAST_OCTET} or higher, got {last_octet} in {ip}"
        )


def validate_basic_cidr(cidr: str, field_name: str):
    # Host bits may be set, as in '10.0.0.1/8'; only the syntax is checked here.
    try:
        return ipaddress.ip_network(cidr, strict=False)
    except ValueError as e:
        raise PolicyViolation(f"{field_name} '{cidr}' is not a valid CIDR: {e}") from e


def validate_ipv4_network(cidr: str, field_name: str) -> None:
    network = validate_basic_cidr(cidr, field_name)
    if network.version != 4:
        raise PolicyViolation(f"{field_name} '{cidr}' is not an IPv4 network")


def validate_ipv6_network(cidr: str, field_name: str) -> None:
    network = validate_basic_cidr(cidr, field_name)
    if network.version != 6:
        raise PolicyViolation(f"{field_name} '{cidr}' is not an IPv6 network")


def _single_cidr(blocks: List[str], label: str, required: str) -> str:
    if not blocks:
        raise PolicyViolation(f"{label} cidrBlocks are required")
    if len(blocks) != 1:
        raise PolicyViolation(f"exactly 1 {label} CIDR block is required, got {len(blocks)}")
    if blocks[0] != required:
        raise PolicyViolation(f"{label} CIDR must be '{required}', got '{blocks[0]}'")
    return blocks[0]


def validate_network_configuration(network: ClusterNetwork) -> None:
    pods_cidr = _single_cidr(network.pods.cidr_blocks, "pods", REQUIRED_POD_CIDR)
    services_cidr = _single_cidr(network.services.cidr_blocks, "services", REQUIRED_SERVICE_CIDR)

    validate_basic_cidr(pods_cidr, "pods CIDR")
    validate_basic_cidr(services_cidr, "services CIDR")


def validate_cilium_config(cilium: CiliumConfig) -> None:
    if cilium.policy_enforcement_mode and cilium.policy_enforcement_mode not in POLICY_ENFORCEMENT_MODES:
        raise PolicyViolation(
            f"invalid policyEnforcementMode '{cilium.policy_enforcement_mode}', "
            f"must be one of: {', '.join(POLICY_ENFORCEMENT_MODES)}"
        )

    if cilium.routing_mode and cilium.routing_mode not in ROUTING_MODES:
        raise PolicyViolation(
            f"invalid routingMode '{cilium.routing_mode}', must be one of: {', '.join(ROUTING_MODES)}"
        )

    if cilium.ipv4_native_routing_cidr:
        validate_ipv4_network(cilium.ipv4_native_routing_cidr, "ipv4NativeRoutingCIDR")
        if cilium.routing_mode != DIRECT_ROUTING_MODE:
            raise PolicyViolation("ipv4NativeRoutingCIDR can only be used when routingMode is set to 'direct'")

    if cilium.ipv6_native_routing_cidr:
        validate_ipv6_network(cilium.ipv6_native_routing_cidr, "ipv6NativeRoutingCIDR")
        if cilium.routing_mode != DIRECT_ROUTING_MODE:
            raise PolicyViolation("ipv6NativeRoutingCIDR can only be used when routingMode is set to 'direct'")


def validate_cni(network: ClusterNetwork) -> None:
    try:
        validate_network_configuration(network)
    except PolicyViolation as e:
        raise PolicyViolation(f"network configuration validation failed: {e}") from e

    try:
        validate_cilium_config(network.cni_config.cilium)
    except PolicyViolation as e:
        raise PolicyViolation(f"Cilium configuration validation failed: {e}") from e
