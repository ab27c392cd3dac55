"""
SOLIDserver Constants

Centralized service names, authentication headers and version gates to
avoid magic strings throughout the codebase.
"""

# Authentication headers (base64 encoded values)
HEADER_USERNAME = "X-IPM-Username"
HEADER_PASSWORD = "X-IPM-Password"

# Services
SERVICE_MEMBER_LIST = "rest/member_list"
SERVICE_IP_FREE_ADDRESS_LIST = "rest/ip_free_address_list"
SERVICE_IP_FIND_FREE_ADDRESS = "rpc/ip_find_free_address"
SERVICE_IP6_FIND_FREE_ADDRESS6 = "rpc/ip6_find_free_address6"
SERVICE_IP_FIND_FREE_SUBNET = "rpc/ip_find_free_subnet"
SERVICE_IP6_FIND_FREE_SUBNET6 = "rpc/ip6_find_free_subnet6"
SERVICE_VLMVLAN_LIST = "rest/vlmvlan_list"
SERVICE_VLMDOMAIN_LIST = "rest/vlmdomain_list"
SERVICE_IP_SITE_LIST = "rest/ip_site_list"
SERVICE_IP_BLOCK_SUBNET_LIST = "rest/ip_block_subnet_list"
SERVICE_IP6_BLOCK6_SUBNET6_LIST = "rest/ip6_block6_subnet6_list"
SERVICE_IP_POOL_LIST = "rest/ip_pool_list"
SERVICE_IP6_POOL6_LIST = "rest/ip6_pool6_list"
SERVICE_IP_USED_ADDRESS_LIST = "rest/ip_used_address_list"
SERVICE_IP6_ADDRESS6_LIST = "rest/ip6_address6_list"
SERVICE_HOSTDEV_LIST = "rest/hostdev_list"

# Row state of a pre-7.0 VLAN entry that is still free
VLAN_ROW_FREE = "2"

# Version gates (normalized version numbers, see normalize_version)
CAPABILITY_VLAN_FREE_RANGES = "vlan_free_ranges"
CAPABILITY_VXLAN_DOMAINS = "vxlan_domains"
CAPABILITY_APPLICATION_NODES = "application_nodes"
CAPABILITY_VLAN_CLASS_PARAMETERS = "vlan_class_parameters"
CAPABILITY_RR_CLASS_PARAMETERS = "rr_class_parameters"

CAPABILITY_MIN_VERSION = {
    CAPABILITY_VLAN_FREE_RANGES: 700,
    CAPABILITY_VXLAN_DOMAINS: 700,
    CAPABILITY_APPLICATION_NODES: 710,
    CAPABILITY_VLAN_CLASS_PARAMETERS: 730,
    CAPABILITY_RR_CLASS_PARAMETERS: 800,
}


def capabilities_for_version(version: int) -> frozenset:
    """Return the set of capabilities a server of the given normalized version offers"""
    return frozenset(
        name for name, min_version in CAPABILITY_MIN_VERSION.items()
        if version >= min_version
    )
