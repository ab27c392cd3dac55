import logging
from fastapi import APIRouter, HTTPException, Depends, Query

from ..config.constants import AssignmentOrder
from ..models.schemas import (
    ServerStatus, FreeAddressesResponse, FreeSubnetsResponse, FreeVlansResponse, AddressRepresentations
)
from ..server.solidserver_client import SOLIDserver, get_server, run_solidserver_get
from ..services.allocation_service import AllocationService
from ..utils.address_codec import (
    ip_to_hex_ip, hex_ip_to_ip, ip_to_long, ip_to_ptr,
    ip6_to_hex_ip6, hex_ip6_to_ip6, ip6_to_ptr, long_ip6_to_short_ip6, short_ip6_to_long_ip6
)
from ..utils.error_handlers import (
    SOLIDserverAPIError, InvalidAddressError, handle_solidserver_errors, require_candidates
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_server_session() -> SOLIDserver:
    """Dependency returning the process wide SOLIDserver session"""
    try:
        return get_server()
    except SOLIDserverAPIError as e:
        raise HTTPException(status_code=503, detail=e.message)


def get_allocation_service(server: SOLIDserver = Depends(get_server_session)) -> AllocationService:
    """Dependency returning the allocation engine bound to the session"""
    return AllocationService(server)


# Server Routes
@router.get("/status", response_model=ServerStatus)
async def server_status(server: SOLIDserver = Depends(get_server_session)):
    """SOLIDserver session status"""
    return ServerStatus(
        host=server.host,
        version=server.version,
        authenticated=server.authenticated,
        capabilities=sorted(server.capabilities),
    )

# Free Address Routes
@router.get("/subnets/{subnet_id}/free-addresses", response_model=FreeAddressesResponse)
@handle_solidserver_errors
async def free_addresses(
    subnet_id: str,
    pool_id: str = "",
    strategy: str = Query(AssignmentOrder.OPTIMIZED, description="start, end or optimized"),
    service: AllocationService = Depends(get_allocation_service)
):
    """Suggest free IPv4 addresses in a subnet"""
    addresses = await run_solidserver_get(
        lambda: service.find_free_address(subnet_id, pool_id, strategy),
        f"find free address in subnet {subnet_id}"
    )
    return FreeAddressesResponse(
        subnet_id=subnet_id,
        pool_id=pool_id or None,
        strategy=strategy,
        addresses=require_candidates(addresses, "IP address"),
    )

@router.get("/subnets6/{subnet_id}/free-addresses", response_model=FreeAddressesResponse)
@handle_solidserver_errors
async def free_addresses6(
    subnet_id: str,
    pool_id: str = "",
    service: AllocationService = Depends(get_allocation_service)
):
    """Suggest free IPv6 addresses in a subnet"""
    addresses = await run_solidserver_get(
        lambda: service.find_free_address6(subnet_id, pool_id),
        f"find free IPv6 address in subnet {subnet_id}"
    )
    return FreeAddressesResponse(
        subnet_id=subnet_id,
        pool_id=pool_id or None,
        addresses=require_candidates(addresses, "IPv6 address"),
    )

# Free Subnet Routes
@router.get("/spaces/{space_id}/free-subnets", response_model=FreeSubnetsResponse)
@handle_solidserver_errors
async def free_subnets(
    space_id: str,
    block_id: str,
    prefix_length: int = Query(..., ge=0, le=32),
    requested_address: str = "",
    service: AllocationService = Depends(get_allocation_service)
):
    """Suggest free IPv4 subnets of a given prefix length under a block"""
    subnets = await run_solidserver_get(
        lambda: service.find_free_subnet(space_id, block_id, requested_address, prefix_length),
        f"find free /{prefix_length} subnet in block {block_id}"
    )
    subnets = require_candidates(subnets, "IP subnet")
    return FreeSubnetsResponse(
        space_id=space_id,
        block_id=block_id,
        prefix_length=prefix_length,
        subnets=subnets,
        addresses=[hex_ip_to_ip(subnet) for subnet in subnets],
    )

@router.get("/spaces/{space_id}/free-subnets6", response_model=FreeSubnetsResponse)
@handle_solidserver_errors
async def free_subnets6(
    space_id: str,
    block_id: str,
    prefix_length: int = Query(..., ge=0, le=128),
    requested_address: str = "",
    service: AllocationService = Depends(get_allocation_service)
):
    """Suggest free IPv6 subnets of a given prefix length under a block"""
    subnets = await run_solidserver_get(
        lambda: service.find_free_subnet6(space_id, block_id, requested_address, prefix_length),
        f"find free /{prefix_length} IPv6 subnet in block {block_id}"
    )
    subnets = require_candidates(subnets, "IPv6 subnet")
    return FreeSubnetsResponse(
        space_id=space_id,
        block_id=block_id,
        prefix_length=prefix_length,
        subnets=subnets,
        addresses=[long_ip6_to_short_ip6(hex_ip6_to_ip6(subnet)) for subnet in subnets],
    )

# Free VLAN Routes
@router.get("/vlan-domains/{domain_name}/free-vlans", response_model=FreeVlansResponse)
@handle_solidserver_errors
async def free_vlans(
    domain_name: str,
    service: AllocationService = Depends(get_allocation_service)
):
    """Suggest free VLAN IDs in a VLAN domain"""
    vlan_ids = await run_solidserver_get(
        lambda: service.find_free_vlan_id(domain_name),
        f"find free vlan in domain {domain_name}"
    )
    return FreeVlansResponse(
        domain_name=domain_name,
        vlan_ids=require_candidates(vlan_ids, "vlan ID"),
    )

# Address Conversion Routes
@router.get("/addresses/{address}", response_model=AddressRepresentations)
@handle_solidserver_errors
async def address_representations(address: str):
    """Show the wire, integer and PTR forms of an IP address"""
    if ":" in address:
        hex_address = ip6_to_hex_ip6(address)
        if not hex_address:
            raise InvalidAddressError(f"Invalid IPv6 address: {address!r}")

        return AddressRepresentations(
            address=address,
            version=6,
            hex=hex_address,
            ptr=ip6_to_ptr(address),
            compressed=long_ip6_to_short_ip6(address),
            exploded=short_ip6_to_long_ip6(address),
        )

    hex_address = ip_to_hex_ip(address)
    if not hex_address:
        raise InvalidAddressError(f"Invalid IP address: {address!r}")

    return AddressRepresentations(
        address=address,
        version=4,
        hex=hex_address,
        long=ip_to_long(address),
        ptr=ip_to_ptr(address),
    )
