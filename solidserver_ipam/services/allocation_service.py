import ipaddress
import logging
from typing import Callable, Iterable, List, Optional, TypeVar

from ..config.constants import CandidateLimits, AssignmentOrder, PerformanceThresholds
from ..server.solidserver_client import SOLIDserver
from ..server.solidserver_constants import (
    SERVICE_IP_FREE_ADDRESS_LIST, SERVICE_IP_FIND_FREE_ADDRESS, SERVICE_IP6_FIND_FREE_ADDRESS6,
    SERVICE_IP_FIND_FREE_SUBNET, SERVICE_IP6_FIND_FREE_SUBNET6, SERVICE_VLMVLAN_LIST,
    CAPABILITY_VLAN_FREE_RANGES, VLAN_ROW_FREE
)
from ..server.solidserver_models import (
    FreeAddressRange, FoundAddress, FoundAddress6, FoundSubnet, FoundSubnet6, VlanRecord
)
from ..server.solidserver_query import WhereClause
from ..utils.address_codec import hex_ip_to_ip, ip_to_hex_ip, hex_ip6_to_ip6, ip6_to_hex_ip6
from ..utils.error_handlers import InvalidAddressError
from ..utils.logging_decorators import log_operation_timing

logger = logging.getLogger(__name__)

CandidateT = TypeVar("CandidateT")
ResultT = TypeVar("ResultT")

SLOW_MS = PerformanceThresholds.SOLIDSERVER_SLOW_WARNING


class AllocationService:
    """Find free addresses, subnets and VLAN IDs on a SOLIDserver

    Every method is a read-only probe: candidates are neither reserved nor
    locked, so two callers may receive the same ones. The server decides at
    creation time, callers iterate the candidates until one is accepted
    (see claim_first_candidate).

    "No free resource" is an empty list, never an exception. Transport
    failures propagate as SOLIDserverAPIError.
    """

    def __init__(self, server: SOLIDserver):
        self.server = server

    @log_operation_timing("find_free_address", threshold_ms=SLOW_MS)
    def find_free_address(self, subnet_id: str, pool_id: str = "", strategy: str = AssignmentOrder.OPTIMIZED) -> List[str]:
        """Suggest up to 32 free IPv4 addresses in a subnet (optionally a pool)

        Args:
            subnet_id: Subnet object ID
            pool_id: Pool object ID restricting the search, "" for the whole subnet
            strategy: "start" walks free ranges upwards from their start, "end"
                walks downwards from their end, anything else lets the server
                choose ("optimized")
        """
        if strategy in (AssignmentOrder.START, AssignmentOrder.END):
            return self._walk_free_ranges(subnet_id, pool_id, strategy)

        parameters = {"subnet_id": subnet_id, "max_find": CandidateLimits.ADDRESSES}
        if pool_id:
            parameters["pool_id"] = pool_id

        response = self.server.request("get", SERVICE_IP_FIND_FREE_ADDRESS, parameters)

        if response.status_code == 200:
            addresses = [found.hostaddr for found in response.parse(FoundAddress) if found.hostaddr]
            for address in addresses[:CandidateLimits.ADDRESSES]:
                logger.debug(f"Suggested IP address: {address}")
            if addresses:
                return addresses[:CandidateLimits.ADDRESSES]

        logger.debug(f"Unable to find a free IP address in subnet (oid): {subnet_id}")
        return []

    def _walk_free_ranges(self, subnet_id: str, pool_id: str, strategy: str) -> List[str]:
        where = (WhereClause()
                 .compare_fields("free_start_ip_addr", "!=", "free_end_ip_addr")
                 .equals("subnet_id", subnet_id))
        if pool_id:
            where.equals("pool_id", pool_id)

        parameters = {"WHERE": str(where)}
        if strategy == AssignmentOrder.START:
            parameters["ORDERBY"] = "free_start_ip_addr asc"
        else:
            parameters["ORDERBY"] = "free_end_ip_addr desc"

        response = self.server.request("get", SERVICE_IP_FREE_ADDRESS_LIST, parameters)

        if response.status_code != 200:
            logger.debug(f"Unable to find a free IP address in subnet (oid): {subnet_id}")
            return []

        addresses: List[str] = []

        for free_range in response.parse(FreeAddressRange):
            if free_range.free_start_ip_addr is None or free_range.free_end_ip_addr is None:
                continue

            start_ip = hex_ip_to_ip(free_range.free_start_ip_addr)
            end_ip = hex_ip_to_ip(free_range.free_end_ip_addr)

            if not start_ip or not end_ip:
                logger.debug(
                    f"Unable to compute free range start/end IP addresses: "
                    f"{free_range.free_start_ip_addr}/{free_range.free_end_ip_addr}"
                )
                continue

            start = int(ipaddress.IPv4Address(start_ip))
            end = int(ipaddress.IPv4Address(end_ip))

            if strategy == AssignmentOrder.START:
                steps = range(start, end + 1)
            else:
                steps = range(end, start - 1, -1)

            for value in steps:
                if len(addresses) >= CandidateLimits.ADDRESSES:
                    return addresses

                address = str(ipaddress.IPv4Address(value))
                logger.debug(f"Suggested IP address: {address}")
                addresses.append(address)

        return addresses

    @log_operation_timing("find_free_address6", threshold_ms=SLOW_MS)
    def find_free_address6(self, subnet_id: str, pool_id: str = "") -> List[str]:
        """Suggest up to 32 free IPv6 addresses, placement chosen by the server"""
        parameters = {"subnet6_id": subnet_id, "max_find": CandidateLimits.ADDRESSES}
        if pool_id:
            parameters["pool6_id"] = pool_id

        response = self.server.request("get", SERVICE_IP6_FIND_FREE_ADDRESS6, parameters)

        if response.status_code == 200:
            addresses = [found.hostaddr6 for found in response.parse(FoundAddress6) if found.hostaddr6]
            for address in addresses[:CandidateLimits.ADDRESSES]:
                logger.debug(f"Suggested IPv6 address: {address}")
            if addresses:
                return addresses[:CandidateLimits.ADDRESSES]

        logger.debug(f"Unable to find a free IPv6 address in subnet (oid): {subnet_id}")
        return []

    @log_operation_timing("find_free_subnet", threshold_ms=SLOW_MS)
    def find_free_subnet(self, space_id: str, block_id: str, requested_address: str, prefix_length: int) -> List[str]:
        """Suggest up to 16 free IPv4 subnets of a prefix length under a block

        Candidates are start addresses in wire hex form, ready for the
        subnet creation call. A requested address is returned as the only
        candidate without asking the server.

        Raises:
            InvalidAddressError: If requested_address is not a valid IPv4 address
        """
        if requested_address:
            hex_address = ip_to_hex_ip(requested_address)
            if not hex_address:
                raise InvalidAddressError(f"Invalid requested subnet address: {requested_address!r}")
            return [hex_address]

        parameters = {
            "site_id": space_id,
            "prefix": prefix_length,
            "max_find": CandidateLimits.SUBNETS,
            "block_id": block_id,
        }

        response = self.server.request("get", SERVICE_IP_FIND_FREE_SUBNET, parameters)

        if response.status_code == 200:
            subnets = []
            for found in response.parse(FoundSubnet)[:CandidateLimits.SUBNETS]:
                if found.start_ip_addr:
                    logger.debug(f"Suggested IP subnet address: {hex_ip_to_ip(found.start_ip_addr)}")
                    subnets.append(found.start_ip_addr)
            if subnets:
                return subnets

        logger.debug(
            f"Unable to find a free IP subnet in space (oid): {space_id}, block (oid): {block_id}, "
            f"size: {prefix_length}"
        )
        return []

    @log_operation_timing("find_free_subnet6", threshold_ms=SLOW_MS)
    def find_free_subnet6(self, space_id: str, block_id: str, requested_address: str, prefix_length: int) -> List[str]:
        """IPv6 counterpart of find_free_subnet (candidates are 32 hex digit strings)

        Raises:
            InvalidAddressError: If requested_address is not a valid IPv6 address
        """
        if requested_address:
            hex_address = ip6_to_hex_ip6(requested_address)
            if not hex_address:
                raise InvalidAddressError(f"Invalid requested subnet address: {requested_address!r}")
            return [hex_address]

        parameters = {
            "site_id": space_id,
            "prefix": prefix_length,
            "max_find": CandidateLimits.SUBNETS,
            "block6_id": block_id,
        }

        response = self.server.request("get", SERVICE_IP6_FIND_FREE_SUBNET6, parameters)

        if response.status_code == 200:
            subnets = []
            for found in response.parse(FoundSubnet6)[:CandidateLimits.SUBNETS]:
                if found.start_ip6_addr:
                    logger.debug(f"Suggested IPv6 subnet address: {hex_ip6_to_ip6(found.start_ip6_addr)}")
                    subnets.append(found.start_ip6_addr)
            if subnets:
                return subnets

        logger.debug(
            f"Unable to find a free IPv6 subnet in space (oid): {space_id}, block (oid): {block_id}, "
            f"size: {prefix_length}"
        )
        return []

    @log_operation_timing("find_free_vlan_id", threshold_ms=SLOW_MS)
    def find_free_vlan_id(self, domain_name: str) -> List[int]:
        """Suggest up to 16 free VLAN IDs in a VLAN domain

        Servers before 7.0 list every VLAN row and flag the free ones; 7.0
        and later list free [start, end) ranges instead.
        """
        free_ranges = self.server.supports(CAPABILITY_VLAN_FREE_RANGES)

        where = WhereClause().equals("vlmdomain_name", domain_name, lower=True)
        if free_ranges:
            where.equals("type", "free")
        else:
            where.equals("row_enabled", VLAN_ROW_FREE)

        parameters = {"limit": CandidateLimits.VLANS, "WHERE": str(where)}

        response = self.server.request("get", SERVICE_VLMVLAN_LIST, parameters)

        vlan_ids: List[int] = []

        if response.status_code == 200:
            records = response.parse(VlanRecord)
            if free_ranges:
                vlan_ids = self._walk_free_vlan_ranges(records)
            else:
                vlan_ids = self._flagged_free_vlans(records)

        if not vlan_ids:
            logger.debug(f"Unable to find a free vlan ID in vlan domain: {domain_name}")

        return vlan_ids

    @staticmethod
    def _flagged_free_vlans(records: List[VlanRecord]) -> List[int]:
        vlan_ids = []

        for record in records:
            if len(vlan_ids) >= CandidateLimits.VLANS:
                break
            try:
                vlan_id = int(record.vlmvlan_vlan_id)
            except (TypeError, ValueError):
                continue
            logger.debug(f"Suggested vlan ID: {vlan_id}")
            vlan_ids.append(vlan_id)

        return vlan_ids

    @staticmethod
    def _walk_free_vlan_ranges(records: List[VlanRecord]) -> List[int]:
        vlan_ids = []

        for record in records:
            try:
                vlan_id = int(record.free_start_vlan_id)
                max_vlan_id = int(record.free_end_vlan_id)
            except (TypeError, ValueError):
                continue

            taken = 0
            while vlan_id < max_vlan_id and taken < CandidateLimits.VLANS_PER_RANGE:
                if len(vlan_ids) >= CandidateLimits.VLANS:
                    return vlan_ids
                logger.debug(f"Suggested vlan ID: {vlan_id}")
                vlan_ids.append(vlan_id)
                vlan_id += 1
                taken += 1

        return vlan_ids

    @staticmethod
    def claim_first_candidate(
        candidates: Iterable[CandidateT],
        claim: Callable[[CandidateT], Optional[ResultT]],
    ) -> Optional[ResultT]:
        """Try to create the resource with each candidate in turn

        `claim` returns None when the server rejects a candidate (typically
        already taken by a concurrent caller) and the created object
        otherwise. Exceptions raised by `claim` propagate.

        Returns:
            The first accepted result, or None when every candidate was rejected
        """
        for candidate in candidates:
            result = claim(candidate)
            if result is not None:
                return result
            logger.debug(f"Candidate {candidate} rejected, trying the next one")

        return None
