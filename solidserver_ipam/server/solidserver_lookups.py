"""
SOLIDserver Lookup Helpers

This module resolves object IDs (spaces, subnets, pools, addresses, VLANs,
devices) from the names and addresses users know them by. Each lookup
returns None when the server has no matching object; transport failures
propagate.
"""

import logging
from typing import Optional, Type

from ..utils.address_codec import (
    hex_ip_to_ip, hex_ip6_to_ip6, ip_to_hex_ip, ip6_to_hex_ip6, size_to_prefix_length
)
from .solidserver_client import SOLIDserver, RecordT
from .solidserver_constants import (
    SERVICE_IP_SITE_LIST, SERVICE_IP_BLOCK_SUBNET_LIST, SERVICE_IP6_BLOCK6_SUBNET6_LIST,
    SERVICE_IP_POOL_LIST, SERVICE_IP6_POOL6_LIST, SERVICE_IP_USED_ADDRESS_LIST,
    SERVICE_IP6_ADDRESS6_LIST, SERVICE_VLMDOMAIN_LIST, SERVICE_VLMVLAN_LIST, SERVICE_HOSTDEV_LIST
)
from .solidserver_models import (
    SpaceRecord, SubnetRecord, Subnet6Record, PoolRecord, Pool6Record, AddressRecord,
    Address6Record, VlanDomainRecord, VlanRecord, DeviceRecord, SubnetInfo
)
from .solidserver_query import WhereClause

logger = logging.getLogger(__name__)


def _to_int(value: Optional[str]) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class SOLIDserverLookups:
    """Name to object ID resolution against a SOLIDserver"""

    def __init__(self, server: SOLIDserver):
        """Initialize with a SOLIDserver session"""
        self.server = server

    def _first_record(self, service: str, where: WhereClause, model: Type[RecordT]) -> Optional[RecordT]:
        response = self.server.request("get", service, {"WHERE": str(where)})

        if response.status_code != 200:
            return None

        records = response.parse(model)
        return records[0] if records else None

    def space_id_by_name(self, space_name: str) -> Optional[str]:
        """Get the ID of an IP space"""
        where = WhereClause().equals("site_name", space_name, lower=True)
        record = self._first_record(SERVICE_IP_SITE_LIST, where, SpaceRecord)

        if record is None or not record.site_id:
            logger.debug(f"Unable to find IP space: {space_name}")
            return None

        return record.site_id

    @staticmethod
    def _subnet_where(space_id: str, name_field: str, subnet_name: str, terminal: bool) -> WhereClause:
        return (WhereClause()
                .equals("site_id", space_id)
                .equals(name_field, subnet_name, lower=True)
                .equals("is_terminal", "1" if terminal else "0"))

    def _subnet_record(self, space_id: str, subnet_name: str, terminal: bool) -> Optional[SubnetRecord]:
        where = self._subnet_where(space_id, "subnet_name", subnet_name, terminal)
        record = self._first_record(SERVICE_IP_BLOCK_SUBNET_LIST, where, SubnetRecord)

        if record is None or not record.subnet_id:
            logger.debug(f"Unable to find IP subnet: {subnet_name}")
            return None

        return record

    def subnet_id_by_name(self, space_id: str, subnet_name: str, terminal: bool = True) -> Optional[str]:
        """Get the ID of an IPv4 subnet (terminal) or block (non terminal)"""
        record = self._subnet_record(space_id, subnet_name, terminal)
        return record.subnet_id if record else None

    def subnet_info_by_name(self, space_id: str, subnet_name: str, terminal: bool = True) -> Optional[SubnetInfo]:
        """Get IPv4 subnet details

        The prefix length is derived from the subnet size, a size that is not
        a power of two rounds down to the next smaller block.
        """
        record = self._subnet_record(space_id, subnet_name, terminal)
        if record is None:
            return None

        size = _to_int(record.subnet_size)

        return SubnetInfo(
            id=record.subnet_id,
            name=record.subnet_name,
            size=size,
            prefix_length=size_to_prefix_length(size) if size is not None else None,
            start_hex_addr=record.start_ip_addr,
            start_addr=hex_ip_to_ip(record.start_ip_addr) if record.start_ip_addr else None,
            end_hex_addr=record.end_ip_addr,
            end_addr=hex_ip_to_ip(record.end_ip_addr) if record.end_ip_addr else None,
            terminal=record.is_terminal,
            level=record.subnet_level,
        )

    def _subnet6_record(self, space_id: str, subnet_name: str, terminal: bool) -> Optional[Subnet6Record]:
        where = self._subnet_where(space_id, "subnet6_name", subnet_name, terminal)
        record = self._first_record(SERVICE_IP6_BLOCK6_SUBNET6_LIST, where, Subnet6Record)

        if record is None or not record.subnet6_id:
            logger.debug(f"Unable to find IPv6 subnet: {subnet_name}")
            return None

        return record

    def subnet6_id_by_name(self, space_id: str, subnet_name: str, terminal: bool = True) -> Optional[str]:
        """Get the ID of an IPv6 subnet (terminal) or block (non terminal)"""
        record = self._subnet6_record(space_id, subnet_name, terminal)
        return record.subnet6_id if record else None

    def subnet6_info_by_name(self, space_id: str, subnet_name: str, terminal: bool = True) -> Optional[SubnetInfo]:
        """Get IPv6 subnet details"""
        record = self._subnet6_record(space_id, subnet_name, terminal)
        if record is None:
            return None

        return SubnetInfo(
            id=record.subnet6_id,
            name=record.subnet6_name,
            prefix_length=_to_int(record.subnet6_prefix),
            start_hex_addr=record.start_ip6_addr,
            start_addr=hex_ip6_to_ip6(record.start_ip6_addr) if record.start_ip6_addr else None,
            end_hex_addr=record.end_ip6_addr,
            end_addr=hex_ip6_to_ip6(record.end_ip6_addr) if record.end_ip6_addr else None,
            terminal=record.is_terminal,
            level=record.subnet_level,
        )

    def _pool_record(self, space_id: str, pool_name: str, subnet_name: str) -> Optional[PoolRecord]:
        where = (WhereClause()
                 .equals("site_id", space_id)
                 .equals("pool_name", pool_name, lower=True)
                 .equals("subnet_name", subnet_name, lower=True))
        record = self._first_record(SERVICE_IP_POOL_LIST, where, PoolRecord)

        if record is None or not record.pool_id:
            logger.debug(f"Unable to find IP pool: {pool_name}")
            return None

        return record

    def pool_id_by_name(self, space_id: str, pool_name: str, subnet_name: str) -> Optional[str]:
        """Get the ID of an IPv4 pool inside a named subnet"""
        record = self._pool_record(space_id, pool_name, subnet_name)
        return record.pool_id if record else None

    def pool_info_by_name(self, space_id: str, pool_name: str, subnet_name: str) -> Optional[SubnetInfo]:
        """Get IPv4 pool details"""
        record = self._pool_record(space_id, pool_name, subnet_name)
        if record is None:
            return None

        return SubnetInfo(
            id=record.pool_id,
            name=record.pool_name,
            size=_to_int(record.pool_size),
            start_hex_addr=record.start_ip_addr,
            start_addr=hex_ip_to_ip(record.start_ip_addr) if record.start_ip_addr else None,
            end_hex_addr=record.end_ip_addr,
            end_addr=hex_ip_to_ip(record.end_ip_addr) if record.end_ip_addr else None,
        )

    def _pool6_record(self, space_id: str, pool_name: str, subnet_name: str) -> Optional[Pool6Record]:
        where = (WhereClause()
                 .equals("site_id", space_id)
                 .equals("pool6_name", pool_name, lower=True)
                 .equals("subnet6_name", subnet_name, lower=True))
        record = self._first_record(SERVICE_IP6_POOL6_LIST, where, Pool6Record)

        if record is None or not record.pool6_id:
            logger.debug(f"Unable to find IPv6 pool: {pool_name}")
            return None

        return record

    def pool6_id_by_name(self, space_id: str, pool_name: str, subnet_name: str) -> Optional[str]:
        """Get the ID of an IPv6 pool inside a named subnet"""
        record = self._pool6_record(space_id, pool_name, subnet_name)
        return record.pool6_id if record else None

    def pool6_info_by_name(self, space_id: str, pool_name: str, subnet_name: str) -> Optional[SubnetInfo]:
        """Get IPv6 pool details"""
        record = self._pool6_record(space_id, pool_name, subnet_name)
        if record is None:
            return None

        return SubnetInfo(
            id=record.pool6_id,
            name=record.pool6_name,
            size=_to_int(record.pool6_size),
            start_hex_addr=record.start_ip6_addr,
            start_addr=hex_ip6_to_ip6(record.start_ip6_addr) if record.start_ip6_addr else None,
            end_hex_addr=record.end_ip6_addr,
            end_addr=hex_ip6_to_ip6(record.end_ip6_addr) if record.end_ip6_addr else None,
        )

    def address_id_by_ip(self, space_id: str, ip_address: str) -> Optional[str]:
        """Get the ID of a used IPv4 address"""
        hex_address = ip_to_hex_ip(ip_address)
        if not hex_address:
            logger.debug(f"Invalid IP address: {ip_address}")
            return None

        where = WhereClause().equals("site_id", space_id).equals("ip_addr", hex_address)
        record = self._first_record(SERVICE_IP_USED_ADDRESS_LIST, where, AddressRecord)

        if record is None or not record.ip_id:
            logger.debug(f"Unable to find IP address: {ip_address}")
            return None

        return record.ip_id

    def address6_id_by_ip6(self, space_id: str, ip_address: str) -> Optional[str]:
        """Get the ID of an IPv6 address"""
        hex_address = ip6_to_hex_ip6(ip_address)
        if not hex_address:
            logger.debug(f"Invalid IPv6 address: {ip_address}")
            return None

        where = WhereClause().equals("site_id", space_id).equals("ip6_addr", hex_address)
        record = self._first_record(SERVICE_IP6_ADDRESS6_LIST, where, Address6Record)

        if record is None or not record.ip6_id:
            logger.debug(f"Unable to find IPv6 address: {ip_address}")
            return None

        return record.ip6_id

    def vlan_domain_id_by_name(self, domain_name: str) -> Optional[str]:
        """Get the ID of a VLAN domain"""
        where = WhereClause().equals("vlmdomain_name", domain_name, lower=True)
        record = self._first_record(SERVICE_VLMDOMAIN_LIST, where, VlanDomainRecord)

        if record is None or not record.vlmdomain_id:
            logger.debug(f"Unable to find vlan domain: {domain_name}")
            return None

        return record.vlmdomain_id

    def vlan_oid_by_info(self, domain_name: str, vlan_id: int) -> Optional[str]:
        """Get the object ID of a VLAN from its domain and VLAN number

        The domain name is matched as given, without lower-casing.
        """
        where = (WhereClause()
                 .equals("vlmdomain_name", domain_name)
                 .equals("vlmvlan_vlan_id", vlan_id))
        record = self._first_record(SERVICE_VLMVLAN_LIST, where, VlanRecord)

        if record is None or not record.vlmvlan_id:
            logger.debug(f"Unable to find vlan: {vlan_id} in domain {domain_name}")
            return None

        return record.vlmvlan_id

    def device_id_by_name(self, device_name: str) -> Optional[str]:
        """Get the ID of a device manager host"""
        where = WhereClause().equals("hostdev_name", device_name, lower=True)
        record = self._first_record(SERVICE_HOSTDEV_LIST, where, DeviceRecord)

        if record is None or not record.hostdev_id:
            logger.debug(f"Unable to find device: {device_name}")
            return None

        return record.hostdev_id
