"""
SOLIDserver Response Records

Typed views of the JSON records returned by each service. The server encodes
every value as a string and returns many more columns than we use, so all
fields are optional strings and unknown keys are ignored.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class SOLIDserverRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    errmsg: Optional[str] = Field(default=None, description="Business error reported by the server")


class MemberRecord(SOLIDserverRecord):
    member_version: Optional[str] = Field(default=None, examples=["8.0.1"])


class FreeAddressRange(SOLIDserverRecord):
    free_start_ip_addr: Optional[str] = Field(default=None, examples=["0a000001"])
    free_end_ip_addr: Optional[str] = Field(default=None, examples=["0a0000ff"])


class FoundAddress(SOLIDserverRecord):
    hostaddr: Optional[str] = Field(default=None, examples=["10.0.0.1"])


class FoundAddress6(SOLIDserverRecord):
    hostaddr6: Optional[str] = Field(default=None, examples=["2001:db8::1"])


class FoundSubnet(SOLIDserverRecord):
    start_ip_addr: Optional[str] = Field(default=None, examples=["0a000100"])


class FoundSubnet6(SOLIDserverRecord):
    start_ip6_addr: Optional[str] = Field(default=None, examples=["20010db8000000000000000000000000"])


class VlanRecord(SOLIDserverRecord):
    """Row of rest/vlmvlan_list, either a VLAN (pre 7.0) or a free range (7.0+)"""
    vlmvlan_id: Optional[str] = None
    vlmvlan_vlan_id: Optional[str] = None
    free_start_vlan_id: Optional[str] = None
    free_end_vlan_id: Optional[str] = None


class VlanDomainRecord(SOLIDserverRecord):
    vlmdomain_id: Optional[str] = None


class SpaceRecord(SOLIDserverRecord):
    site_id: Optional[str] = None


class SubnetRecord(SOLIDserverRecord):
    subnet_id: Optional[str] = None
    subnet_name: Optional[str] = None
    subnet_size: Optional[str] = None
    start_ip_addr: Optional[str] = None
    end_ip_addr: Optional[str] = None
    is_terminal: Optional[str] = None
    subnet_level: Optional[str] = None


class Subnet6Record(SOLIDserverRecord):
    subnet6_id: Optional[str] = None
    subnet6_name: Optional[str] = None
    subnet6_prefix: Optional[str] = None
    start_ip6_addr: Optional[str] = None
    end_ip6_addr: Optional[str] = None
    is_terminal: Optional[str] = None
    subnet_level: Optional[str] = None


class PoolRecord(SOLIDserverRecord):
    pool_id: Optional[str] = None
    pool_name: Optional[str] = None
    pool_size: Optional[str] = None
    start_ip_addr: Optional[str] = None
    end_ip_addr: Optional[str] = None


class Pool6Record(SOLIDserverRecord):
    pool6_id: Optional[str] = None
    pool6_name: Optional[str] = None
    pool6_size: Optional[str] = None
    start_ip6_addr: Optional[str] = None
    end_ip6_addr: Optional[str] = None


class AddressRecord(SOLIDserverRecord):
    ip_id: Optional[str] = None


class Address6Record(SOLIDserverRecord):
    ip6_id: Optional[str] = None


class DeviceRecord(SOLIDserverRecord):
    hostdev_id: Optional[str] = None


class SubnetInfo(BaseModel):
    """Subnet or pool details with both wire and human addresses"""
    id: str
    name: Optional[str] = None
    size: Optional[int] = None
    prefix_length: Optional[int] = None
    start_hex_addr: Optional[str] = None
    start_addr: Optional[str] = None
    end_hex_addr: Optional[str] = None
    end_addr: Optional[str] = None
    terminal: Optional[str] = None
    level: Optional[str] = None
