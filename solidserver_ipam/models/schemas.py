from typing import List, Optional
from pydantic import BaseModel, Field

class ServerStatus(BaseModel):
    host: str = Field(..., description="SOLIDserver hostname or IP", examples=["sds.example.com"])
    version: int = Field(..., description="Normalized SOLIDserver version", examples=[801])
    authenticated: bool = Field(..., description="Whether a call has already been accepted by the server")
    capabilities: List[str] = Field(default_factory=list, description="Version gated features available on the server", examples=[["vlan_free_ranges"]])

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "host": "sds.example.com",
                    "version": 801,
                    "authenticated": True,
                    "capabilities": ["application_nodes", "vlan_free_ranges", "vxlan_domains"]
                }
            ]
        }
    }

class FreeAddressesResponse(BaseModel):
    subnet_id: str = Field(..., description="Subnet object ID", examples=["42"])
    pool_id: Optional[str] = Field(default=None, description="Pool object ID the search was restricted to", examples=["7"])
    strategy: Optional[str] = Field(default=None, description="Enumeration strategy (start, end or optimized)", examples=["start"])
    addresses: List[str] = Field(..., description="Free address candidates, in suggestion order", examples=[["10.0.0.1", "10.0.0.2"]])

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "subnet_id": "42",
                    "pool_id": None,
                    "strategy": "start",
                    "addresses": ["10.0.0.1", "10.0.0.2", "10.0.0.3"]
                }
            ]
        }
    }

class FreeSubnetsResponse(BaseModel):
    space_id: str = Field(..., description="IP space object ID", examples=["2"])
    block_id: str = Field(..., description="Parent block object ID", examples=["12"])
    prefix_length: int = Field(..., description="Requested prefix length", examples=[24])
    subnets: List[str] = Field(..., description="Free subnet start addresses in wire hex form", examples=[["0a000100"]])
    addresses: List[str] = Field(..., description="Free subnet start addresses in human form", examples=[["10.0.1.0"]])

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "space_id": "2",
                    "block_id": "12",
                    "prefix_length": 24,
                    "subnets": ["0a000100", "0a000200"],
                    "addresses": ["10.0.1.0", "10.0.2.0"]
                }
            ]
        }
    }

class FreeVlansResponse(BaseModel):
    domain_name: str = Field(..., description="VLAN domain name", examples=["dc1"])
    vlan_ids: List[int] = Field(..., description="Free VLAN ID candidates", examples=[[100, 101, 102]])

class AddressRepresentations(BaseModel):
    address: str = Field(..., description="Address as supplied", examples=["192.168.1.10"])
    version: int = Field(..., description="IP version", examples=[4])
    hex: str = Field(..., description="SOLIDserver wire form", examples=["c0a8010a"])
    long: Optional[int] = Field(default=None, description="Unsigned 32-bit integer (IPv4 only)", examples=[3232235786])
    ptr: str = Field(..., description="PTR record name", examples=["10.1.168.192.in-addr.arpa"])
    compressed: Optional[str] = Field(default=None, description="Compressed textual form (IPv6 only)", examples=["2001:db8::1"])
    exploded: Optional[str] = Field(default=None, description="Fully expanded textual form (IPv6 only)", examples=["2001:0db8:0000:0000:0000:0000:0000:0001"])

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "address": "192.168.1.10",
                    "version": 4,
                    "hex": "c0a8010a",
                    "long": 3232235786,
                    "ptr": "10.1.168.192.in-addr.arpa",
                    "compressed": None,
                    "exploded": None
                }
            ]
        }
    }
