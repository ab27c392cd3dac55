"""
Server module - SOLIDserver session, lookups and response records

Exports the interface used by the API and the allocation engine.
"""

from .solidserver_client import (
    SOLIDserver, SOLIDserverResponse, init_server, get_server, close_server, run_solidserver_get
)
from .solidserver_lookups import SOLIDserverLookups

__all__ = [
    'SOLIDserver',
    'SOLIDserverResponse',
    'SOLIDserverLookups',
    'init_server',
    'get_server',
    'close_server',
    'run_solidserver_get',
]
