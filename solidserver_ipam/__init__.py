"""SOLIDserver IPAM core: address codec, session/transport and allocation engine."""

__version__ = "1.0.0"
