from .registry import CapabilityRegistry
from .server import build_registry, create_server
from .settings import ServerSettings

__all__ = ["CapabilityRegistry", "ServerSettings", "build_registry", "create_server"]
