from deployops.schemas.destination import Destination
from deployops.schemas.server import ServerConfig

__all__ = ["Destination", "ServerConfig"]
