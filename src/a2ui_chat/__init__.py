"""a2ui-chat - a conversational client for agents that speak A2UI."""

from .classifier import classify
from .coordinator import TurnCoordinator
from .errors import A2UIChatError, TransportError
from .rendering import RenderingProcessor, SurfaceStore
from .router import RoutedParts, route
from .transport import TransportClient

__version__ = "0.1.0"

__all__ = [
    "A2UIChatError",
    "RenderingProcessor",
    "RoutedParts",
    "SurfaceStore",
    "TransportClient",
    "TransportError",
    "TurnCoordinator",
    "classify",
    "route",
]
