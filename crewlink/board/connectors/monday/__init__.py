"""Monday.com connector."""

from .client import GraphQLClient
from .provider import MondayConnector

__all__ = ["GraphQLClient", "MondayConnector"]
