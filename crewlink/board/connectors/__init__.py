"""Upstream board API connectors."""

from .monday import GraphQLClient, MondayConnector

__all__ = ["GraphQLClient", "MondayConnector"]
