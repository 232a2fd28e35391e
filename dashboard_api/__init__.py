"""Dropshipping agent dashboard: REST API, real-time relay and client state store."""

__version__ = "0.1.0"
