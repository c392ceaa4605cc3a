"""Onboard network stack for nanosatellite swarms: router unit, range filter, UDP forwarder and OLSR hello exchange."""

__version__ = "0.1.0"
__all__ = ["__version__"]