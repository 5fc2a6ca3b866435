"""Ohrenbär archive - keep a local copy of the Ohrenbär podcast catalog."""

__version__ = "0.1.0"
