"""Nagios plugin for checking CTDB event scripts and node liveness."""

__version__ = "1.0.0"
