"""Shared test doubles for sockets, transports and clocks."""
