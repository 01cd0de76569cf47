"""Test suite for the session relay.

Unit tests live under ``unit/<area>/``, gateway and client tests that run a
real app under ``integration/``, and shared doubles under ``helpers/``.
"""
