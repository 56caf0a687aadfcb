"""Typed functions for each Keybase API endpoint."""
