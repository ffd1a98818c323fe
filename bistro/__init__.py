"""Bistro: restaurant management API."""
