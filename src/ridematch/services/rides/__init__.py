"""Ride lifecycle orchestration."""
