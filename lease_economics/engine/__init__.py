"""Lease economics calculation engine."""
