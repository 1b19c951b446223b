"""Manifest input/output."""
