"""Dockship commands."""
