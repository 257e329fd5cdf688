"""Utility helpers for dockercli."""
