"""Dispatch core: command and component routing."""
