"""Middleware applied between command resolution and invocation."""
