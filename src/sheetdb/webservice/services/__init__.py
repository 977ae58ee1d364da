"""Helpers shared by the routers."""
