"""Core archive filesystem layer for zserv."""
