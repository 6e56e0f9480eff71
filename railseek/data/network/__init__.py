"""Bundled European rail network (stations, connections, country facts)."""
