"""HTTP API for the Group Finder service."""
