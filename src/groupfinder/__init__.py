"""Group Finder community directory service."""
