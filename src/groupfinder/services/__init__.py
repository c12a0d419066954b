# src/groupfinder/services/__init__.py
"""Business logic services for the Group Finder directory."""
