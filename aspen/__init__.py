"""Aspen - scaffolding for Node.js backend projects."""

__version__ = "1.0.0"
