"""wikisync — publish a markdown documentation tree as a GitHub Wiki."""

__version__ = "0.1.0"
