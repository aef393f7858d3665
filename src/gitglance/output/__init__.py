"""Renderers for parsed git data: terminal, JSON, and YAML."""
