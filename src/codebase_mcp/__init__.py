"""Codebase snapshot tools served over STDIO."""
