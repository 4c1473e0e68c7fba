"""Anonyma: anonymous messaging threads with live notification fan-out."""
