"""Packaged JSON schemas for reportagg input documents."""
