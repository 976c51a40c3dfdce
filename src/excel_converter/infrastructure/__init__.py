"""Filesystem helpers backing the conversion use-cases."""
