"""Encoders for metric documents."""
