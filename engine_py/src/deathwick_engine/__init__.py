"""Deathwick rules engine."""
