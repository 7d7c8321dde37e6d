"""Experiment package comparing the exact and heuristic engines.

Provides utilities to generate run plans, execute them, and persist run-level results.
"""
