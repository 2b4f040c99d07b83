"""
Core temporal model, estimation primitives, and contracts.

This module contains the foundational building blocks of temporal
sequences: units, steps, point domains and numerically safe estimation.
"""
