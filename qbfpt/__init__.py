"""Tabu Search for the maximum quadratic binary function with prohibited triples."""
