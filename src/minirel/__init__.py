"""minirel - a minimal in-memory relational data engine.

Named tables with typed, constrained columns, a single-predicate
condition evaluator, a SQL-like command parser and a REST API.
"""

__version__ = "0.1.0"
__author__ = "minirel contributors"
