"""Ports layer - the contracts the engine offers to its callers.

- Inbound ports: operation requests accepted by the engine and the
  ExecutionResult it answers with.
"""
