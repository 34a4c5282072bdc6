"""Domain layer - values, schema entities and the condition evaluator."""
