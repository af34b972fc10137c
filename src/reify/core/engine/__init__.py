"""Engine - Recursive evaluation of validator trees."""

from reify.core.engine.evaluator import EvaluationContext, evaluate, explain, run

__all__ = ["EvaluationContext", "evaluate", "explain", "run"]
