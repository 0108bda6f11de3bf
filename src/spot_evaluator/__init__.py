"""Spot Evaluator - cheaper spot instance replacements for Kubernetes node groups"""

__version__ = "0.1.0"
