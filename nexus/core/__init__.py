"""Reconciliation core: loader, graph, plan, summary, state store and engine."""
