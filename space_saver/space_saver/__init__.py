"""Warehouse bin consolidation planner."""
