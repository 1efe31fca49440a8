"""Validate-then-persist workflow for the hook settings form."""
