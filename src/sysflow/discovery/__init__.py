"""Workflow discovery: loading definitions from disk and displaying them."""
