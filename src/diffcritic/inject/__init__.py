"""Delivery of review text into the user's editing context."""
