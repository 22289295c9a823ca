"""Candidate education entries, scoped to the calling user."""
