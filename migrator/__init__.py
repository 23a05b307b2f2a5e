"""Bulk migration of legacy plan documents to the canonical encoding."""
