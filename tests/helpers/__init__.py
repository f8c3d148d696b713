"""Shared test doubles for the contractform test suite."""
