"""Integration tests for the page content editor.

These tests wire the real editing components together against an
in-memory pages API, covering full edit-and-save journeys without a
network.
"""
