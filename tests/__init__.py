"""Tests for canary-variants."""
