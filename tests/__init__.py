"""Tests for the Plejd integration."""
