"""Tests for the ConductIP integration."""
