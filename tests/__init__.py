"""Test suite for busexport."""
