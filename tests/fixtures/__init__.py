"""Helper modules shared by the test suite."""
