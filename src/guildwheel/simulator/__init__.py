"""Desktop simulator for the wheel."""
