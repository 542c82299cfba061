"""Pure, I/O-free core: movements, search, levels, analytics and CSV import matching."""
