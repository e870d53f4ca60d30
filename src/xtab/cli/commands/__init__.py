"""Command implementations, imported lazily by cli.main."""
