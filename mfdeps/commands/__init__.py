"""CLI subcommands for mfdeps."""
