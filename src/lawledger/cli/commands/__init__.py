"""CLI commands for lawledger."""
