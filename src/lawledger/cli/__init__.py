"""CLI package for lawledger."""
