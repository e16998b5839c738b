"""Command line interface for billkit."""
