"""Command line tool for canary-variants."""
