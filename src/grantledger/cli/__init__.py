"""GrantLedger command line interface."""
