"""
GrantLedger core: balance ledger, vesting engine, access collaborators,
persistence and the GrantToken facade.
"""
