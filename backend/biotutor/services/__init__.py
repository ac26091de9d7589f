"""
Service layer for BioTutor.

- accounts: registration and credential verification
- progress: lesson completion ledger
- completion: streaming proxy to the completion provider
"""
