"""
API routes package

Router modules:
- health: health check
- accounting: postings, reports, ledgers and institute accounts
"""
