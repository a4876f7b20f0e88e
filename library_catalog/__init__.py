"""Library Catalog - Core Package

This package contains the in-memory bookkeeping for the library console:
- Item variants and their late-fee rates (items.py)
- Members and their borrowed items (member.py)
- Lending results, transactions and search results (models.py)
- Late fee arithmetic (fees.py)
- The Library aggregate: catalog, registry, lending ledger and reports (library.py)
- Demo records for the console (sample_data.py)
"""
