"""
Core data and query layer.

This package contains:
- schema: fields, records and immutable datasets
- data_loader: literal seed rows and the client CSV parser/source
- registry: command keyword -> dataset lookup
- query_engine: search, field filters, date range, stable sort, pagination
"""
