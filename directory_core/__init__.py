"""Core (UI-agnostic) company directory logic.

This package contains:
- dataset loading (JSON -> immutable CompanyRecord tuple)
- filter/sort value objects and their normalization
- the filter + sort derivation pipeline
- display formatters (counts, compact currency, table projection)
- debounced criteria editing
"""
