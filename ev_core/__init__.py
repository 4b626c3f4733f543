"""Core (UI-agnostic) EV dashboard logic.

This package contains:
- data loading (CSV -> pandas) and row coercion helpers
- filter criteria normalization and the filter engine
- column resolution, summary aggregation, pagination and export projection
- CSV / XLSX / PDF report serializers
- page compute functions (JSON-serializable payloads)
- chart helpers (Altair -> Vega-Lite spec dict)
"""
