"""
Cliente Airtable (system of record) y utilidades puras de mapeo de campos.
"""
