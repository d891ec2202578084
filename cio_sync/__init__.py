"""
cio-sync: runner de sincronizacion Airtable -> PostgreSQL por empresa.

Cada invocacion ejecuta un unico job de sync sobre una o mas empresas
(tenants) y termina. No hay cola persistente ni reintentos entre procesos.
"""

__version__ = "1.0.0"
