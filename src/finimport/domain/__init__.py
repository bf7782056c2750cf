"""Domain layer for finimport application.

Services are imported from their modules (e.g. ``finimport.domain.orchestrator``);
this package does not re-export them because the database layer imports
``finimport.domain.entities`` during its own initialization.
"""
