"""Domain layer for billkit application.

Services are imported from their modules (``billkit.domain.invoice`` etc.)
rather than re-exported here, so the database layer can import
``billkit.domain.entities`` without pulling the services in.
"""
