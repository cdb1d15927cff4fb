# Services package init
"""
Blog Backend: Services Layer
=============================

Service Inventory:
    - PostGateway: the persistence gateway, the only code that issues
      queries against authors and posts

Services receive an AsyncSession and never see HTTP objects, so they can be
tested with a mock session or an in-memory SQLite database.
"""
