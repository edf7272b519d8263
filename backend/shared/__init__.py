"""
Shared module for cross-cutting concerns of the menu service.

STRUCTURE:
- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging
  - constants.py: Link types, entity types, query limits

- shared.infrastructure: Database
  - db.py: SQLAlchemy sessions, transaction()

- shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db, transaction
    from shared.config.settings import settings
    from shared.config.constants import LinkType, EntityTypes
    from shared.utils.exceptions import NotFoundError, MalformedQueryError
"""

# This module provides no re-exports.
# All imports should use the canonical paths as documented above.
