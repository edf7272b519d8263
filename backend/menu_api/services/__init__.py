"""
Services layer: request context, query parsing, hooks and domain services.

Import from the subpackages (menu_api.services.domain,
menu_api.services.query, ...) to keep this package free of import cycles
with the repositories.
"""
