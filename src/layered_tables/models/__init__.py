"""
Configuration models for layered temporary tables.

Models:
- DatabaseConfig: MySQL connection settings
- OverlayDefinition: A named, ordered list of source tables

The overlay registry holds the stock overlays, each pairing a base table with
its override table.
"""

from .database_config import DatabaseConfig
from .overlay import OverlayDefinition, validate_identifier

__all__ = [
    'DatabaseConfig',
    'OverlayDefinition',
    'validate_identifier',
    'DEFAULT_OVERLAYS',
    'get_overlay_by_name',
    'get_all_overlay_names'
]

# Overlay registry for dynamic access
DEFAULT_OVERLAYS = {
    'items': OverlayDefinition(
        name='items',
        table_name='items',
        source_tables=['item_db', 'item_db2'],
        description='Item database with custom item overrides'
    ),
    'monsters': OverlayDefinition(
        name='monsters',
        table_name='monsters',
        source_tables=['mob_db', 'mob_db2'],
        description='Monster database with custom monster overrides'
    )
}


def get_overlay_by_name(overlay_name: str, registry=None) -> OverlayDefinition:
    """
    Get an overlay definition by its name.

    Args:
        overlay_name: Name of the overlay (e.g., 'items', 'monsters')
        registry: Registry to search, DEFAULT_OVERLAYS if omitted

    Returns:
        Overlay definition

    Raises:
        KeyError: If overlay name is not found
    """
    if registry is None:
        registry = DEFAULT_OVERLAYS
    if overlay_name not in registry:
        available = ', '.join(registry.keys())
        raise KeyError(f'Overlay "{overlay_name}" not found. Available overlays: {available}')

    return registry[overlay_name]


def get_all_overlay_names(registry=None):
    """
    Get list of all registered overlay names.

    Returns:
        List of overlay names
    """
    if registry is None:
        registry = DEFAULT_OVERLAYS
    return list(registry.keys())
