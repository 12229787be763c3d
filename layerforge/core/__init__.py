"""Core models shared across the catalog, generator and rarity stages."""
