"""Pipeline stages (empty text, language, quality, dedup)."""
