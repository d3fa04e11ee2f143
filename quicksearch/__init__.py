# Quicksearch Core Package
"""
Query-processing and item-state core for a "type and act" search surface.

Components:
  - Calculator (search.handlers.calculator): arithmetic query classification
  - Fuzzy matching (search.fuzzy, search.strategies): relevance scoring
  - Shortcuts (search.shortcuts): trailing-token search engine redirects
  - Item state (services.management): pin / exclude / nickname handling
"""

__version__ = "0.1.0-dev"
