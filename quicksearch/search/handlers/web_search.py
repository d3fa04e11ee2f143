"""
Web Search Handler - Redirect queries to a search engine by shortcut code.

Triggers when the last (or first) word of a multi-word query is an enabled
shortcut code:
  weather news ggl   → Google: "weather news"
  lofi beats ytm     → YouTube Music: "lofi beats"
  ddg privacy tools  → DuckDuckGo: "privacy tools"

Engines are checked in catalogue order. Codes are configurable via
settings.toml [shortcuts.<engine>] sections and at runtime through
ShortcutRegistry.
"""

import urllib.parse

from quicksearch.models import ResultItem, WebSearchResult
from quicksearch.search.shortcuts import ShortcutRegistry, detect, detect_at_start

# Catalogue order is the shortcut detection order
DEFAULT_ENGINES = {
    "google": {"name": "Google", "url": "https://www.google.com/search?q={query}", "shortcut": "ggl"},
    "chatgpt": {"name": "ChatGPT", "url": "https://chatgpt.com/?prompt={query}", "shortcut": "cgpt"},
    "gemini": {"name": "Gemini", "url": "https://gemini.google.com/app?text={query}", "shortcut": "gmi"},
    "perplexity": {"name": "Perplexity", "url": "https://www.perplexity.ai/search?q={query}", "shortcut": "ppx"},
    "grok": {"name": "Grok", "url": "https://grok.com/?q={query}", "shortcut": "grk"},
    "google_maps": {"name": "Google Maps", "url": "https://maps.google.com/?q={query}", "shortcut": "mps"},
    "google_drive": {"name": "Google Drive", "url": "https://drive.google.com/drive/u/0/search?q={query}", "shortcut": "gdr"},
    "google_photos": {"name": "Google Photos", "url": "https://photos.google.com/search/{query}", "shortcut": "gph"},
    "google_play": {"name": "Google Play", "url": "https://play.google.com/store/search?q={query}&c=apps", "shortcut": "gpl"},
    "reddit": {"name": "Reddit", "url": "https://www.reddit.com/search/?q={query}", "shortcut": "rdt"},
    "youtube": {"name": "YouTube", "url": "https://www.youtube.com/results?search_query={query}", "shortcut": "ytb"},
    "youtube_music": {"name": "YouTube Music", "url": "https://music.youtube.com/search?q={query}", "shortcut": "ytm"},
    "spotify": {"name": "Spotify", "url": "https://open.spotify.com/search/{query}", "shortcut": "sfy"},
    "facebook_marketplace": {"name": "Facebook Marketplace", "url": "https://www.facebook.com/marketplace/search/?query={query}", "shortcut": "fbm"},
    "amazon": {"name": "Amazon", "url": "https://www.amazon.com/s?k={query}", "shortcut": "amz"},
    "you_com": {"name": "You.com", "url": "https://you.com/search?q={query}", "shortcut": "yu"},
    "duckduckgo": {"name": "DuckDuckGo", "url": "https://duckduckgo.com/?q={query}", "shortcut": "ddg"},
    "brave": {"name": "Brave", "url": "https://search.brave.com/search?q={query}", "shortcut": "brv"},
    "bing": {"name": "Bing", "url": "https://www.bing.com/search?q={query}", "shortcut": "bng"},
    "x": {"name": "X", "url": "https://x.com/search?q={query}", "shortcut": "twt"},
    "ai_mode": {"name": "AI mode", "url": "https://www.google.com/search?q={query}&udm=50", "shortcut": "gai"},
}


def default_shortcuts(engines: dict | None = None) -> dict[str, str]:
    """Map engine id -> default shortcut code, preserving catalogue order."""
    engines = engines or DEFAULT_ENGINES
    return {engine_id: engine["shortcut"] for engine_id, engine in engines.items()}


def build_search_url(engine: dict, query: str) -> str:
    return engine["url"].format(query=urllib.parse.quote_plus(query.strip()))


class WebSearchHandler:
    """Send shortcut-tagged queries to the matching search engine."""

    name = "web_search"
    priority = 200

    def __init__(self, registry: ShortcutRegistry, engines: dict | None = None):
        self.registry = registry
        self.engines = engines or DEFAULT_ENGINES

    def resolve(self, query: str) -> tuple[str, str] | None:
        """Return (search_term, engine_id) for a shortcut query, else None."""
        table = self.registry.snapshot()
        return detect(query, table) or detect_at_start(query, table)

    def matches(self, query: str) -> bool:
        return self.resolve(query) is not None

    def get_results(self, query: str) -> list[ResultItem]:
        resolved = self.resolve(query)
        if resolved is None:
            return []

        search_term, engine_id = resolved
        engine = self.engines.get(engine_id)
        if engine is None:
            return []

        return [WebSearchResult(
            destination=engine_id,
            engine_name=engine["name"],
            query=search_term,
            url=build_search_url(engine, search_term),
        )]
