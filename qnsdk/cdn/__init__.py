"""CDN anti-leech URLs, cache refresh, prefetch, statistics and log listing."""

__all__ = ["anti_leech", "api"]