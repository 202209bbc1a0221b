"""
Scoring core package marker.

Import the concrete modules directly, e.g.:

    from services.recommend import recommend, rank_events
    from services.geo import distance
"""
__all__: list[str] = []
