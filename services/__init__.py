"""
Services for caption lookup, caching and quota accounting.
"""
