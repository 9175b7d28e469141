"""Command-line interface for the article recommender."""
