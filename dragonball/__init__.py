"""Favorites view model for the Dragon Ball character catalog."""
