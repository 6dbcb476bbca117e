"""Tests for the Dragon Ball favorites project."""
