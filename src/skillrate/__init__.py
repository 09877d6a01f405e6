"""Glicko-2 skill ratings for competitors."""
