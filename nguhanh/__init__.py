"""
Ngũ Hành number analyzer

Classifies and scores 10-digit numbers against the five-element model
for a user's reference element (menh).
"""

__version__ = "0.1.0"
