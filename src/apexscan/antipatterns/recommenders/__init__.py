"""
Antipattern Recommenders

Fix instructions and safe rewrites per antipattern kind.
"""

from apexscan.antipatterns.recommenders.base import BaseRecommender
from apexscan.antipatterns.recommenders.soql_unused_fields_recommender import SOQLUnusedFieldsRecommender
from apexscan.antipatterns.recommenders.static_recommenders import (
    GGDRecommender,
    SOQLNoWhereLimitRecommender,
)

__all__ = [
    "BaseRecommender",
    "GGDRecommender",
    "SOQLNoWhereLimitRecommender",
    "SOQLUnusedFieldsRecommender",
]
