"""Rating aggregation over approved reviews."""
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List

from marketplace.stores import MarketplaceStore


@dataclass(frozen=True)
class RatingStats:
    average_rating: float
    total_reviews: int

    def to_dict(self):
        return {'averageRating': self.average_rating, 'totalReviews': self.total_reviews}


EMPTY_STATS = RatingStats(0, 0)


def summarize_ratings(ratings: Iterable) -> RatingStats:
    """Average and count; zero reviews average to 0."""
    values: List[float] = [float(r or 0) for r in ratings]
    if not values:
        return EMPTY_STATS
    return RatingStats(sum(values) / len(values), len(values))


def get_product_rating(store: MarketplaceStore, product_id) -> RatingStats:
    return summarize_ratings(store.find_approved_ratings(product_id=product_id))


def get_vendor_rating(store: MarketplaceStore, vendor_id) -> RatingStats:
    return summarize_ratings(store.find_approved_ratings(vendor_id=vendor_id))


def get_batch_product_ratings(store: MarketplaceStore, product_ids) -> Dict[object, RatingStats]:
    """
    Stats for every requested product in one query.

    Products without approved reviews are present with zero stats.
    """
    product_ids = list(product_ids)
    grouped = defaultdict(list)
    for product_id, rating in store.find_approved_ratings_by_product(product_ids):
        grouped[product_id].append(rating)
    
    return {pid: summarize_ratings(grouped.get(pid, [])) for pid in product_ids}


def format_rating_text(stats: RatingStats) -> str:
    if stats.total_reviews == 0:
        return 'No reviews yet'
    plural = 's' if stats.total_reviews != 1 else ''
    return f"({stats.average_rating:.1f}) • {stats.total_reviews} review{plural}"
