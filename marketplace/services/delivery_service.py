"""
Delivery option resolution.

Given a product and a destination, decide whether the product may ship
there (zone check) and list every priced lane that reaches it, with a
summary of the cheapest price, fastest lead time and free options.
"""
import logging
import re
import unicodedata
from dataclasses import dataclass, field, asdict
from decimal import Decimal
from typing import Any, Dict, List, Optional

from marketplace.services.catalog_service import resolve_product
from marketplace.stores import MarketplaceStore
from marketplace.utils.money import to_decimal, money_json

logger = logging.getLogger(__name__)

NOT_ALLOWED_MESSAGE = 'Delivery not allowed to this location'
NO_OPTIONS_MESSAGE = 'No delivery options available for this location'

# Spelling variants seen in customer addresses, keyed by canonical form
DEFAULT_CITY_ALIASES = {
    'hargeysa': 'hargeisa',
}


def normalize_city(value: Optional[str]) -> str:
    """Strip accents, lower-case, drop the word 'city' and any non-alphanumerics."""
    if not value:
        return ''
    decomposed = unicodedata.normalize('NFD', value)
    without_accents = ''.join(ch for ch in decomposed if unicodedata.category(ch) != 'Mn')
    lowered = without_accents.strip().lower()
    lowered = re.sub(r'\bcity\b', '', lowered)
    return re.sub(r'[^a-z0-9]', '', lowered)


def canonicalize_city(value: Optional[str], aliases: Optional[Dict[str, str]] = None) -> str:
    normalized = normalize_city(value)
    table = aliases if aliases is not None else DEFAULT_CITY_ALIASES
    return table.get(normalized, normalized)


def cities_match(a: Optional[str], b: Optional[str], aliases: Optional[Dict[str, str]] = None) -> bool:
    """Canonical equality; an empty side never matches."""
    ca = canonicalize_city(a, aliases)
    cb = canonicalize_city(b, aliases)
    return bool(ca) and ca == cb


@dataclass
class DeliveryOption:
    pickup_location_id: Any
    pickup_location_name: str
    pickup_city: str
    delivery_method_id: Any
    delivery_method_name: str
    is_free_delivery: bool
    # Raw lane price even for free options; callers decide whether to waive it
    delivery_price: Decimal
    estimated_min_days: int
    estimated_max_days: int

    def to_dict(self) -> Dict[str, Any]:
        rv = asdict(self)
        rv['delivery_price'] = money_json(self.delivery_price)
        return rv


@dataclass
class DeliverySummary:
    can_deliver: bool
    has_free_delivery: bool = False
    cheapest_price: Decimal = Decimal('0')
    fastest_days: int = 0
    total_options: int = 0
    error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        rv = {
            'can_deliver': self.can_deliver,
            'has_free_delivery': self.has_free_delivery,
            'cheapest_price': money_json(self.cheapest_price),
            'fastest_days': self.fastest_days,
            'total_options': self.total_options,
        }
        if self.error_message:
            rv['error_message'] = self.error_message
        return rv


@dataclass
class DeliveryResolution:
    product_id: Any
    city: str
    country: str
    summary: DeliverySummary
    options: List[DeliveryOption] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'product_id': self.product_id,
            'city': self.city,
            'country': self.country,
            'summary': self.summary.to_dict(),
            'options': [o.to_dict() for o in self.options],
            'meta': self.meta,
        }


def summarize_options(options: List[DeliveryOption]) -> DeliverySummary:
    """Aggregate surviving options; no options means no delivery."""
    if not options:
        return DeliverySummary(can_deliver=False, error_message=NO_OPTIONS_MESSAGE)
    return DeliverySummary(
        can_deliver=True,
        has_free_delivery=any(o.is_free_delivery for o in options),
        cheapest_price=min(to_decimal(o.delivery_price) for o in options),
        fastest_days=min(o.estimated_min_days for o in options),
        total_options=len(options),
    )


def resolve_delivery_options(store: MarketplaceStore, product_ref, city: str, country: str,
                             aliases: Optional[Dict[str, str]] = None) -> DeliveryResolution:
    """
    Delivery options for one product to (city, country).

    Raises:
        NotFoundError: product missing or inactive.
    """
    product = resolve_product(store, product_ref)
    meta = {
        'product_slug': product.slug,
        'city_canonical': canonicalize_city(city, aliases),
        'zone_allowed': False,
    }
    
    # 1. Zone gate: no allowed row for the exact destination blocks everything
    zone = store.find_delivery_zone(product.id, city, country)
    if zone is None:
        logger.info(f"[DELIVERY] product={product.id} blocked for {city}, {country}")
        return DeliveryResolution(
            product_id=product.id,
            city=city,
            country=country,
            summary=DeliverySummary(can_deliver=False, error_message=NOT_ALLOWED_MESSAGE),
            meta=meta,
        )
    meta['zone_allowed'] = True
    
    # 2. Lanes of this product reaching the destination city
    lanes = [
        lane for lane in store.find_delivery_lanes(product.id)
        if cities_match(lane.delivery_city, city, aliases)
    ]
    
    # 3. Pickup origin per city; lanes without one are dropped
    pickup_cities = sorted({lane.pickup_city for lane in lanes if lane.pickup_city})
    locations_by_city = {}
    for location in store.find_pickup_locations(pickup_cities):
        locations_by_city.setdefault(location.city, location)
    
    options = []
    for lane in lanes:
        location = locations_by_city.get(lane.pickup_city)
        if location is None:
            logger.debug(f"[DELIVERY] lane={lane.rate_id} dropped: no pickup location in {lane.pickup_city}")
            continue
        options.append(DeliveryOption(
            pickup_location_id=location.id,
            pickup_location_name=location.name,
            pickup_city=lane.pickup_city,
            delivery_method_id=lane.delivery_method_id,
            delivery_method_name=lane.delivery_method_name or 'Unknown Method',
            is_free_delivery=lane.is_free_delivery,
            delivery_price=to_decimal(lane.price),
            estimated_min_days=lane.estimated_min_days or 0,
            estimated_max_days=lane.estimated_max_days or 0,
        ))
    
    summary = summarize_options(options)
    logger.info(
        f"[DELIVERY] product={product.id} to {city}, {country}: "
        f"{summary.total_options} option(s), can_deliver={summary.can_deliver}"
    )
    return DeliveryResolution(
        product_id=product.id,
        city=city,
        country=country,
        summary=summary,
        options=options,
        meta=meta,
    )
