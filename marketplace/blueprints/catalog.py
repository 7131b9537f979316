"""Storefront JSON endpoints: product pricing, delivery options and ratings."""
from flask import Blueprint, request, jsonify, current_app

from marketplace.exceptions import BusinessLogicError
from marketplace.stores import get_store
from marketplace.services.catalog_service import resolve_product
from marketplace.services.discount_service import get_product_discounts
from marketplace.services.delivery_service import resolve_delivery_options
from marketplace.services.review_service import (
    get_product_rating, get_vendor_rating, get_batch_product_ratings, format_rating_text
)
from marketplace.blueprints.metrics import discount_resolutions_total, delivery_resolutions_total
from marketplace.utils.dates import parse_iso8601

catalog_bp = Blueprint('catalog', __name__, url_prefix='/api')


def _evaluation_time():
    """Optional ?at=<ISO-8601> pins the pricing clock (previews, support tooling)."""
    raw = request.args.get('at', '').strip()
    if not raw:
        return None
    at = parse_iso8601(raw)
    if at is None:
        raise BusinessLogicError('Invalid datetime format for at')
    return at


@catalog_bp.route('/products/<product_ref>/discounts', methods=['GET'])
def product_discounts(product_ref):
    """Applicable discounts, best discount and final price for one product."""
    payload = get_product_discounts(get_store(), product_ref, now=_evaluation_time())
    discount_resolutions_total.labels(has_discount=str(payload['hasDiscount']).lower()).inc()
    return jsonify(payload)


@catalog_bp.route('/products/<product_ref>/delivery-options', methods=['GET'])
def product_delivery_options(product_ref):
    """Delivery options for ?city=&country=."""
    city = request.args.get('city', '').strip()
    country = request.args.get('country', '').strip()
    if not city or not country:
        raise BusinessLogicError('Missing required params: city, country')
    
    resolution = resolve_delivery_options(
        get_store(),
        product_ref,
        city,
        country,
        aliases=current_app.config.get('CITY_ALIASES')
    )
    
    if resolution.summary.can_deliver:
        outcome = 'deliverable'
    elif resolution.meta.get('zone_allowed'):
        outcome = 'no_options'
    else:
        outcome = 'zone_blocked'
    delivery_resolutions_total.labels(outcome=outcome).inc()
    
    return jsonify(resolution.to_dict())


@catalog_bp.route('/products/<product_ref>/rating', methods=['GET'])
def product_rating(product_ref):
    """Average rating and review count for one product."""
    store = get_store()
    product = resolve_product(store, product_ref)
    stats = get_product_rating(store, product.id)
    return jsonify({'product_id': product.id, **stats.to_dict(), 'label': format_rating_text(stats)})


@catalog_bp.route('/products/ratings', methods=['GET'])
def batch_product_ratings():
    """Ratings for ?ids=1,2,3; every requested id is present in the result."""
    raw_ids = [part.strip() for part in request.args.get('ids', '').split(',') if part.strip()]
    if not raw_ids:
        raise BusinessLogicError('ids is required')
    if not all(part.isdigit() for part in raw_ids):
        raise BusinessLogicError('ids must be numeric')
    
    product_ids = list(dict.fromkeys(int(part) for part in raw_ids))
    stats = get_batch_product_ratings(get_store(), product_ids)
    return jsonify({str(pid): s.to_dict() for pid, s in stats.items()})


@catalog_bp.route('/vendors/<int:vendor_id>/rating', methods=['GET'])
def vendor_rating(vendor_id):
    """Average rating across the vendor's products."""
    stats = get_vendor_rating(get_store(), vendor_id)
    return jsonify({'vendor_id': vendor_id, **stats.to_dict()})
