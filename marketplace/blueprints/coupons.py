"""Coupon endpoints: validate a code, redeem it against an order."""
from flask import Blueprint, request, jsonify, current_app

from marketplace.exceptions import BusinessLogicError, ConflictError
from marketplace.stores import get_store
from marketplace.services.coupon_service import validate_coupon, redeem_coupon
from marketplace.blueprints.metrics import coupon_validations_total
from marketplace.utils.money import to_decimal

coupons_bp = Blueprint('coupons', __name__, url_prefix='/api/coupons')


def _read_coupon_request(require_user=False):
    data = request.get_json(silent=True) or {}
    code = (data.get('code') or '').strip()
    if not code:
        raise BusinessLogicError('code is required')
    
    user_id = data.get('user_id')
    user_id = str(user_id).strip() if user_id not in (None, '') else None
    if require_user and not user_id:
        raise BusinessLogicError('user_id is required')
    
    try:
        order_amount = to_decimal(data.get('order_amount', 0))
    except ValueError:
        raise BusinessLogicError('order_amount must be numeric')
    if order_amount < 0:
        raise BusinessLogicError('order_amount must be >= 0')
    
    return code, user_id, order_amount, data


@coupons_bp.route('/validate', methods=['POST'])
def validate():
    """Business outcomes (unknown code, expired, ...) are 200 with valid=false."""
    code, user_id, order_amount, _ = _read_coupon_request()
    result = validate_coupon(get_store(), code, user_id, order_amount)
    coupon_validations_total.labels(result='valid' if result.valid else result.reason).inc()
    return jsonify(result.to_dict())


@coupons_bp.route('/redeem', methods=['POST'])
def redeem():
    code, user_id, order_amount, data = _read_coupon_request(require_user=True)
    order_id = data.get('order_id')
    
    result, usage = redeem_coupon(
        get_store(),
        code,
        user_id,
        order_amount,
        order_id=str(order_id) if order_id is not None else None
    )
    coupon_validations_total.labels(result='valid' if result.valid else result.reason).inc()
    
    if usage is None:
        raise ConflictError(f"Coupon {code} cannot be redeemed", payload=result.to_dict())
    
    current_app.logger.info(f"Coupon {code} redeemed by user {user_id}")
    return jsonify({**result.to_dict(), 'usage': usage.to_dict()}), 201
