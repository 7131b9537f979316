"""Product lookup shared by the pricing, delivery and rating endpoints."""
from marketplace.exceptions import NotFoundError
from marketplace.stores import MarketplaceStore


def resolve_product(store: MarketplaceStore, product_ref):
    """
    Find an active product by id or slug.

    Numeric refs (int or digit strings) are looked up by id first; strings
    fall back to slug.

    Raises:
        NotFoundError: product missing or inactive.
    """
    product = None
    if isinstance(product_ref, int) or (isinstance(product_ref, str) and product_ref.isdigit()):
        product = store.get_product(int(product_ref))
    if product is None and isinstance(product_ref, str):
        product = store.get_product_by_slug(product_ref)
    
    if product is None or not product.is_active:
        raise NotFoundError('Product not found', payload={'product': str(product_ref)})
    return product
