"""Shape flat product/review join rows into nested product listings."""

from typing import Any, Iterable


def _rating_summary(row: dict[str, Any]) -> dict[str, Any]:
    """Build the {avg, count} summary from the precomputed columns on a row."""
    avg = row.get("avg_rating")
    count = row.get("rating_count")
    return {
        "avg": float(avg) if avg is not None else 0,
        "count": int(count) if count is not None else 0,
    }


def _review_view(row: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": row["review_id"],
        "rating": row.get("rating"),
        "comment": row.get("review_text"),
        "imageUrl": row.get("review_image"),
        "createdAt": row.get("created_at"),
        "user": {
            "id": row.get("user_id"),
            "name": row.get("user_name"),
        },
    }


def aggregate_product_rows(rows: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """
    Group product x review rows into one entry per product.

    Rows must already be ordered by product id, then by review creation time
    (newest first). Reviews keep that order; nothing is re-sorted here. A
    product with no reviews arrives as a single row with a null review_id
    and comes out with an empty review list and a {avg: 0, count: 0} rating.

    Args:
        rows: Mappings with product_id, product_name, product_image,
            review_id, rating, review_text, review_image, created_at,
            user_id, user_name, avg_rating and rating_count keys

    Returns:
        List of product dicts in order of first appearance
    """
    # dicts keep insertion order, so products come out in first-seen order
    products: dict[Any, dict[str, Any]] = {}

    for row in rows:
        product_id = row["product_id"]
        product = products.get(product_id)
        if product is None:
            product = {
                "id": product_id,
                "name": row.get("product_name"),
                "image": row.get("product_image"),
                "rating": _rating_summary(row),
                "reviews": [],
            }
            products[product_id] = product

        if row.get("review_id") is not None:
            product["reviews"].append(_review_view(row))

    return list(products.values())
