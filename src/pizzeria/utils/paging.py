"""Batched reads over Protean DAO queries."""

BATCH_SIZE = 500


def read_all(query, batch_size: int | None = None) -> list:
    """Every record ``query`` matches, read ``batch_size`` at a time until exhausted.

    The query should carry an ``order_by`` so batches do not overlap.
    """
    batch_size = batch_size or BATCH_SIZE
    items = []
    offset = 0
    while True:
        results = query.offset(offset).limit(batch_size).all()
        items.extend(results.items)
        offset += batch_size
        if not results.items or offset >= results.total:
            return items
