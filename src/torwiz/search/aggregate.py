"""Merging of per-provider search results."""

from .models import TorrentRecord


def seeds_key(record: TorrentRecord) -> int:
    """Sort key ranking records by seed count, missing count as zero."""
    return -(record.seeds or 0)


def merge(
    per_provider_results: list[list[TorrentRecord]], row_limit: int
) -> list[TorrentRecord]:
    """Merge provider results into one ranked list.

    Records are ranked by seed count, highest first. The sort is stable,
    so records with equal seed counts keep their arrival order (provider
    order, then provider's own order). Overflow past row_limit is dropped.

    Args:
        per_provider_results: Result lists, one per provider
        row_limit: Maximum number of records to keep

    Returns:
        Ranked list with at most row_limit records
    """
    merged = [
        record for results in per_provider_results for record in results
    ]
    merged.sort(key=seeds_key)
    return merged[: max(row_limit, 0)]
