from prometheus_client import Counter
# Prometheus metrics definitions

# Contacts newly charged against a daily quota (duplicates are not counted)
contact_views_charged_total = Counter(
    "contact_views_charged_total", "Contacts newly charged against daily quota"
)

# Single-view requests rejected because the daily limit was reached
quota_reject_total = Counter(
    "quota_reject_total", "Number of quota rejected requests"
)

# Page loads cut short to fit the remaining allowance (including empty pages)
quota_page_trimmed_total = Counter(
    "quota_page_trimmed_total", "Contact pages trimmed to remaining quota"
)

# Optimistic-lock conflicts retried by the snapshot ledger
quota_snapshot_conflict_total = Counter(
    "quota_snapshot_conflict_total", "Snapshot version conflicts retried"
)

store_unavailable_total = Counter(
    "store_unavailable_total", "Quota store operations failed on database errors"
)

__all__ = [
    "contact_views_charged_total",
    "quota_reject_total",
    "quota_page_trimmed_total",
    "quota_snapshot_conflict_total",
    "store_unavailable_total",
]
