"""
Shard Migration Tool

Bulk-migrates keys from a single-node Redis to a Redis Cluster, rewriting each
key name so that related keys share a hash tag and land on the same shard.

Supports:
- Pluggable key transformers, one per key family
- Cursor-based scanning (no blocking KEYS listing)
- DUMP/RESTORE transfer preserving binary values and TTLs
- A bounded worker pool with cooperative cancellation
- Verification runs against the destination cluster
- A failed-keys file for manual retry
"""

__version__ = "0.1.0"
