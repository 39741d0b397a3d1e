"""
Access - Chain interaction layer for flowdemo.

Provides the Access Node REST client, the JSON-Cadence codec, transaction
building/signing and event queries.

Uses httpx + rlp + eth-keys instead of a full Flow SDK.
"""
