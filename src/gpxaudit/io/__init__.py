from .export import PAYLOAD_KINDS, audit_payloads, pairs_payload, series_payload

__all__ = [
    "PAYLOAD_KINDS",
    "audit_payloads",
    "pairs_payload",
    "series_payload",
]
