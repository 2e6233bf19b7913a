from score_sync.infrastructure.http.record_codec import (
    decode_rank,
    decode_record,
    decode_records,
    encode_record,
)
from score_sync.infrastructure.http.transport import HttpTransport, TransportResult

__all__ = [
    "HttpTransport",
    "TransportResult",
    "encode_record",
    "decode_record",
    "decode_records",
    "decode_rank",
]
