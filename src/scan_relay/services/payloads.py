"""Classification of decoded scan strings."""

from scan_relay.domain.scans import ClassifiedPayload, PayloadKind

SESSION_MARKER = "session="
PRODUCT_ROUTE_MARKER = "/scan/"

_UNRECOGNIZED = ClassifiedPayload(kind=PayloadKind.UNRECOGNIZED)


def classify(decoded: str | None) -> ClassifiedPayload:
    """Classify a decoded string as a pairing, a product reference or noise.

    Pairing payloads carry ``session=<id>``; the id runs up to the next ``&``.
    Product references are either a bare identifier or a URL containing
    ``/scan/<id>``, where the id runs up to the next ``?`` or ``/``.
    """
    if not decoded or not decoded.strip():
        return _UNRECOGNIZED
    text = decoded.strip()

    if SESSION_MARKER in text:
        session_id = text.split(SESSION_MARKER, 1)[1].split("&", 1)[0]
        if not session_id:
            return _UNRECOGNIZED
        return ClassifiedPayload(kind=PayloadKind.PAIRING, reference=session_id)

    if PRODUCT_ROUTE_MARKER in text:
        tail = text.split(PRODUCT_ROUTE_MARKER, 1)[1]
        product_id = tail.split("?", 1)[0].split("/", 1)[0]
        if not product_id:
            return _UNRECOGNIZED
        return ClassifiedPayload(
            kind=PayloadKind.PRODUCT_REFERENCE, reference=product_id
        )

    return ClassifiedPayload(kind=PayloadKind.PRODUCT_REFERENCE, reference=text)
