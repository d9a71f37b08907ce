"""Idempotency utilities for safely handling duplicate requests.

This module stores and retrieves idempotency keys to safely de-duplicate
client requests. It supports creating an idempotent record, detecting
conflicts when the same key is used with a different payload, and
finalizing a stored response so subsequent retries can short-circuit.
"""

import hashlib
import json
import logging
from datetime import timedelta

from django.conf import settings
from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.utils.encoders import JSONEncoder

from apps.common.errors import Conflict

from .models import IdempotencyKey

logger = logging.getLogger("storefront.orders")


def _hash(payload) -> str:
    """Compute a stable SHA-256 hash for a JSON-serializable payload.

    The payload is serialized with sorted keys and compact separators to
    ensure a deterministic representation before hashing.
    """
    body = json.dumps(payload, sort_keys=True, separators=(",", ":"), cls=JSONEncoder)
    return hashlib.sha256(body.encode("utf-8")).hexdigest()


@transaction.atomic
def get_or_create_idempotent(key: str, payload) -> tuple[bool, IdempotencyKey]:
    """Get-or-create an idempotency record for the given key and payload.

    The create path runs in a nested savepoint so an IntegrityError only
    rolls back that block; the existing-record path takes a row lock
    (SELECT ... FOR UPDATE). A record that never got a response and is
    older than ``IDEMPOTENCY_PENDING_TTL_SECS`` belongs to a request that
    died mid-flight; it is reclaimed and reported as new.

    Args:
        key: Client-provided idempotency key.
        payload: Request payload used to compute the request hash.

    Returns:
        tuple[bool, IdempotencyKey]: ``(existing, rec)``. ``existing`` is
        False when the record was created by this call.

    Raises:
        Conflict: If the key exists with a different payload hash.
    """
    h = _hash(payload)

    try:
        with transaction.atomic():
            rec = IdempotencyKey.objects.create(key=key, request_hash=h, response_status=0, response_body={})
            return False, rec
    except IntegrityError:
        rec = IdempotencyKey.objects.select_for_update().get(key=key)
        if rec.request_hash != h:
            raise Conflict("Idempotency-Key was already used with a different request")
        if not is_complete(rec) and rec.created_at < timezone.now() - _pending_ttl():
            rec.created_at = timezone.now()
            rec.save(update_fields=["created_at"])
            logger.warning("reclaimed stale idempotency key", extra={"idempotency_key": key})
            return False, rec
        return True, rec


def is_complete(rec: IdempotencyKey) -> bool:
    return rec.response_status > 0


def _pending_ttl() -> timedelta:
    return timedelta(seconds=getattr(settings, "IDEMPOTENCY_PENDING_TTL_SECS", 60))


def finalize(rec: IdempotencyKey, status_code: int, body: dict, order_id=None):
    """Persist the final response for an idempotent request.

    The body is normalised through the API's JSON encoder first, so a
    replay returns exactly what the first response rendered.

    Args:
        rec: The idempotency record to update.
        status_code: HTTP status code to store for the response.
        body: Response body as handed to the renderer.
        order_id: Optional order identifier to link to the record.
    """
    rec.response_status = status_code
    rec.response_body = json.loads(json.dumps(body, cls=JSONEncoder))
    if order_id is not None:
        rec.order_id = order_id
    rec.save(update_fields=["response_status", "response_body", "order"])
