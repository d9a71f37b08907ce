import logging

from django.db import DatabaseError, connection
from django.http import JsonResponse

from apps.store_settings.models import StoreSetting

logger = logging.getLogger("storefront.monitoring")


def _check_db() -> bool:
    try:
        with connection.cursor() as cur:
            cur.execute("SELECT 1;")
        return True
    except DatabaseError:
        logger.warning("health check: database unreachable", exc_info=True)
        return False


def _check_settings() -> bool:
    # Pricing reads these rows on every order
    try:
        return StoreSetting.objects.exists()
    except DatabaseError:
        logger.warning("health check: settings unreadable", exc_info=True)
        return False


def health_view(_request):
    db_ok = _check_db()
    settings_ok = _check_settings() if db_ok else False

    ok = db_ok and settings_ok
    code = 200 if ok else 503
    return JsonResponse(
        {"ok": ok, "components": {"db": {"ok": db_ok}, "settings": {"ok": settings_ok}}},
        status=code,
    )
