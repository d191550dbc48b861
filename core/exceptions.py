import logging

from rest_framework.views import exception_handler

from apps.jobs.exceptions import OfferLifecycleError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """Render lifecycle failures as ``{"error", "code"}``; defer the rest to DRF."""
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, OfferLifecycleError):
        view = context.get('view')
        logger.info(f"{type(exc).__name__} in {type(view).__name__ if view else 'unknown view'}: {exc.detail}")
        response.data = {
            'error': str(exc.detail),
            'code': exc.default_code,
        }
    return response
