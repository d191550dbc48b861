"""Offer lifecycle: submitting offers and accepting one offer per job.

Every precondition is checked inside the transaction that performs the
writes, while holding a row lock on the job, so submission and acceptance on
the same job are serialized. Callers receive either the written rows or one
of the typed failures from ``apps.jobs.exceptions``.
"""
import logging
import time
from collections import namedtuple
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import DatabaseError, IntegrityError, OperationalError, transaction
from django.utils import timezone
from rest_framework import serializers

from .exceptions import (
    ConcurrentModification, DuplicateOffer, JobNotFound, JobNotOpen, NotAuthenticated,
    NotOwner, OfferNotFound, OfferNotPending, StoreUnavailable, WrongRole,
)
from .models import Job, Offer

logger = logging.getLogger(__name__)

Acceptance = namedtuple('Acceptance', ['job', 'offer', 'rejected_offers'])

# MySQL: lock wait timeout, deadlock. PostgreSQL: serialization failure, deadlock.
MYSQL_CONFLICT_CODES = (1205, 1213)
POSTGRES_CONFLICT_CODES = ('40001', '40P01')
CONFLICT_MESSAGES = ('database is locked', 'deadlock', 'could not serialize', 'lock wait timeout')

MAX_PRICE = Decimal('100000000')
PRICE_QUANTUM = Decimal('0.01')


def is_write_conflict(exc):
    """Return True when a database error means another transaction got in the way."""
    cause = exc.__cause__ or exc
    if getattr(cause, 'pgcode', None) in POSTGRES_CONFLICT_CODES:
        return True
    if getattr(cause, 'sqlstate', None) in POSTGRES_CONFLICT_CODES:
        return True
    if exc.args and exc.args[0] in MYSQL_CONFLICT_CODES:
        return True
    message = str(exc).lower()
    return any(fragment in message for fragment in CONFLICT_MESSAGES)


def run_in_transaction(operation, *args, **kwargs):
    """Run ``operation`` atomically, retrying the whole transaction on write conflicts.

    Conflicts are retried with exponential backoff up to
    ``OFFER_ACCEPT_MAX_ATTEMPTS`` attempts, then surface as
    ``ConcurrentModification``. Any other database failure surfaces immediately
    as ``StoreUnavailable``. ``IntegrityError`` is left to the caller, which
    knows which constraint it was guarding.
    """
    max_attempts = max(1, settings.OFFER_ACCEPT_MAX_ATTEMPTS)
    backoff = settings.OFFER_ACCEPT_RETRY_BACKOFF
    name = getattr(operation, '__name__', repr(operation))

    for attempt in range(1, max_attempts + 1):
        try:
            with transaction.atomic():
                return operation(*args, **kwargs)
        except IntegrityError:
            raise
        except OperationalError as exc:
            if not is_write_conflict(exc):
                logger.error(f"Database failure in {name}: {str(exc)}")
                raise StoreUnavailable() from exc
            if attempt == max_attempts:
                logger.error(f"Write conflict in {name} persisted after {attempt} attempts")
                raise ConcurrentModification() from exc
            delay = backoff * (2 ** (attempt - 1))
            logger.warning(f"Write conflict in {name} (attempt {attempt}/{max_attempts}), retrying in {delay:.3f}s")
            time.sleep(delay)
        except DatabaseError as exc:
            logger.error(f"Database failure in {name}: {str(exc)}")
            raise StoreUnavailable() from exc


def validate_offer_content(price, message):
    """Normalize an offer's price and message, raising a field-level ValidationError."""
    errors = {}
    try:
        price = Decimal(str(price).strip())
    except (InvalidOperation, TypeError, ValueError):
        errors['price'] = ["A valid number is required."]
    else:
        if not price.is_finite() or price <= 0:
            errors['price'] = ["Price must be greater than zero."]
        elif price >= MAX_PRICE:
            errors['price'] = ["Price is too large."]
        else:
            price = price.quantize(PRICE_QUANTUM)

    min_length = settings.OFFER_MESSAGE_MIN_LENGTH
    if message is None:
        message = ''
    if not isinstance(message, str):
        errors['message'] = ["Not a valid string."]
    else:
        message = message.strip()
        if len(message) < min_length:
            errors['message'] = [f"Message must be at least {min_length} characters long."]

    if errors:
        raise serializers.ValidationError(errors)
    return price, message


def _require_authenticated(user):
    if user is None or not getattr(user, 'is_authenticated', False):
        raise NotAuthenticated()


def _lock_job(job_id):
    try:
        return Job.objects.select_for_update().get(pk=job_id)
    except (Job.DoesNotExist, ValueError, TypeError):
        raise JobNotFound()


def submit_offer(user, job_id, price, message):
    """Create a pending offer from ``user`` on an open job, at most once per job."""
    _require_authenticated(user)
    if not user.is_contractor:
        raise WrongRole("Only contractors can submit offers.")
    price, message = validate_offer_content(price, message)

    try:
        offer = run_in_transaction(_create_offer, user, job_id, price, message)
    except IntegrityError as exc:
        logger.warning(f"Concurrent duplicate offer from contractor {user.pk} on job {job_id}")
        raise DuplicateOffer() from exc

    logger.info(f"Contractor {user.pk} submitted offer {offer.pk} on job {job_id}")
    return offer


def _create_offer(user, job_id, price, message):
    job = _lock_job(job_id)
    # Re-submission is refused whatever the earlier offer's status.
    if job.offers.filter(contractor=user).exists():
        raise DuplicateOffer()
    if not job.is_open:
        raise JobNotOpen("This job is no longer accepting offers.")
    return Offer.objects.create(
        job=job,
        contractor=user,
        price=price,
        message=message,
        status='pending',
        created_at=timezone.now(),
    )


def accept_offer(user, job_id, offer_id):
    """Accept one pending offer, reject every other offer and start the job.

    Returns an ``Acceptance`` with the updated job, the accepted offer and the
    offers that were rejected by this call.
    """
    _require_authenticated(user)

    try:
        acceptance = run_in_transaction(_accept_offer, user, job_id, offer_id)
    except IntegrityError as exc:
        logger.warning(f"Second accepted offer refused on job {job_id}")
        raise ConcurrentModification() from exc

    logger.info(
        f"Offer {acceptance.offer.pk} accepted on job {acceptance.job.pk}; "
        f"{len(acceptance.rejected_offers)} competing offers rejected"
    )
    return acceptance


def _accept_offer(user, job_id, offer_id):
    job = _lock_job(job_id)
    if not job.is_owned_by(user):
        raise NotOwner("Only the job owner can accept offers on this job.")
    if not job.is_open:
        raise JobNotOpen()

    offers = list(job.offers.select_for_update())
    accepted = next((offer for offer in offers if str(offer.pk) == str(offer_id)), None)
    if accepted is None:
        raise OfferNotFound()
    if accepted.status != 'pending':
        raise OfferNotPending()

    rejected = [offer for offer in offers if offer.pk != accepted.pk]
    job.offers.exclude(pk=accepted.pk).update(status='rejected', updated_at=timezone.now())
    for offer in rejected:
        offer.status = 'rejected'

    accepted.status = 'accepted'
    accepted.save(update_fields=['status', 'updated_at'])
    job.mark_in_progress(accepted.contractor)
    return Acceptance(job, accepted, rejected)
