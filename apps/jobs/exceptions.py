"""Typed failures of the offer lifecycle.

Each failure carries a stable ``default_code`` and an HTTP status so the API
layer can report it as-is; the message is a short human-readable sentence.
"""
from rest_framework import exceptions, status


class OfferLifecycleError(exceptions.APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The operation could not be completed."
    default_code = 'offer_lifecycle_error'


class NotAuthenticated(OfferLifecycleError, exceptions.NotAuthenticated):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "You must be logged in to perform this action."
    default_code = 'not_authenticated'


class WrongRole(OfferLifecycleError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Your account role does not allow this action."
    default_code = 'wrong_role'


class NotOwner(OfferLifecycleError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "Only the owner of this job can perform this action."
    default_code = 'not_owner'


class JobNotFound(OfferLifecycleError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Job not found."
    default_code = 'job_not_found'


class JobNotOpen(OfferLifecycleError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This job is no longer open."
    default_code = 'job_not_open'


class OfferNotFound(OfferLifecycleError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Offer not found for this job."
    default_code = 'offer_not_found'


class OfferNotPending(OfferLifecycleError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This offer has already been processed."
    default_code = 'offer_not_pending'


class DuplicateOffer(OfferLifecycleError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "You have already submitted an offer for this job."
    default_code = 'duplicate_offer'


class ConcurrentModification(OfferLifecycleError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The job was modified by another request. Please try again."
    default_code = 'concurrent_modification'


class StoreUnavailable(OfferLifecycleError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "The data store is temporarily unavailable."
    default_code = 'store_unavailable'
