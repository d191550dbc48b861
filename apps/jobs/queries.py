"""Read-only projections of jobs and offers used by the API and dashboards."""
import logging

from django.db.models import Count, Q

from core.constants import ACTIVE_JOB_STATUSES, OFFER_STATUS_CHOICES
from .exceptions import JobNotFound, NotAuthenticated, NotOwner, WrongRole
from .models import Job, Offer

logger = logging.getLogger(__name__)

OFFER_STATUSES = [value for value, label in OFFER_STATUS_CHOICES]


def group_offers_by_status(offers):
    """Split offers into pending/accepted/rejected lists, newest first."""
    groups = {status: [] for status in OFFER_STATUSES}
    for offer in sorted(offers, key=lambda o: o.created_at, reverse=True):
        groups[offer.status].append(offer)
    return groups


def with_pending_counts(jobs):
    return jobs.annotate(pending_offer_count=Count('offers', filter=Q(offers__status='pending')))


def job_offers_for_owner(user, job_id):
    if user is None or not user.is_authenticated:
        raise NotAuthenticated()
    try:
        job = Job.objects.get(pk=job_id)
    except (Job.DoesNotExist, ValueError, TypeError):
        raise JobNotFound()
    if not job.is_owned_by(user):
        raise NotOwner("You don't have permission to view these offers.")
    offers = job.offers.select_related('contractor')
    return job, group_offers_by_status(offers)


def contractor_offers(user):
    return Offer.objects.filter(contractor=user).select_related('job').order_by('-created_at')


def poster_jobs_with_pending_counts(user):
    return with_pending_counts(Job.objects.filter(created_by=user)).order_by('-date_posted')


def open_jobs(search=None):
    jobs = Job.objects.filter(status='open').select_related('created_by')
    if search:
        search = search.strip()
        jobs = jobs.filter(
            Q(title__icontains=search) |
            Q(description__icontains=search) |
            Q(location__icontains=search) |
            Q(category__icontains=search)
        )
    return jobs.order_by('-date_posted')


def poster_dashboard(user):
    jobs = list(poster_jobs_with_pending_counts(user))
    return {
        'active_jobs': [job for job in jobs if job.status in ACTIVE_JOB_STATUSES],
        'completed_jobs': [job for job in jobs if job.status == 'completed'],
        'pending_offer_count': sum(job.pending_offer_count for job in jobs),
    }


def contractor_dashboard(user, limit=5):
    offers = list(contractor_offers(user))
    return {
        'recent_jobs': list(open_jobs()[:limit]),
        'offers': offers,
        'pending_offer_count': sum(1 for offer in offers if offer.status == 'pending'),
        'accepted_offer_count': sum(1 for offer in offers if offer.status == 'accepted'),
    }


def dashboard_for(user):
    if user.is_job_poster:
        return poster_dashboard(user)
    if user.is_contractor:
        return contractor_dashboard(user)
    logger.warning(f"Dashboard requested by user {user.pk} without a marketplace role")
    raise WrongRole("Your account has no marketplace role.")
