from datetime import timedelta

import pytest
from django.utils import timezone

from apps.jobs.exceptions import JobNotFound, NotOwner, WrongRole
from apps.jobs.queries import (
    contractor_dashboard, dashboard_for, group_offers_by_status, job_offers_for_owner,
    open_jobs, poster_dashboard, poster_jobs_with_pending_counts,
)


@pytest.mark.django_db
def test_group_offers_by_status_newest_first(open_job, make_user, make_offer):
    now = timezone.now()
    older = make_offer(open_job, make_user('contractor'), created_at=now - timedelta(hours=2))
    newer = make_offer(open_job, make_user('contractor'), created_at=now)
    rejected = make_offer(open_job, make_user('contractor'), status='rejected')

    groups = group_offers_by_status(open_job.offers.all())

    assert groups['pending'] == [newer, older]
    assert groups['rejected'] == [rejected]
    assert groups['accepted'] == []


def test_group_offers_by_status_empty():
    assert group_offers_by_status([]) == {'pending': [], 'accepted': [], 'rejected': []}


@pytest.mark.django_db
def test_job_offers_for_owner(open_job, poster, contractor, make_offer):
    offer = make_offer(open_job, contractor)

    job, groups = job_offers_for_owner(poster, open_job.pk)

    assert job == open_job
    assert groups['pending'] == [offer]


@pytest.mark.django_db
def test_job_offers_for_owner_refuses_others(open_job, contractor):
    with pytest.raises(NotOwner):
        job_offers_for_owner(contractor, open_job.pk)
    with pytest.raises(JobNotFound):
        job_offers_for_owner(contractor, 999999)


@pytest.mark.django_db
def test_poster_jobs_with_pending_counts(poster, make_job, make_user, make_offer):
    now = timezone.now()
    older = make_job(poster, title='Older job', date_posted=now - timedelta(days=1))
    newer = make_job(poster, title='Newer job', date_posted=now)
    make_offer(older, make_user('contractor'))
    make_offer(older, make_user('contractor'))
    make_offer(newer, make_user('contractor'), status='rejected')
    make_job(make_user('job_poster'), title='Someone else')

    jobs = list(poster_jobs_with_pending_counts(poster))

    assert [job.title for job in jobs] == ['Newer job', 'Older job']
    assert [job.pending_offer_count for job in jobs] == [0, 2]


@pytest.mark.django_db
def test_open_jobs_search_is_case_insensitive(poster, make_job):
    make_job(poster, title='Tile the bathroom', location='Capital City')
    make_job(poster, title='Mow the lawn', category='Gardening')
    make_job(poster, title='Tile the kitchen', status='completed')

    assert [job.title for job in open_jobs('TILE')] == ['Tile the bathroom']
    assert [job.title for job in open_jobs('capital')] == ['Tile the bathroom']
    assert [job.title for job in open_jobs('gardening')] == ['Mow the lawn']
    assert len(open_jobs()) == 2
    assert len(open_jobs('   ')) == 2


@pytest.mark.django_db
def test_poster_dashboard(poster, make_job, make_user, make_offer):
    open_job = make_job(poster, title='Open job')
    started = make_job(poster, title='Started job', status='in_progress')
    make_job(poster, title='Finished job', status='completed')
    make_offer(open_job, make_user('contractor'))
    make_offer(started, make_user('contractor'), status='accepted')

    summary = poster_dashboard(poster)

    assert {job.title for job in summary['active_jobs']} == {'Open job', 'Started job'}
    assert [job.title for job in summary['completed_jobs']] == ['Finished job']
    assert summary['pending_offer_count'] == 1


@pytest.mark.django_db
def test_contractor_dashboard(poster, contractor, make_job, make_offer):
    now = timezone.now()
    jobs = [make_job(poster, title=f'Job number {i}', date_posted=now - timedelta(minutes=i)) for i in range(7)]
    make_offer(jobs[0], contractor)
    make_offer(jobs[1], contractor, status='accepted')
    make_offer(jobs[2], contractor, status='rejected')

    summary = contractor_dashboard(contractor)

    assert [job.pk for job in summary['recent_jobs']] == [job.pk for job in jobs[:5]]
    assert len(summary['offers']) == 3
    assert summary['pending_offer_count'] == 1
    assert summary['accepted_offer_count'] == 1


@pytest.mark.django_db
def test_dashboard_requires_marketplace_role(make_user):
    with pytest.raises(WrongRole):
        dashboard_for(make_user(role=''))
