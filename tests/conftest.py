import itertools
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from apps.jobs.models import Job, Offer
from apps.users.models import User

PASSWORD = 'StrongPass123!'


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make_user(role='contractor', **kwargs):
        email = kwargs.pop('email', f"{role}{next(counter)}@example.com")
        return User.objects.create_user(
            username=email, email=email, password=PASSWORD, role=role, **kwargs
        )
    return _make_user


@pytest.fixture
def poster(make_user):
    return make_user('job_poster', display_name='Uma Poster')


@pytest.fixture
def contractor(make_user):
    return make_user('contractor', display_name='Carl Contractor')


@pytest.fixture
def other_contractor(make_user):
    return make_user('contractor', display_name='Cora Contractor')


@pytest.fixture
def client_for():
    def _client_for(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return _client_for


@pytest.fixture
def make_job(db):
    def _make_job(owner, **kwargs):
        defaults = {
            'title': 'Fix the kitchen sink',
            'description': 'The kitchen sink is leaking under the cabinet.',
            'location': 'Springfield',
            'status': 'open',
        }
        defaults.update(kwargs)
        return Job.objects.create(created_by=owner, **defaults)
    return _make_job


@pytest.fixture
def open_job(make_job, poster):
    return make_job(poster)


@pytest.fixture
def make_offer(db):
    def _make_offer(job, contractor, price='100.00', status='pending', **kwargs):
        return Offer.objects.create(
            job=job,
            contractor=contractor,
            price=Decimal(price),
            message=kwargs.pop('message', 'I can do this job next week.'),
            status=status,
            created_at=kwargs.pop('created_at', timezone.now()),
            **kwargs
        )
    return _make_offer
