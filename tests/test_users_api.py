import pytest
from rest_framework.authtoken.models import Token

from apps.users.models import User
from apps.users.serializers import RegisterSerializer

PASSWORD = 'StrongPass123!'


@pytest.mark.django_db
class TestAuthentication:
    def test_register(self, api_client):
        response = api_client.post('/users/auth/register/', {
            'email': 'New.Poster@Example.com',
            'password': PASSWORD,
            'role': 'job_poster',
            'display_name': ' New Poster ',
        }, format='json')

        assert response.status_code == 201
        user = User.objects.get(email='new.poster@example.com')
        assert user.is_job_poster
        assert user.display_name == 'New Poster'
        assert response.data['token'] == Token.objects.get(user=user).key
        assert response.data['user']['role'] == 'job_poster'

    def test_register_rejects_taken_email(self, api_client, contractor):
        response = api_client.post('/users/auth/register/', {
            'email': contractor.email.upper(),
            'password': PASSWORD,
            'role': 'contractor',
        }, format='json')

        assert response.status_code == 400
        assert 'email' in response.data

    def test_register_race_on_email(self, api_client, contractor, monkeypatch):
        # The other registration commits between the uniqueness check and the insert.
        monkeypatch.setattr(RegisterSerializer, 'validate_email', lambda self, value: value.strip().lower())

        response = api_client.post('/users/auth/register/', {
            'email': contractor.email,
            'password': PASSWORD,
            'role': 'contractor',
        }, format='json')

        assert response.status_code == 400
        assert 'email' in response.data
        assert User.objects.filter(email=contractor.email).count() == 1

    def test_register_rejects_weak_password(self, api_client):
        response = api_client.post('/users/auth/register/', {
            'email': 'weak@example.com',
            'password': '12345678',
            'role': 'contractor',
        }, format='json')

        assert response.status_code == 400
        assert not User.objects.filter(email='weak@example.com').exists()

    def test_register_rejects_unknown_role(self, api_client):
        response = api_client.post('/users/auth/register/', {
            'email': 'admin@example.com',
            'password': PASSWORD,
            'role': 'admin',
        }, format='json')

        assert response.status_code == 400
        assert 'role' in response.data

    def test_login_with_email(self, api_client, contractor):
        response = api_client.post('/users/auth/login/', {
            'identifier': contractor.email,
            'password': PASSWORD,
        }, format='json')

        assert response.status_code == 200
        assert response.data['user']['id'] == contractor.pk
        assert Token.objects.filter(user=contractor, key=response.data['token']).exists()

    def test_login_wrong_password(self, api_client, contractor):
        response = api_client.post('/users/auth/login/', {
            'identifier': contractor.email,
            'password': 'not-the-password',
        }, format='json')

        assert response.status_code == 400
        assert 'token' not in response.data

    def test_login_inactive_account(self, api_client, contractor):
        contractor.is_active = False
        contractor.save()

        response = api_client.post('/users/auth/login/', {
            'identifier': contractor.email,
            'password': PASSWORD,
        }, format='json')

        assert response.status_code == 400

    def test_token_authenticates_requests(self, api_client, contractor):
        token = Token.objects.create(user=contractor)
        api_client.credentials(HTTP_AUTHORIZATION=f'Token {token.key}')

        response = api_client.get('/users/me/')

        assert response.status_code == 200
        assert response.data['email'] == contractor.email

    def test_logout_deletes_token(self, api_client, contractor):
        token = Token.objects.create(user=contractor)
        api_client.credentials(HTTP_AUTHORIZATION=f'Token {token.key}')

        response = api_client.post('/users/auth/logout/')

        assert response.status_code == 204
        assert not Token.objects.filter(user=contractor).exists()


@pytest.mark.django_db
class TestProfile:
    def test_me_requires_authentication(self, api_client):
        assert api_client.get('/users/me/').status_code == 401

    def test_update_profile(self, client_for, contractor):
        response = client_for(contractor).patch(
            '/users/me/', {'display_name': 'Carl the Builder', 'phone_number': '+15551234567'}, format='json'
        )

        assert response.status_code == 200
        assert response.data['display_name'] == 'Carl the Builder'
        contractor.refresh_from_db()
        assert contractor.phone_number == '+15551234567'

    def test_role_cannot_be_changed(self, client_for, contractor):
        response = client_for(contractor).patch('/users/me/', {'role': 'job_poster'}, format='json')

        assert response.status_code == 200
        contractor.refresh_from_db()
        assert contractor.is_contractor

    def test_invalid_phone_number(self, client_for, contractor):
        response = client_for(contractor).patch('/users/me/', {'phone_number': '555-1234'}, format='json')

        assert response.status_code == 400
        assert 'phone_number' in response.data

    def test_phone_number_must_be_unique(self, client_for, contractor, make_user):
        make_user('job_poster', phone_number='+15550000000')
        response = client_for(contractor).patch('/users/me/', {'phone_number': '+15550000000'}, format='json')

        assert response.status_code == 400
        assert 'phone_number' in response.data
