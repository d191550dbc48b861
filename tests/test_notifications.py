from unittest import mock

import pytest
from twilio.base.exceptions import TwilioRestException

from apps.jobs.services import accept_offer
from apps.jobs.utils import notify_offer_accepted, send_notification

MESSAGE = 'Happy to help, I have done this many times.'


@pytest.fixture
def twilio_settings(settings):
    settings.TWILIO_ACCOUNT_SID = 'AC123'
    settings.TWILIO_AUTH_TOKEN = 'secret'
    settings.TWILIO_PHONE_NUMBER = '+15550001111'
    return settings


@pytest.mark.django_db
class TestSendNotification:
    def test_email_only_without_twilio_credentials(self, contractor, mailoutbox):
        with mock.patch('apps.jobs.utils.TwilioClient') as twilio_client:
            send_notification(contractor, 'Subject', 'Body', 'SMS')

        assert len(mailoutbox) == 1
        assert mailoutbox[0].to == [contractor.email]
        twilio_client.assert_not_called()

    def test_sms_sent_with_credentials(self, twilio_settings, make_user):
        user = make_user('contractor', phone_number='+15551234567')
        with mock.patch('apps.jobs.utils.TwilioClient') as twilio_client:
            send_notification(user, 'Subject', 'Body', 'Your offer was accepted')

        twilio_client.return_value.messages.create.assert_called_once_with(
            body='Your offer was accepted', from_='+15550001111', to='+15551234567'
        )

    def test_invalid_phone_number_is_skipped(self, twilio_settings, make_user):
        user = make_user('contractor', phone_number='5551234')
        with mock.patch('apps.jobs.utils.TwilioClient') as twilio_client:
            send_notification(user, 'Subject', 'Body', 'SMS')

        twilio_client.assert_not_called()

    def test_delivery_failures_are_not_raised(self, twilio_settings, make_user):
        user = make_user('contractor', phone_number='+15551234567')
        with mock.patch('apps.jobs.utils.send_mail', side_effect=ConnectionRefusedError('smtp down')), \
                mock.patch('apps.jobs.utils.TwilioClient') as twilio_client:
            twilio_client.return_value.messages.create.side_effect = TwilioRestException(500, '/Messages', 'boom')
            send_notification(user, 'Subject', 'Body', 'SMS')


@pytest.mark.django_db
def test_acceptance_notifies_every_bidder(open_job, poster, contractor, other_contractor, make_offer, mailoutbox):
    winner = make_offer(open_job, contractor)
    make_offer(open_job, other_contractor)
    acceptance = accept_offer(poster, open_job.pk, winner.pk)

    notify_offer_accepted(acceptance)

    subjects = {message.to[0]: message.subject for message in mailoutbox}
    assert subjects == {
        contractor.email: f'Offer Accepted for {open_job.title}',
        other_contractor.email: f'Offer Not Selected for {open_job.title}',
    }


@pytest.mark.django_db
def test_notifications_wait_for_commit(client_for, poster, contractor, open_job, mailoutbox, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        response = client_for(contractor).post(
            f'/jobs/{open_job.pk}/offers/', {'price': '80.00', 'message': MESSAGE}, format='json'
        )

    assert response.status_code == 201
    assert len(callbacks) == 1
    assert [message.to for message in mailoutbox] == [[poster.email]]
    assert mailoutbox[0].subject == f'New Offer for Job: {open_job.title}'


@pytest.mark.django_db
def test_failed_offer_sends_nothing(client_for, contractor, open_job, make_offer, mailoutbox, django_capture_on_commit_callbacks):
    make_offer(open_job, contractor)
    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        response = client_for(contractor).post(
            f'/jobs/{open_job.pk}/offers/', {'price': '80.00', 'message': MESSAGE}, format='json'
        )

    assert response.status_code == 409
    assert callbacks == []
    assert mailoutbox == []
