import logging
import re
from django.conf import settings
from django.core.mail import send_mail
from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client as TwilioClient

logger = logging.getLogger(__name__)

PHONE_NUMBER_PATTERN = re.compile(r'^\+\d{9,15}$')


def send_notification(user, subject, email_message, sms_message):
    """
    Send notifications to users via email and SMS.

    Delivery problems are logged and never raised: notifications are sent after
    the marketplace state has already been committed.

    Args:
        user: User object to send notification to
        subject: Email subject
        email_message: Email message content
        sms_message: SMS message content
    """
    if user.email:
        try:
            send_mail(
                subject=subject,
                message=email_message,
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[user.email],
                fail_silently=False,
            )
            logger.info(f"Email notification sent to user {user.id}")
        except Exception as e:
            logger.error(f"Failed to send email to user {user.id}: {str(e)}")

    if not user.phone_number or not settings.TWILIO_ACCOUNT_SID:
        return
    if not PHONE_NUMBER_PATTERN.match(user.phone_number):
        logger.warning(f"Invalid phone number format for user {user.id}: {user.phone_number}")
        return
    try:
        twilio_client = TwilioClient(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        twilio_client.messages.create(
            body=sms_message,
            from_=settings.TWILIO_PHONE_NUMBER,
            to=user.phone_number
        )
        logger.info(f"SMS notification sent to user {user.id}")
    except TwilioRestException as e:
        logger.error(f"Failed to send SMS to user {user.id}: {str(e)}")


def notify_offer_submitted(offer):
    job = offer.job
    poster = job.created_by
    contractor = offer.contractor
    email_subject = f"New Offer for Job: {job.title}"
    email_message = (
        f"Dear {poster.public_name},\n\n"
        f"{contractor.public_name} has submitted an offer of {offer.price} for your job '{job.title}'.\n"
        f"Please review the offer on TradeBoard.\n\n"
        f"Best regards,\nTradeBoard Team"
    )
    sms_message = f"New offer of {offer.price} for '{job.title}' from {contractor.public_name}."
    send_notification(poster, email_subject, email_message, sms_message)


def notify_offer_accepted(acceptance):
    job = acceptance.job
    accepted = acceptance.offer
    poster = job.created_by

    email_subject = f"Offer Accepted for {job.title}"
    email_message = (
        f"Dear {accepted.contractor.public_name},\n\n"
        f"Your offer for job '{job.title}' has been accepted.\n"
        f"Contact the job poster at:\n"
        f"- Email: {poster.email}\n"
        f"- Phone: {poster.phone_number or 'Not provided'}\n\n"
        f"Best regards,\nTradeBoard Team"
    )
    sms_message = f"Your offer for '{job.title}' was accepted. Contact the job poster for details."
    send_notification(accepted.contractor, email_subject, email_message, sms_message)

    for offer in acceptance.rejected_offers:
        email_subject = f"Offer Not Selected for {job.title}"
        email_message = (
            f"Dear {offer.contractor.public_name},\n\n"
            f"The job poster has accepted another offer for '{job.title}'.\n"
            f"Best regards,\nTradeBoard Team"
        )
        sms_message = f"Another offer was accepted for '{job.title}'."
        send_notification(offer.contractor, email_subject, email_message, sms_message)
