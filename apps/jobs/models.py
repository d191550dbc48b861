from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator
from django.utils import timezone
from core.constants import JOB_STATUS_CHOICES, OFFER_STATUS_CHOICES
from decimal import Decimal


class Job(models.Model):
    created_by = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='jobs')
    title = models.CharField(max_length=200)
    description = models.TextField()
    location = models.CharField(max_length=200)
    address = models.CharField(max_length=300, blank=True)
    latitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    longitude = models.DecimalField(max_digits=9, decimal_places=6, null=True, blank=True)
    budget = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    category = models.CharField(max_length=100, blank=True)
    status = models.CharField(max_length=20, choices=JOB_STATUS_CHOICES, default='open')
    assigned_contractor = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='assigned_jobs'
    )
    date_posted = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date_posted']

    def __str__(self):
        return f"{self.title} - {self.created_by.username}"

    @property
    def is_open(self):
        return self.status == 'open'

    def is_owned_by(self, user):
        return user is not None and user.is_authenticated and self.created_by_id == user.pk

    def mark_in_progress(self, contractor):
        """Move an open job to in_progress; status never moves backwards."""
        if self.status != 'open':
            raise ValueError(f"Job {self.pk} cannot move from {self.status} to in_progress")
        self.status = 'in_progress'
        self.assigned_contractor = contractor
        self.save(update_fields=['status', 'assigned_contractor', 'updated_at'])


class Offer(models.Model):
    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='offers')
    contractor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='offers')
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    message = models.TextField()
    status = models.CharField(max_length=20, choices=OFFER_STATUS_CHOICES, default='pending')
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        constraints = [
            models.UniqueConstraint(fields=['job', 'contractor'], name='unique_offer_per_contractor'),
            models.UniqueConstraint(
                fields=['job'],
                condition=models.Q(status='accepted'),
                name='single_accepted_offer_per_job',
            ),
        ]

    def __str__(self):
        return f"{self.contractor.username} offered {self.price} on {self.job.title}"
