from django.db import models
from django.contrib.auth.models import AbstractUser
from core.constants import USER_ROLE_CHOICES


class User(AbstractUser):
    email = models.EmailField(unique=True)
    display_name = models.CharField(max_length=150, blank=True)
    phone_number = models.CharField(max_length=15, blank=True, null=True, unique=True)
    role = models.CharField(max_length=20, choices=USER_ROLE_CHOICES)
    created_at = models.DateTimeField(auto_now_add=True)

    @property
    def is_job_poster(self):
        return self.role == 'job_poster'

    @property
    def is_contractor(self):
        return self.role == 'contractor'

    @property
    def public_name(self):
        return self.display_name or self.email or self.username

    @staticmethod
    def get_by_identifier(identifier):
        return User.objects.filter(
            models.Q(email__iexact=identifier) | models.Q(username__iexact=identifier)
        ).first()

    def __str__(self):
        return f"{self.public_name} ({self.role})"
