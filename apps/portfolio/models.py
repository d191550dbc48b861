from django.db import models
from django.conf import settings

PLACEHOLDER_BIO = "This contractor hasn't created a profile yet."


class ContractorProfile(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='contractor_profile')
    display_name = models.CharField(max_length=150)
    bio = models.TextField(blank=True)
    skills = models.JSONField(default=list, blank=True)
    contact_email = models.EmailField(blank=True)
    contact_phone = models.CharField(max_length=20, blank=True)
    profile_picture = models.URLField(max_length=500, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Profile of {self.display_name}"

    @classmethod
    def initial_for(cls, user):
        """Unsaved profile pre-filled from the account, used until the contractor saves one."""
        return cls(user=user, display_name=user.public_name, contact_email=user.email or '')

    @classmethod
    def placeholder_for(cls, user):
        return cls(user=user, display_name=user.public_name, bio=PLACEHOLDER_BIO)


class CompletedJob(models.Model):
    contractor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='completed_jobs')
    title = models.CharField(max_length=200)
    description = models.TextField()
    category = models.CharField(max_length=100, blank=True)
    client_name = models.CharField(max_length=150, blank=True)
    completed_date = models.DateField()
    images = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-completed_date', '-id']

    def __str__(self):
        return f"{self.title} by {self.contractor.username}"
