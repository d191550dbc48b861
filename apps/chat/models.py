from django.db import models
from django.conf import settings
from django.utils import timezone
from apps.jobs.models import Job


class Chat(models.Model):
    job = models.ForeignKey(Job, on_delete=models.CASCADE, related_name='chats')
    contractor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='contractor_chats')
    job_title = models.CharField(max_length=200)
    created_at = models.DateTimeField(auto_now_add=True)
    last_message_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['job', 'contractor'], name='unique_chat_per_job_contractor'),
        ]

    def __str__(self):
        return f"Chat about {self.job_title} with {self.contractor.username}"

    @property
    def participants(self):
        return [self.job.created_by, self.contractor]

    def has_participant(self, user):
        return user.pk in (self.job.created_by_id, self.contractor_id)

    @classmethod
    def for_user(cls, user):
        return cls.objects.filter(models.Q(contractor=user) | models.Q(job__created_by=user))


class Message(models.Model):
    chat = models.ForeignKey(Chat, on_delete=models.CASCADE, related_name='messages')
    sender = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='chat_messages')
    text = models.TextField()
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"Message from {self.sender.username} in chat {self.chat_id}"
