from django.contrib import admin
from .models import Chat, Message


@admin.register(Chat)
class ChatAdmin(admin.ModelAdmin):
    list_display = ('job_title', 'contractor', 'created_at', 'last_message_at')
    search_fields = ('job_title', 'contractor__email')


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ('chat', 'sender', 'created_at')
    search_fields = ('text', 'sender__email')
