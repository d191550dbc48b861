from rest_framework import serializers
from django.contrib.auth import get_user_model
from apps.jobs.models import Job
from .models import Chat, Message

User = get_user_model()


class MessageSerializer(serializers.ModelSerializer):
    sender = serializers.PrimaryKeyRelatedField(read_only=True)
    sender_name = serializers.ReadOnlyField(source='sender.public_name')
    text = serializers.CharField(max_length=5000, trim_whitespace=True)

    class Meta:
        model = Message
        fields = ['id', 'chat', 'sender', 'sender_name', 'text', 'created_at']
        read_only_fields = ['id', 'chat', 'sender', 'sender_name', 'created_at']


class ChatSerializer(serializers.ModelSerializer):
    job = serializers.PrimaryKeyRelatedField(read_only=True)
    participants = serializers.SerializerMethodField()
    last_message = serializers.SerializerMethodField()

    class Meta:
        model = Chat
        fields = ['id', 'job', 'job_title', 'participants', 'created_at', 'last_message_at', 'last_message']
        read_only_fields = fields

    def get_participants(self, obj):
        return [{'id': user.id, 'name': user.public_name} for user in obj.participants]

    def get_last_message(self, obj):
        message = obj.messages.order_by('-created_at', '-id').first()
        if message is None:
            return None
        return MessageSerializer(message).data


class ChatStartSerializer(serializers.Serializer):
    job_id = serializers.IntegerField()
    contractor_id = serializers.IntegerField(required=False)

    def validate(self, data):
        user = self.context['request'].user
        job = Job.objects.filter(pk=data['job_id']).select_related('created_by').first()
        if job is None:
            raise serializers.ValidationError({"job_id": "Job not found."})

        if job.created_by_id == user.pk:
            contractor_id = data.get('contractor_id')
            if contractor_id is None:
                raise serializers.ValidationError({"contractor_id": "Choose the contractor to chat with."})
            contractor = User.objects.filter(pk=contractor_id).first()
        elif user.is_contractor:
            contractor = user
        else:
            raise serializers.ValidationError("You can only chat about jobs you posted or offered on.")

        if contractor is None or not job.offers.filter(contractor=contractor).exists():
            raise serializers.ValidationError("Chats are only available between a job owner and a contractor who made an offer.")

        data['job'] = job
        data['contractor'] = contractor
        return data

    def save(self):
        job = self.validated_data['job']
        chat, created = Chat.objects.get_or_create(
            job=job,
            contractor=self.validated_data['contractor'],
            defaults={'job_title': job.title}
        )
        return chat, created
