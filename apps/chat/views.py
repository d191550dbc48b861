from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from django.db.models import F
from django.utils import timezone
from .models import Chat
from .serializers import ChatSerializer, ChatStartSerializer, MessageSerializer
import logging

logger = logging.getLogger(__name__)


def get_chat_for_participant(request, chat_id):
    try:
        chat = Chat.objects.select_related('job__created_by', 'contractor').get(pk=chat_id)
    except Chat.DoesNotExist:
        return None, Response({"error": "Chat not found"}, status=status.HTTP_404_NOT_FOUND)
    if not chat.has_participant(request.user):
        return None, Response({"error": "Not authorized"}, status=status.HTTP_403_FORBIDDEN)
    return chat, None


class ChatListView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="List the authenticated user's chats, most recent activity first.",
        responses={200: ChatSerializer(many=True), 401: 'Unauthorized'}
    )
    def get(self, request):
        chats = (
            Chat.for_user(request.user)
            .select_related('job__created_by', 'contractor')
            .order_by(F('last_message_at').desc(nulls_last=True), '-created_at')
        )
        return Response(ChatSerializer(chats, many=True).data)

    @swagger_auto_schema(
        operation_description=(
            "Open the chat between a job owner and a contractor who offered on the job. "
            "Job owners pass contractor_id; contractors only pass job_id."
        ),
        request_body=ChatStartSerializer,
        responses={200: ChatSerializer, 201: ChatSerializer, 400: 'Bad Request', 401: 'Unauthorized'}
    )
    def post(self, request):
        serializer = ChatStartSerializer(data=request.data, context={'request': request})
        if serializer.is_valid():
            chat, created = serializer.save()
            if created:
                logger.info(f"Chat {chat.id} opened for job {chat.job_id} by user {request.user.id}")
            return Response(
                ChatSerializer(chat).data,
                status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
            )
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class ChatMessagesView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="List the messages of a chat, oldest first (participants only).",
        responses={200: MessageSerializer(many=True), 401: 'Unauthorized', 403: 'Forbidden', 404: 'Not Found'}
    )
    def get(self, request, chat_id):
        chat, error = get_chat_for_participant(request, chat_id)
        if error:
            return error
        messages = chat.messages.select_related('sender')
        return Response(MessageSerializer(messages, many=True).data)

    @swagger_auto_schema(
        operation_description="Send a message in a chat (participants only).",
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['text'],
            properties={'text': openapi.Schema(type=openapi.TYPE_STRING)}
        ),
        responses={201: MessageSerializer, 400: 'Bad Request', 401: 'Unauthorized', 403: 'Forbidden', 404: 'Not Found'}
    )
    def post(self, request, chat_id):
        chat, error = get_chat_for_participant(request, chat_id)
        if error:
            return error
        serializer = MessageSerializer(data=request.data)
        if serializer.is_valid():
            message = serializer.save(chat=chat, sender=request.user, created_at=timezone.now())
            chat.last_message_at = message.created_at
            chat.save(update_fields=['last_message_at'])
            return Response(MessageSerializer(message).data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
