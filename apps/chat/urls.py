from django.urls import path
from .views import ChatListView, ChatMessagesView

urlpatterns = [
    path('', ChatListView.as_view(), name='chat_list'),
    path('<int:chat_id>/messages/', ChatMessagesView.as_view(), name='chat_messages'),
]
