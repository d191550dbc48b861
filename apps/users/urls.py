from django.urls import path
from .views import AuthRegisterView, AuthLoginView, AuthLogoutView, UserProfileView

urlpatterns = [
    # Authentication
    path('auth/register/', AuthRegisterView.as_view(), name='auth_register'),
    path('auth/login/', AuthLoginView.as_view(), name='auth_login'),
    path('auth/logout/', AuthLogoutView.as_view(), name='auth_logout'),

    # Profile
    path('me/', UserProfileView.as_view(), name='user_profile'),
]
