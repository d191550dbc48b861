from django.urls import path
from .views import (
    ContractorProfileView, PublicContractorProfileView,
    CompletedJobListView, CompletedJobDetailView
)

urlpatterns = [
    path('profile/', ContractorProfileView.as_view(), name='portfolio_profile'),
    path('contractors/<int:user_id>/', PublicContractorProfileView.as_view(), name='portfolio_public_profile'),
    path('completed-jobs/', CompletedJobListView.as_view(), name='completed_job_list'),
    path('completed-jobs/<int:pk>/', CompletedJobDetailView.as_view(), name='completed_job_detail'),
]
