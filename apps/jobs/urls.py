from django.urls import path
from .views import (
    JobCreateView, OpenJobListView, MyJobsView, JobDetailView, JobOffersView,
    OfferAcceptView, MyOffersView, DashboardView
)

urlpatterns = [
    path('', JobCreateView.as_view(), name='job_create'),
    path('open/', OpenJobListView.as_view(), name='open_jobs'),
    path('mine/', MyJobsView.as_view(), name='my_jobs'),
    path('dashboard/', DashboardView.as_view(), name='dashboard'),
    path('offers/mine/', MyOffersView.as_view(), name='my_offers'),
    path('<int:pk>/', JobDetailView.as_view(), name='job_detail'),
    path('<int:pk>/offers/', JobOffersView.as_view(), name='job_offers'),
    path('<int:pk>/offers/<int:offer_id>/accept/', OfferAcceptView.as_view(), name='offer_accept'),
]
