from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from django.db import transaction
from .models import Job
from .serializers import JobSerializer, OfferSerializer, OfferSubmitSerializer, serialize_offer_groups
from .exceptions import JobNotFound, JobNotOpen, NotOwner, WrongRole
from .services import submit_offer, accept_offer
from .queries import (
    job_offers_for_owner, contractor_offers, group_offers_by_status,
    poster_jobs_with_pending_counts, open_jobs, dashboard_for, with_pending_counts
)
from .utils import notify_offer_submitted, notify_offer_accepted
from core.utils import IsJobPoster, IsContractor
import logging

logger = logging.getLogger(__name__)

error_response = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        'error': openapi.Schema(type=openapi.TYPE_STRING),
        'code': openapi.Schema(type=openapi.TYPE_STRING),
    }
)

offer_groups_response = openapi.Schema(
    type=openapi.TYPE_OBJECT,
    properties={
        'pending': openapi.Schema(type=openapi.TYPE_ARRAY, items=openapi.Schema(type=openapi.TYPE_OBJECT)),
        'accepted': openapi.Schema(type=openapi.TYPE_ARRAY, items=openapi.Schema(type=openapi.TYPE_OBJECT)),
        'rejected': openapi.Schema(type=openapi.TYPE_ARRAY, items=openapi.Schema(type=openapi.TYPE_OBJECT)),
    }
)


def get_job_or_404(pk, for_update=False):
    jobs = Job.objects.select_for_update() if for_update else Job.objects.select_related('created_by')
    try:
        return jobs.get(pk=pk)
    except Job.DoesNotExist:
        raise JobNotFound()


class JobCreateView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Post a new job. Only job posters can post jobs.",
        request_body=JobSerializer,
        responses={
            201: JobSerializer,
            400: 'Bad Request',
            401: 'Unauthorized',
            403: openapi.Response('Forbidden', error_response)
        }
    )
    def post(self, request):
        if not request.user.is_job_poster:
            raise WrongRole("Only job posters can post jobs.")
        serializer = JobSerializer(data=request.data, context={'request': request})
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class OpenJobListView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="List open jobs, newest first, optionally filtered by a search term.",
        manual_parameters=[
            openapi.Parameter(
                'search', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                description='Matches title, description, location or category'
            )
        ],
        responses={200: JobSerializer(many=True), 401: 'Unauthorized'}
    )
    def get(self, request):
        jobs = with_pending_counts(open_jobs(request.query_params.get('search')))
        serializer = JobSerializer(jobs, many=True)
        return Response(serializer.data)


class MyJobsView(APIView):
    permission_classes = [IsAuthenticated, IsJobPoster]

    @swagger_auto_schema(
        operation_description="List the jobs posted by the authenticated job poster with pending offer counts.",
        responses={200: JobSerializer(many=True), 401: 'Unauthorized', 403: 'Forbidden'}
    )
    def get(self, request):
        jobs = poster_jobs_with_pending_counts(request.user).select_related('created_by')
        serializer = JobSerializer(jobs, many=True)
        return Response(serializer.data)


class JobDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Retrieve a job.",
        responses={200: JobSerializer, 401: 'Unauthorized', 404: openapi.Response('Not Found', error_response)}
    )
    def get(self, request, pk):
        job = get_job_or_404(pk)
        return Response(JobSerializer(job).data)

    @swagger_auto_schema(
        operation_description="Edit an open job. Only the job owner can edit it.",
        request_body=JobSerializer,
        responses={
            200: JobSerializer,
            400: 'Bad Request',
            401: 'Unauthorized',
            403: openapi.Response('Forbidden', error_response),
            404: openapi.Response('Not Found', error_response),
            409: openapi.Response('Conflict', error_response)
        }
    )
    def patch(self, request, pk):
        # Job row locked as in submit_offer and accept_offer.
        with transaction.atomic():
            job = get_job_or_404(pk, for_update=True)
            if not job.is_owned_by(request.user):
                raise NotOwner("Only the job owner can edit this job.")
            if not job.is_open:
                raise JobNotOpen("Only open jobs can be edited.")
            serializer = JobSerializer(job, data=request.data, partial=True, context={'request': request})
            if not serializer.is_valid():
                return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
            serializer.save()
        return Response(serializer.data)


class JobOffersView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="List the offers on a job grouped by status (job owner only).",
        responses={
            200: openapi.Response('Offers grouped by status', offer_groups_response),
            401: 'Unauthorized',
            403: openapi.Response('Forbidden', error_response),
            404: openapi.Response('Not Found', error_response)
        }
    )
    def get(self, request, pk):
        job, groups = job_offers_for_owner(request.user, pk)
        return Response({
            'job': JobSerializer(job).data,
            'offers': serialize_offer_groups(groups),
        })

    @swagger_auto_schema(
        operation_description="Submit an offer on an open job. Contractors can submit one offer per job.",
        request_body=OfferSubmitSerializer,
        responses={
            201: OfferSerializer,
            400: 'Bad Request',
            401: 'Unauthorized',
            403: openapi.Response('Forbidden', error_response),
            404: openapi.Response('Not Found', error_response),
            409: openapi.Response('Conflict', error_response)
        }
    )
    def post(self, request, pk):
        serializer = OfferSubmitSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        offer = submit_offer(
            request.user, pk,
            price=serializer.validated_data['price'],
            message=serializer.validated_data['message'],
        )
        transaction.on_commit(lambda: notify_offer_submitted(offer))
        return Response(OfferSerializer(offer).data, status=status.HTTP_201_CREATED)


class OfferAcceptView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description=(
            "Accept a pending offer. Every other offer on the job is rejected and the job "
            "moves to in_progress in the same transaction (job owner only)."
        ),
        responses={
            200: OfferSerializer,
            401: 'Unauthorized',
            403: openapi.Response('Forbidden', error_response),
            404: openapi.Response('Not Found', error_response),
            409: openapi.Response('Conflict', error_response),
            503: openapi.Response('Service Unavailable', error_response)
        }
    )
    def post(self, request, pk, offer_id):
        acceptance = accept_offer(request.user, pk, offer_id)
        transaction.on_commit(lambda: notify_offer_accepted(acceptance))
        return Response({
            'job': JobSerializer(acceptance.job).data,
            'offer': OfferSerializer(acceptance.offer).data,
            'rejected_offers': [offer.id for offer in acceptance.rejected_offers],
        })


class MyOffersView(APIView):
    permission_classes = [IsAuthenticated, IsContractor]

    @swagger_auto_schema(
        operation_description="List the authenticated contractor's offers across all jobs, grouped by status.",
        responses={
            200: openapi.Response('Offers grouped by status', offer_groups_response),
            401: 'Unauthorized',
            403: 'Forbidden'
        }
    )
    def get(self, request):
        groups = group_offers_by_status(contractor_offers(request.user))
        return Response(serialize_offer_groups(groups))


class DashboardView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Dashboard summary for the authenticated job poster or contractor.",
        responses={200: 'Dashboard summary', 401: 'Unauthorized', 403: openapi.Response('Forbidden', error_response)}
    )
    def get(self, request):
        summary = dashboard_for(request.user)
        if request.user.is_job_poster:
            data = {
                'role': 'job_poster',
                'active_jobs': JobSerializer(summary['active_jobs'], many=True).data,
                'completed_jobs': JobSerializer(summary['completed_jobs'], many=True).data,
                'pending_offer_count': summary['pending_offer_count'],
            }
        else:
            data = {
                'role': 'contractor',
                'recent_jobs': JobSerializer(summary['recent_jobs'], many=True).data,
                'offers': OfferSerializer(summary['offers'], many=True).data,
                'pending_offer_count': summary['pending_offer_count'],
                'accepted_offer_count': summary['accepted_offer_count'],
            }
        return Response(data)
