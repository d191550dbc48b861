from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status, permissions
from drf_yasg.utils import swagger_auto_schema
from django.contrib.auth import get_user_model
from .models import ContractorProfile, CompletedJob
from .serializers import ContractorProfileSerializer, CompletedJobSerializer, public_profile_data
from core.utils import IsContractor
import logging

logger = logging.getLogger(__name__)

User = get_user_model()


class ContractorProfileView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsContractor]

    def get_profile(self, user):
        profile = ContractorProfile.objects.filter(user=user).first()
        return profile or ContractorProfile.initial_for(user)

    @swagger_auto_schema(
        operation_description="Read the authenticated contractor's portfolio profile.",
        responses={200: ContractorProfileSerializer, 401: 'Unauthorized', 403: 'Forbidden'}
    )
    def get(self, request):
        return Response(ContractorProfileSerializer(self.get_profile(request.user)).data)

    @swagger_auto_schema(
        operation_description="Create or update the authenticated contractor's portfolio profile.",
        request_body=ContractorProfileSerializer,
        responses={200: ContractorProfileSerializer, 400: 'Bad Request', 401: 'Unauthorized', 403: 'Forbidden'}
    )
    def put(self, request):
        profile = self.get_profile(request.user)
        serializer = ContractorProfileSerializer(profile, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            logger.info(f"Portfolio profile saved for user {request.user.id}")
            return Response(serializer.data, status=status.HTTP_200_OK)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class PublicContractorProfileView(APIView):
    permission_classes = [permissions.AllowAny]

    @swagger_auto_schema(
        operation_description="Public portfolio of a contractor with their completed jobs.",
        responses={200: 'Contractor portfolio', 404: 'Not Found'}
    )
    def get(self, request, user_id):
        contractor = User.objects.filter(pk=user_id, role='contractor').first()
        if contractor is None:
            return Response({"error": "Contractor not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(public_profile_data(contractor))


class CompletedJobListView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsContractor]

    @swagger_auto_schema(
        operation_description="List the completed jobs in the authenticated contractor's portfolio.",
        responses={200: CompletedJobSerializer(many=True), 401: 'Unauthorized', 403: 'Forbidden'}
    )
    def get(self, request):
        completed_jobs = CompletedJob.objects.filter(contractor=request.user)
        return Response(CompletedJobSerializer(completed_jobs, many=True).data)

    @swagger_auto_schema(
        operation_description="Add a completed job to the authenticated contractor's portfolio.",
        request_body=CompletedJobSerializer,
        responses={201: CompletedJobSerializer, 400: 'Bad Request', 401: 'Unauthorized', 403: 'Forbidden'}
    )
    def post(self, request):
        serializer = CompletedJobSerializer(data=request.data, context={'request': request})
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


class CompletedJobDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated, IsContractor]

    def get_completed_job(self, request, pk):
        try:
            completed_job = CompletedJob.objects.get(pk=pk)
        except CompletedJob.DoesNotExist:
            return None, Response({"error": "Completed job not found"}, status=status.HTTP_404_NOT_FOUND)
        if completed_job.contractor_id != request.user.id:
            return None, Response({"error": "Not authorized"}, status=status.HTTP_403_FORBIDDEN)
        return completed_job, None

    @swagger_auto_schema(
        operation_description="Edit a completed job. New image URLs are appended to the existing ones.",
        request_body=CompletedJobSerializer,
        responses={200: CompletedJobSerializer, 400: 'Bad Request', 403: 'Forbidden', 404: 'Not Found'}
    )
    def patch(self, request, pk):
        completed_job, error = self.get_completed_job(request, pk)
        if error:
            return error
        serializer = CompletedJobSerializer(completed_job, data=request.data, partial=True, context={'request': request})
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    @swagger_auto_schema(
        operation_description="Remove a completed job from the portfolio.",
        responses={204: 'No Content', 403: 'Forbidden', 404: 'Not Found'}
    )
    def delete(self, request, pk):
        completed_job, error = self.get_completed_job(request, pk)
        if error:
            return error
        completed_job.delete()
        logger.info(f"Completed job {pk} removed by user {request.user.id}")
        return Response(status=status.HTTP_204_NO_CONTENT)
