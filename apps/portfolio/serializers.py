from rest_framework import serializers
from .models import ContractorProfile, CompletedJob
import logging

logger = logging.getLogger(__name__)


class ContractorProfileSerializer(serializers.ModelSerializer):
    user = serializers.PrimaryKeyRelatedField(read_only=True)
    display_name = serializers.CharField(max_length=150, required=False)
    skills = serializers.ListField(child=serializers.CharField(max_length=100), required=False)
    contact_email = serializers.EmailField(required=False, allow_blank=True)
    profile_picture = serializers.URLField(max_length=500, required=False, allow_blank=True)

    class Meta:
        model = ContractorProfile
        fields = [
            'user', 'display_name', 'bio', 'skills', 'contact_email',
            'contact_phone', 'profile_picture', 'updated_at'
        ]
        read_only_fields = ['user', 'updated_at']

    def validate_skills(self, value):
        # Keep the first occurrence of each skill, in the order given.
        skills = []
        for skill in value:
            if skill not in skills:
                skills.append(skill)
        return skills


class CompletedJobSerializer(serializers.ModelSerializer):
    contractor = serializers.PrimaryKeyRelatedField(read_only=True)
    title = serializers.CharField(max_length=200)
    description = serializers.CharField()
    images = serializers.ListField(child=serializers.URLField(max_length=500), required=False)

    class Meta:
        model = CompletedJob
        fields = [
            'id', 'contractor', 'title', 'description', 'category',
            'client_name', 'completed_date', 'images', 'created_at'
        ]
        read_only_fields = ['id', 'contractor', 'created_at']

    def create(self, validated_data):
        completed_job = CompletedJob.objects.create(contractor=self.context['request'].user, **validated_data)
        logger.info(f"Completed job {completed_job.id} added to the portfolio of user {completed_job.contractor_id}")
        return completed_job

    def update(self, instance, validated_data):
        new_images = validated_data.pop('images', [])
        instance = super().update(instance, validated_data)
        if new_images:
            instance.images = instance.images + new_images
            instance.save(update_fields=['images'])
        return instance


def public_profile_data(contractor):
    """Public portfolio of a contractor, falling back to a placeholder profile."""
    profile = ContractorProfile.objects.filter(user=contractor).first()
    if profile is None:
        profile = ContractorProfile.placeholder_for(contractor)
    completed_jobs = CompletedJob.objects.filter(contractor=contractor)
    data = ContractorProfileSerializer(profile).data
    data['completed_jobs'] = CompletedJobSerializer(completed_jobs, many=True).data
    data['completed_jobs_count'] = len(data['completed_jobs'])
    return data
