from rest_framework import serializers
from .models import Job, Offer
from core.constants import JOB_STATUS_CHOICES, OFFER_STATUS_CHOICES
from decimal import Decimal
import logging

logger = logging.getLogger(__name__)


class JobSerializer(serializers.ModelSerializer):
    title = serializers.CharField(
        max_length=200,
        min_length=5,
        error_messages={'min_length': 'Title must be at least 5 characters long.'}
    )
    description = serializers.CharField(
        min_length=20,
        error_messages={'min_length': 'Description must be at least 20 characters long.'}
    )
    location = serializers.CharField(
        max_length=200,
        min_length=2,
        error_messages={'min_length': 'Location must be at least 2 characters long.'}
    )
    address = serializers.CharField(max_length=300, required=False, allow_blank=True)
    budget = serializers.DecimalField(
        max_digits=10, decimal_places=2, required=False, allow_null=True, min_value=Decimal('0.01')
    )
    category = serializers.CharField(max_length=100, required=False, allow_blank=True)
    status = serializers.ChoiceField(choices=JOB_STATUS_CHOICES, read_only=True)
    created_by = serializers.PrimaryKeyRelatedField(read_only=True)
    poster_name = serializers.ReadOnlyField(source='created_by.public_name')
    assigned_contractor = serializers.PrimaryKeyRelatedField(read_only=True)
    pending_offer_count = serializers.SerializerMethodField()

    class Meta:
        model = Job
        fields = [
            'id', 'title', 'description', 'location', 'address', 'latitude', 'longitude',
            'budget', 'category', 'status', 'created_by', 'poster_name',
            'assigned_contractor', 'date_posted', 'updated_at', 'pending_offer_count'
        ]
        read_only_fields = [
            'id', 'status', 'created_by', 'poster_name', 'assigned_contractor',
            'date_posted', 'updated_at', 'pending_offer_count'
        ]

    def get_pending_offer_count(self, obj):
        count = getattr(obj, 'pending_offer_count', None)
        if count is None:
            count = obj.offers.filter(status='pending').count()
        return count

    def validate_address(self, value):
        value = value.strip()
        if value and len(value) < 5:
            raise serializers.ValidationError("Address must be at least 5 characters long.")
        return value

    def validate(self, data):
        # Partial updates are checked against the coordinates already stored.
        latitude = data.get('latitude', getattr(self.instance, 'latitude', None))
        longitude = data.get('longitude', getattr(self.instance, 'longitude', None))
        if (latitude is None) != (longitude is None):
            raise serializers.ValidationError("Latitude and longitude must be provided together.")
        if latitude is not None and not -90 <= latitude <= 90:
            raise serializers.ValidationError({"latitude": "Latitude must be between -90 and 90."})
        if longitude is not None and not -180 <= longitude <= 180:
            raise serializers.ValidationError({"longitude": "Longitude must be between -180 and 180."})
        return data

    def create(self, validated_data):
        job = Job.objects.create(created_by=self.context['request'].user, status='open', **validated_data)
        logger.info(f"Job {job.id} posted by user {job.created_by_id}")
        return job

    def update(self, instance, validated_data):
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        # Only edited fields are written; status and assignment belong to the offer lifecycle.
        instance.save(update_fields=[*validated_data, 'updated_at'])
        return instance


class OfferSerializer(serializers.ModelSerializer):
    job = serializers.PrimaryKeyRelatedField(read_only=True)
    job_title = serializers.ReadOnlyField(source='job.title')
    job_status = serializers.ReadOnlyField(source='job.status')
    contractor = serializers.PrimaryKeyRelatedField(read_only=True)
    contractor_name = serializers.ReadOnlyField(source='contractor.public_name')
    status = serializers.ChoiceField(choices=OFFER_STATUS_CHOICES, read_only=True)

    class Meta:
        model = Offer
        fields = [
            'id', 'job', 'job_title', 'job_status', 'contractor', 'contractor_name',
            'price', 'message', 'status', 'created_at'
        ]
        read_only_fields = fields


class OfferSubmitSerializer(serializers.Serializer):
    """Request body for submitting an offer; business limits are enforced by the service."""
    price = serializers.DecimalField(max_digits=12, decimal_places=2)
    message = serializers.CharField(trim_whitespace=True)


def serialize_offer_groups(groups):
    return {status: OfferSerializer(offers, many=True).data for status, offers in groups.items()}
