from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .models import (
    EggCollection,
    FarmConfig,
    FeedAllocation,
    FeedStock,
    FeedType,
    IssueReport,
    MortalityRecord,
    Sale,
    ShedBirdCount,
    Task,
)
from .reports import REPORT_PERIODS, REPORT_TYPES

User = get_user_model()

PASSWORD_MIN_LENGTH = 6
PASSWORD_LENGTH_MESSAGE = 'Password must be at least 6 characters long.'


# Users & auth

class UserSerializer(serializers.ModelSerializer):
    role_display = serializers.CharField(source='get_role_display', read_only=True)
    status_display = serializers.CharField(source='get_status_display', read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'email', 'full_name', 'role', 'role_display', 'assigned_shed',
            'status', 'status_display', 'last_login', 'created_at',
        ]
        read_only_fields = fields


class UserProfileSerializer(serializers.ModelSerializer):
    role_display = serializers.CharField(source='get_role_display', read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'email', 'full_name', 'role', 'role_display', 'assigned_shed', 'status',
            'enable_low_stock_alerts', 'enable_high_mortality_alerts', 'enable_daily_summary',
        ]
        read_only_fields = ['id', 'email', 'role', 'role_display', 'assigned_shed', 'status']


class InviteUserSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages={'invalid': 'Invalid email address.'})
    full_name = serializers.CharField(max_length=255, error_messages={'blank': 'Full name is required.'})
    role = serializers.ChoiceField(choices=User.ROLE_CHOICES)
    assigned_shed = serializers.CharField(max_length=50, required=False, allow_blank=True, allow_null=True)


class UserUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['full_name', 'role', 'status', 'assigned_shed']
        extra_kwargs = {
            'full_name': {'allow_blank': False, 'error_messages': {'blank': 'Full name is required.'}},
        }


class AcceptInvitationSerializer(serializers.Serializer):
    uid = serializers.CharField()
    token = serializers.CharField()
    password = serializers.CharField(
        write_only=True,
        min_length=PASSWORD_MIN_LENGTH,
        error_messages={'min_length': PASSWORD_LENGTH_MESSAGE},
    )


class PasswordUpdateSerializer(serializers.Serializer):
    password = serializers.CharField(
        write_only=True,
        min_length=PASSWORD_MIN_LENGTH,
        error_messages={'min_length': PASSWORD_LENGTH_MESSAGE},
    )


class NotificationPreferencesSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['enable_low_stock_alerts', 'enable_high_mortality_alerts', 'enable_daily_summary']


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = UserProfileSerializer(self.user).data
        return data


# Farm settings

class FarmConfigSerializer(serializers.ModelSerializer):
    class Meta:
        model = FarmConfig
        fields = ['farm_name', 'shed_count', 'default_currency', 'timezone', 'initial_bird_count', 'updated_at']
        read_only_fields = ['initial_bird_count', 'updated_at']

    def validate_default_currency(self, value):
        return value.upper()


class ShedBirdCountSerializer(serializers.ModelSerializer):
    class Meta:
        model = ShedBirdCount
        fields = ['shed', 'count']
        extra_kwargs = {
            # Uniqueness is checked across the submitted list instead
            'shed': {'validators': []},
        }


class BirdsPerShedSerializer(serializers.Serializer):
    sheds = ShedBirdCountSerializer(many=True)

    def validate_sheds(self, value):
        names = [entry['shed'] for entry in value]
        if len(names) != len(set(names)):
            raise serializers.ValidationError('Each shed can only be listed once.')
        return value


# Farm records

class EggCollectionSerializer(serializers.ModelSerializer):
    class Meta:
        model = EggCollection
        fields = [
            'id', 'date', 'shed', 'collection_time', 'total_eggs', 'broken_eggs',
            'crates', 'pieces', 'collected_by', 'user', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'crates', 'pieces', 'collected_by', 'user', 'created_at', 'updated_at']
        extra_kwargs = {
            'shed': {'required': False},
        }

    def validate(self, attrs):
        total = attrs.get('total_eggs', getattr(self.instance, 'total_eggs', 0))
        broken = attrs.get('broken_eggs', getattr(self.instance, 'broken_eggs', 0))
        if broken > total:
            raise serializers.ValidationError({'broken_eggs': ['Broken eggs cannot exceed total eggs.']})
        return attrs


class MortalityRecordSerializer(serializers.ModelSerializer):
    count = serializers.IntegerField(min_value=1, error_messages={'min_value': 'Count must be at least 1'})

    class Meta:
        model = MortalityRecord
        fields = ['id', 'date', 'shed', 'count', 'cause', 'recorded_by', 'user', 'created_at', 'updated_at']
        read_only_fields = ['id', 'recorded_by', 'user', 'created_at', 'updated_at']
        extra_kwargs = {
            'shed': {'required': False},
            'date': {'required': False},
        }


class FeedTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = FeedType
        fields = ['id', 'name', 'created_at']
        read_only_fields = ['id', 'created_at']


class FeedStockSerializer(serializers.ModelSerializer):
    quantity = serializers.IntegerField(min_value=1)

    class Meta:
        model = FeedStock
        fields = ['id', 'date', 'feed_type', 'quantity', 'unit', 'supplier', 'cost', 'user', 'created_at', 'updated_at']
        read_only_fields = ['id', 'user', 'created_at', 'updated_at']


class FeedAllocationSerializer(serializers.ModelSerializer):
    quantity_allocated = serializers.IntegerField(min_value=1)

    class Meta:
        model = FeedAllocation
        fields = [
            'id', 'date', 'shed', 'feed_type', 'quantity_allocated', 'unit',
            'allocated_by', 'user', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'allocated_by', 'user', 'created_at', 'updated_at']
        extra_kwargs = {
            'shed': {'required': False},
        }


class SaleSerializer(serializers.ModelSerializer):
    quantity = serializers.IntegerField(min_value=1)

    class Meta:
        model = Sale
        fields = [
            'id', 'date', 'item_sold', 'quantity', 'unit', 'unit_price', 'total_price',
            'customer_name', 'recorded_by', 'user', 'created_at', 'updated_at',
        ]
        # total_price is always recomputed from quantity x unit_price
        read_only_fields = ['id', 'total_price', 'recorded_by', 'user', 'created_at', 'updated_at']


class TaskSerializer(serializers.ModelSerializer):
    assigned_to = serializers.PrimaryKeyRelatedField(queryset=User.objects.all(), allow_null=True, required=False)
    assigned_to_name = serializers.CharField(source='assigned_to.display_name', read_only=True, default=None)

    class Meta:
        model = Task
        fields = [
            'id', 'description', 'assigned_to', 'assigned_to_name', 'due_date',
            'status', 'notes', 'created_by', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_by', 'created_at', 'updated_at']
        extra_kwargs = {
            'description': {'error_messages': {'blank': 'Description is required.'}},
        }

    def to_internal_value(self, data):
        # The task form submits 'unassigned' for an empty assignee
        if hasattr(data, 'get') and data.get('assigned_to') in ('unassigned', ''):
            data = data.copy()
            data['assigned_to'] = None
        return super().to_internal_value(data)


class TaskProgressSerializer(serializers.ModelSerializer):
    """Fields an assignee may change on their own task."""
    class Meta:
        model = Task
        fields = ['id', 'description', 'due_date', 'status', 'notes']
        read_only_fields = ['id', 'description', 'due_date']


class IssueReportSerializer(serializers.ModelSerializer):
    class Meta:
        model = IssueReport
        fields = [
            'id', 'category', 'description', 'shed', 'reported_by', 'status',
            'resolved_at', 'user', 'created_at',
        ]
        read_only_fields = ['id', 'reported_by', 'status', 'resolved_at', 'user', 'created_at']


# Reports

class ReportQuerySerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=REPORT_TYPES)
    period = serializers.ChoiceField(choices=REPORT_PERIODS)
    export = serializers.ChoiceField(choices=['csv'], required=False)
