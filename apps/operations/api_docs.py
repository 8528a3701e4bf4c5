"""
API documentation extensions for drf-spectacular.
Shared responses, parameters and examples used by the operations views.
"""
from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiTypes, extend_schema
from rest_framework import status

AUTH_ERROR_RESPONSE = {
    status.HTTP_401_UNAUTHORIZED: {
        'type': 'object',
        'properties': {
            'detail': {'type': 'string', 'example': 'Authentication credentials were not provided.'}
        }
    },
    status.HTTP_403_FORBIDDEN: {
        'type': 'object',
        'properties': {
            'detail': {'type': 'string', 'example': 'Action denied. You have not been assigned to a shed.'}
        }
    }
}

VALIDATION_ERROR_RESPONSE = {
    status.HTTP_400_BAD_REQUEST: {
        'type': 'object',
        'properties': {
            'field_name': {
                'type': 'array',
                'items': {'type': 'string'},
                'example': ['This field is required.']
            }
        }
    }
}

PAGINATION_PARAMETERS = [
    OpenApiParameter(
        name='page',
        type=OpenApiTypes.INT,
        location=OpenApiParameter.QUERY,
        description='A page number within the paginated result set.',
        required=False
    ),
]

REPORT_PARAMETERS = [
    OpenApiParameter(
        name='type',
        type=OpenApiTypes.STR,
        location=OpenApiParameter.QUERY,
        enum=['eggCollection', 'feedUsage', 'brokenEggs', 'mortality'],
        required=True
    ),
    OpenApiParameter(
        name='period',
        type=OpenApiTypes.STR,
        location=OpenApiParameter.QUERY,
        enum=['daily', 'weekly', 'monthly', 'quarterly'],
        required=True
    ),
    OpenApiParameter(
        name='export',
        type=OpenApiTypes.STR,
        location=OpenApiParameter.QUERY,
        enum=['csv'],
        description='Return the report as a CSV attachment.',
        required=False
    ),
]


def extend_schema_auth(tags=None, responses=None, **kwargs):
    """Decorator for authentication endpoints with common responses.

    Args:
        tags: List of tags for the endpoint
        responses: Custom responses to merge with default error responses
        **kwargs: Additional arguments to pass to extend_schema
    """
    if tags is None:
        tags = ['Authentication']

    default_responses = {**VALIDATION_ERROR_RESPONSE, **AUTH_ERROR_RESPONSE}
    if responses:
        default_responses.update(responses)

    return extend_schema(tags=tags, responses=default_responses, **kwargs)


def extend_schema_list(tags=None, **kwargs):
    """Decorator for list endpoints with pagination."""
    return extend_schema(parameters=PAGINATION_PARAMETERS, tags=tags, **kwargs)


USER_EXAMPLE = {
    'id': '7d1f0a8e-3c2b-4f5e-9a61-0b2c3d4e5f60',
    'email': 'manager@example.com',
    'full_name': 'Amina Mushi',
    'role': 'MANAGER',
    'role_display': 'Manager',
    'assigned_shed': None,
    'status': 'ACTIVE',
}

LOGIN_EXAMPLES = [
    OpenApiExample(
        'Login Request',
        value={'email': 'manager@example.com', 'password': 'secret123'},
        request_only=True,
    ),
    OpenApiExample(
        'Login Success',
        value={
            'access': 'eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...',
            'refresh': 'eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...',
            'user': USER_EXAMPLE
        },
        response_only=True,
        status_codes=['200']
    ),
    OpenApiExample(
        'Login Failed',
        value={'detail': 'Invalid credentials'},
        response_only=True,
        status_codes=['401']
    ),
]

INVITE_EXAMPLES = [
    OpenApiExample(
        'Invite Worker',
        value={'email': 'worker@example.com', 'full_name': 'Juma Said', 'role': 'WORKER', 'assigned_shed': 'Shed A'},
        request_only=True,
    ),
    OpenApiExample(
        'Duplicate Email',
        value={'email': ['User with this email already exists.']},
        response_only=True,
        status_codes=['400']
    ),
]

EGG_COLLECTION_EXAMPLES = [
    OpenApiExample(
        'Morning Collection',
        value={
            'date': '2024-05-14',
            'shed': 'Shed A',
            'collection_time': '08:30',
            'total_eggs': 745,
            'broken_eggs': 6,
        },
        request_only=True,
    ),
    OpenApiExample(
        'Saved Collection',
        value={
            'id': '0f6a2f8c-5b7e-4f57-8f4e-2a1d9c3b7e10',
            'date': '2024-05-14',
            'shed': 'Shed A',
            'collection_time': '08:30:00',
            'total_eggs': 745,
            'broken_eggs': 6,
            'crates': 24,
            'pieces': 25,
            'collected_by': 'Juma Said',
        },
        response_only=True,
        status_codes=['201']
    ),
]

MORTALITY_EXAMPLES = [
    OpenApiExample(
        'Record Deaths',
        value={'shed': 'Shed B', 'count': 3, 'cause': 'Heat stress'},
        request_only=True,
    ),
    OpenApiExample(
        'Worker Without Shed',
        value={'detail': 'Action denied. You have not been assigned to a shed.'},
        response_only=True,
        status_codes=['403']
    ),
]

SALE_EXAMPLES = [
    OpenApiExample(
        'Egg Tray Sale',
        value={
            'date': '2024-05-14',
            'item_sold': 'Eggs',
            'quantity': 20,
            'unit': 'trays',
            'unit_price': '9.50',
            'customer_name': 'Mama Neema Shop',
        },
        request_only=True,
    ),
]
