import logging

from django.conf import settings
from django.http import JsonResponse
from django.middleware import csrf
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .api_docs import LOGIN_EXAMPLES, extend_schema_auth
from .serializers import CustomTokenObtainPairSerializer

logger = logging.getLogger(__name__)


def _refresh_cookie_name():
    return settings.SIMPLE_JWT.get('REFRESH_COOKIE', 'refresh_token')


def _refresh_cookie_path():
    return settings.SIMPLE_JWT.get('REFRESH_COOKIE_PATH', '/api/v1/auth/refresh/')


def set_jwt_cookies(response, request, access_token, refresh_token=None):
    jwt_settings = settings.SIMPLE_JWT
    response.set_cookie(
        key=jwt_settings['AUTH_COOKIE'],
        value=access_token,
        expires=timezone.now() + jwt_settings['ACCESS_TOKEN_LIFETIME'],
        secure=jwt_settings['AUTH_COOKIE_SECURE'],
        httponly=True,
        samesite=jwt_settings['AUTH_COOKIE_SAMESITE'],
        path=jwt_settings['AUTH_COOKIE_PATH'],
    )
    if refresh_token:
        response.set_cookie(
            key=_refresh_cookie_name(),
            value=refresh_token,
            expires=timezone.now() + jwt_settings['REFRESH_TOKEN_LIFETIME'],
            secure=jwt_settings['AUTH_COOKIE_SECURE'],
            httponly=True,
            samesite=jwt_settings['AUTH_COOKIE_SAMESITE'],
            path=_refresh_cookie_path(),
        )
    # The front end echoes this value in X-CSRFToken on unsafe requests
    response.set_cookie(
        key=settings.CSRF_COOKIE_NAME,
        value=csrf.get_token(request),
        secure=settings.CSRF_COOKIE_SECURE,
        samesite=settings.CSRF_COOKIE_SAMESITE,
        path='/',
    )
    return response


@extend_schema_auth(
    summary='Sign in',
    description='Authenticate with email and password. Tokens are also set as HttpOnly cookies.',
    examples=LOGIN_EXAMPLES,
)
class CookieTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        try:
            serializer.is_valid(raise_exception=True)
        except (AuthenticationFailed, ValidationError, TokenError):
            logger.info("[AUTH] failed sign-in for %s", request.data.get('email'))
            return JsonResponse(
                {'detail': 'Invalid credentials'},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        data = serializer.validated_data
        logger.info("[AUTH] %s signed in", data['user']['email'])
        response = JsonResponse(data, status=status.HTTP_200_OK)
        return set_jwt_cookies(response, request, data['access'], data['refresh'])


class CookieTokenRefreshView(TokenRefreshView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        refresh_token = request.COOKIES.get(_refresh_cookie_name()) or request.data.get('refresh')
        if not refresh_token:
            return JsonResponse(
                {'detail': 'No refresh token found in cookies'},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        try:
            refresh = RefreshToken(refresh_token)
        except TokenError:
            return JsonResponse(
                {'detail': 'Invalid or expired refresh token'},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        access_token = str(refresh.access_token)
        response = JsonResponse({'access': access_token, 'refresh': str(refresh)}, status=status.HTTP_200_OK)
        return set_jwt_cookies(response, request, access_token, str(refresh))


class CookieTokenLogoutView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request, *args, **kwargs):
        response = JsonResponse({'detail': 'logged out'}, status=status.HTTP_200_OK)
        response.delete_cookie(settings.SIMPLE_JWT['AUTH_COOKIE'], path=settings.SIMPLE_JWT['AUTH_COOKIE_PATH'])
        response.delete_cookie(_refresh_cookie_name(), path=_refresh_cookie_path())
        return response
