"""
Write-side routines shared by the API views.

Each routine takes the caller's RequestContext, applies the role rules
(worker shed override, display-name stamps) and writes a single row.
Storage failures are logged and surfaced with the backend's message.
"""
import logging
import smtplib

from django.conf import settings
from django.contrib.auth.tokens import default_token_generator
from django.core.exceptions import ValidationError as DjangoValidationError
from django.core.mail import send_mail
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone
from django.utils.encoding import force_bytes, force_str
from django.utils.http import urlsafe_base64_decode, urlsafe_base64_encode
from rest_framework import serializers, status
from rest_framework.exceptions import APIException

from .models import FarmConfig, IssueReport, ShedBirdCount, User

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = 'User with this email already exists.'
SELF_DELETE_MESSAGE = 'Cannot delete your own account.'
INVALID_INVITATION_MESSAGE = 'Invitation link is invalid or has expired.'


class RecordWriteError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Failed to save record.'
    default_code = 'write_failed'


class ActionNotAllowed(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'This action is not allowed.'
    default_code = 'not_allowed'


class InvitationError(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'Failed to invite user.'
    default_code = 'invitation_failed'


def save_record(ctx, serializer, stamp_field=None, has_shed=True, owner_field='user'):
    """
    Persist one farm record through ``serializer``.

    ``stamp_field`` names the attribution column (recorded_by, allocated_by,
    collected_by) filled from the caller's display name. ``owner_field`` is
    set to the calling account on create.
    """
    extra = {}
    if has_shed:
        submitted = serializer.validated_data.get('shed', getattr(serializer.instance, 'shed', None))
        extra['shed'] = ctx.resolve_shed(submitted)
    if stamp_field:
        extra[stamp_field] = ctx.display_name
    if serializer.instance is None and owner_field:
        extra[owner_field] = ctx.user

    model_name = serializer.Meta.model.__name__
    try:
        with transaction.atomic():
            instance = serializer.save(**extra)
    except DatabaseError as exc:
        logger.exception("Failed to save %s for %s", model_name, ctx.display_name)
        raise RecordWriteError(f"Failed to save record: {exc}")

    logger.info("[WRITE] %s %s saved by %s", model_name, instance.pk, ctx.display_name)
    return instance


def delete_record(ctx, instance):
    model_name = type(instance).__name__
    pk = instance.pk
    try:
        instance.delete()
    except DatabaseError as exc:
        logger.exception("Failed to delete %s %s", model_name, pk)
        raise RecordWriteError(f"Failed to delete record: {exc}")
    logger.info("[DELETE] %s %s deleted by %s", model_name, pk, ctx.display_name)


def resolve_issue(ctx, issue):
    issue.status = IssueReport.STATUS_RESOLVED
    issue.resolved_at = timezone.now()
    issue.save(update_fields=['status', 'resolved_at'])
    logger.info("[WRITE] IssueReport %s resolved by %s", issue.pk, ctx.display_name)
    return issue


# Users

def build_invitation_link(user):
    uid = urlsafe_base64_encode(force_bytes(user.pk))
    token = default_token_generator.make_token(user)
    return f"{settings.FRONTEND_URL.rstrip('/')}/accept-invite?uid={uid}&token={token}"


def send_invitation_email(user, invited_by):
    subject = "You have been invited to the farm workspace"
    message = (
        f"Hello {user.full_name or user.email},\n\n"
        f"{invited_by} has invited you to join as {user.get_role_display()}.\n"
        f"Set your password to activate your account:\n\n"
        f"{build_invitation_link(user)}\n"
    )
    send_mail(subject, message, settings.DEFAULT_FROM_EMAIL, [user.email], fail_silently=False)


def invite_user(ctx, email, full_name, role, assigned_shed=None):
    """
    Create an inactive account and email the invitee a set-password link.
    """
    if User.objects.filter(email__iexact=email).exists():
        raise serializers.ValidationError({'email': [DUPLICATE_EMAIL_MESSAGE]})

    try:
        with transaction.atomic():
            user = User.objects.create_user(
                email=email,
                password=None,
                full_name=full_name,
                role=role,
                assigned_shed=assigned_shed or None,
                status=User.STATUS_INACTIVE,
            )
    except IntegrityError:
        raise serializers.ValidationError({'email': [DUPLICATE_EMAIL_MESSAGE]})

    try:
        send_invitation_email(user, ctx.display_name)
    except (smtplib.SMTPException, OSError) as exc:
        logger.exception("Invitation email to %s failed", email)
        user.delete()
        raise InvitationError(f"Failed to invite user: {exc}")

    logger.info("[INVITE] %s invited %s as %s", ctx.display_name, email, role)
    return user


def accept_invitation(uid, token, password):
    try:
        user = User.objects.get(pk=force_str(urlsafe_base64_decode(uid)))
    except (TypeError, ValueError, OverflowError, DjangoValidationError, User.DoesNotExist):
        raise serializers.ValidationError({'token': [INVALID_INVITATION_MESSAGE]})

    if not default_token_generator.check_token(user, token):
        raise serializers.ValidationError({'token': [INVALID_INVITATION_MESSAGE]})

    user.set_password(password)
    user.status = User.STATUS_ACTIVE
    user.save()
    logger.info("[INVITE] %s accepted invitation", user.email)
    return user


def delete_user(ctx, user):
    if user.pk == ctx.user.pk:
        raise ActionNotAllowed(SELF_DELETE_MESSAGE)
    delete_record(ctx, user)


def update_password(user, password):
    user.set_password(password)
    user.save(update_fields=['password', 'updated_at'])
    logger.info("[AUTH] password updated for %s", user.email)


# Farm settings

def save_birds_per_shed(entries):
    """
    Replace the per-shed bird counts and make their sum the farm's starting count.
    """
    with transaction.atomic():
        sheds = [entry['shed'] for entry in entries]
        ShedBirdCount.objects.exclude(shed__in=sheds).delete()
        for entry in entries:
            ShedBirdCount.objects.update_or_create(shed=entry['shed'], defaults={'count': entry['count']})

        config = FarmConfig.load()
        config.initial_bird_count = sum(entry['count'] for entry in entries)
        config.save()
    return config
