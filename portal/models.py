"""
Database models for the clinic backend.

These models capture the administrator accounts guarding the admin
panel and the content the clinic website publishes: appointments,
doctors, services, blog posts with their comments, patient reports and
feedback.  Field names mirror the JSON exposed to the front-end to keep
the transformation to responses trivial.
"""
from __future__ import annotations

import os
import time

from django.contrib.auth.base_user import BaseUserManager
from django.contrib.auth.models import AbstractUser
from django.core.exceptions import SuspiciousFileOperation
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone
from django.utils.text import get_valid_filename


def _stamped_path(folder: str, filename: str) -> str:
    """Store uploads as ``<folder>/<epoch ms>-<original name>``."""
    try:
        name = get_valid_filename(os.path.basename(filename or ''))
    except SuspiciousFileOperation:
        name = 'upload'
    return f"{folder}/{int(time.time() * 1000)}-{name}"


def doctor_photo_path(instance, filename: str) -> str:
    return _stamped_path('doctors', filename)


def service_photo_path(instance, filename: str) -> str:
    return _stamped_path('services', filename)


def blog_image_path(instance, filename: str) -> str:
    return _stamped_path('blogs', filename)


def report_pdf_path(instance, filename: str) -> str:
    return _stamped_path('reports', filename)


class AdministratorManager(BaseUserManager):
    """Manager for :class:`Administrator`, keyed by email instead of username."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields):
        if not email:
            raise ValueError('email is required')
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')
        return self._create_user(email, password, **extra_fields)


class Administrator(AbstractUser):
    """An account allowed into the admin panel.

    The email address is the login identity.  ``session_token`` holds the
    marker of the single live session: every successful login overwrites
    it, so tokens minted by earlier logins stop verifying.  An empty
    value means no session is live (never logged in, or logged out).
    """
    username = None
    first_name = None
    last_name = None

    name = models.CharField(max_length=255, blank=True)
    email = models.EmailField(unique=True)
    session_token = models.CharField(max_length=64, blank=True, default='')

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    objects = AdministratorManager()

    def get_full_name(self) -> str:
        return self.name or self.email

    def get_short_name(self) -> str:
        return self.name or self.email

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"


class Appointment(models.Model):
    """A booking request submitted from the public website."""
    STATUS_PENDING = 'Pending'

    name = models.CharField(max_length=255, blank=True)
    email = models.EmailField(blank=True, db_index=True)
    phone = models.CharField(max_length=32, blank=True)
    age = models.PositiveIntegerField(null=True, blank=True)
    gender = models.CharField(max_length=32, blank=True)
    service = models.CharField(max_length=255, blank=True)
    message = models.TextField(blank=True)
    doctor = models.CharField(max_length=255, blank=True, default='')
    appointment_date = models.CharField(max_length=32, blank=True, default='')
    appointment_time = models.CharField(max_length=32, blank=True, default='')
    status = models.CharField(max_length=32, default=STATUS_PENDING)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.status})"


class Doctor(models.Model):
    STATUS_AVAILABLE = 'Available'

    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    specialization = models.CharField(max_length=255, blank=True)
    experience = models.CharField(max_length=64, blank=True)
    phone = models.CharField(max_length=32, blank=True)
    # 'Available' or anything else (e.g. 'On Leave'); dashboards count both sides
    status = models.CharField(max_length=32, default=STATUS_AVAILABLE, db_index=True)
    photo = models.FileField(upload_to=doctor_photo_path, max_length=512, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.specialization})"


class Service(models.Model):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    duration = models.CharField(max_length=64, blank=True)
    price = models.CharField(max_length=64, blank=True)
    status = models.CharField(max_length=32, blank=True)
    photo = models.FileField(upload_to=service_photo_path, max_length=512, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.name


class Blog(models.Model):
    title = models.CharField(max_length=255)
    author = models.CharField(max_length=255)
    date = models.CharField(max_length=32)
    content = models.TextField()
    status = models.CharField(max_length=32, default='Draft')
    image = models.FileField(upload_to=blog_image_path, max_length=512, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return self.title


class Comment(models.Model):
    """A visitor comment below a blog post."""
    blog = models.ForeignKey(Blog, on_delete=models.CASCADE, related_name='comments')
    name = models.CharField(max_length=255)
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [models.Index(fields=['blog', 'created_at'], name='portal_comm_blog_id_5c7f1e_idx')]

    def __str__(self) -> str:
        return f"Comment by {self.name} on {self.blog_id}"


class Report(models.Model):
    """A PDF lab/medical report uploaded for a patient."""
    title = models.CharField(max_length=255, blank=True)
    patient_name = models.CharField(max_length=255, blank=True)
    report_date = models.DateTimeField(default=timezone.now)
    pdf_file = models.FileField(upload_to=report_pdf_path, max_length=512)
    status = models.CharField(max_length=32, default='Completed')
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.title} ({self.patient_name})"


class Feedback(models.Model):
    STATUS_PENDING = 'Pending'
    STATUS_APPROVED = 'Approved'
    STATUS_CHOICES = ((STATUS_PENDING, 'Pending'), (STATUS_APPROVED, 'Approved'))

    name = models.CharField(max_length=255, blank=True)
    email = models.EmailField(blank=True)
    rating = models.PositiveSmallIntegerField(
        default=5, validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    message = models.TextField(blank=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.rating}/5, {self.status})"


class AuditEvent(models.Model):
    """Trail of security relevant actions (logins, logouts, registrations)."""
    user = models.ForeignKey(Administrator, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.CharField(max_length=64, blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    ip = models.GenericIPAddressField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='portal_audi_action_3b1f0a_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
