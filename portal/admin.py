"""
Django admin registrations for the clinic models.

Superusers can inspect and correct data through ``/admin/``; day to day
editing happens in the clinic's own admin panel via the API.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.contrib.auth.forms import UserChangeForm, UserCreationForm

from .models import (
    Administrator,
    Appointment,
    AuditEvent,
    Blog,
    Comment,
    Doctor,
    Feedback,
    Report,
    Service,
)


class AdministratorCreationForm(UserCreationForm):
    class Meta(UserCreationForm.Meta):
        model = Administrator
        fields = ("email", "name")


class AdministratorChangeForm(UserChangeForm):
    class Meta(UserChangeForm.Meta):
        model = Administrator


@admin.register(Administrator)
class AdministratorAdmin(UserAdmin):
    form = AdministratorChangeForm
    add_form = AdministratorCreationForm
    ordering = ('email',)
    list_display = ('email', 'name', 'is_active', 'is_staff', 'is_superuser')
    list_filter = ('is_active', 'is_staff', 'is_superuser')
    search_fields = ('email', 'name')
    readonly_fields = ('last_login', 'date_joined')
    fieldsets = (
        (None, {'fields': ('email', 'name', 'password')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Dates', {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {'classes': ('wide',), 'fields': ('email', 'name', 'password1', 'password2')}),
    )


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'email', 'service', 'doctor', 'appointment_date', 'status', 'created_at')
    list_filter = ('status',)
    search_fields = ('name', 'email', 'phone')


@admin.register(Doctor)
class DoctorAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'email', 'specialization', 'status')
    list_filter = ('status',)
    search_fields = ('name', 'email', 'specialization')


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'duration', 'price', 'status')
    search_fields = ('name',)


class CommentInline(admin.TabularInline):
    model = Comment
    extra = 0


@admin.register(Blog)
class BlogAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'author', 'date', 'status')
    list_filter = ('status',)
    search_fields = ('title', 'author')
    inlines = [CommentInline]


@admin.register(Report)
class ReportAdmin(admin.ModelAdmin):
    list_display = ('id', 'title', 'patient_name', 'report_date', 'status')
    search_fields = ('title', 'patient_name')


@admin.register(Feedback)
class FeedbackAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'rating', 'status', 'created_at')
    list_filter = ('status', 'rating')
    search_fields = ('name', 'email')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('id', 'action', 'user', 'object_type', 'object_id', 'ip', 'created_at')
    list_filter = ('action',)
    search_fields = ('object_id', 'user__email')
