"""
URL mappings for the clinic backend API.

Paths mirror the ones the clinic website and admin panel call, so
trailing slashes are deliberately omitted.  ``/login`` is kept as an
alias of ``/Admin/login`` for older front-end builds.
"""
from django.urls import include, path

from .auth_views import login_view, logout_view, me_view, register_view
from .views import appointments, blogs, contact, dashboard, doctors, feedback, health, reports, services

urlpatterns = [
    path('metrics', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),

    # Administrators
    path('Admin/login', login_view, name='login'),
    path('login', login_view, name='login-alias'),
    path('Admin/register', register_view, name='register'),
    path('Admin/logout', logout_view, name='logout'),
    path('Admin/me', me_view, name='me'),

    # Appointments
    path('appointments', appointments.appointments, name='appointments'),
    path('appointments/<int:pk>', appointments.appointment_detail, name='appointment-detail'),

    # Doctors and services
    path('doctors', doctors.doctors, name='doctors'),
    path('doctors/<int:pk>', doctors.doctor_detail, name='doctor-detail'),
    path('services', services.services, name='services'),
    path('services/<int:pk>', services.service_detail, name='service-detail'),

    # Blogs and comments
    path('blogs', blogs.blogs, name='blogs'),
    path('blogs/<int:pk>', blogs.blog_detail, name='blog-detail'),
    path('blogs/<int:pk>/comments', blogs.blog_comments, name='blog-comments'),

    # Reports
    path('reports', reports.reports, name='reports'),
    path('reports/<int:pk>', reports.report_detail, name='report-detail'),

    # Feedback
    path('feedback', feedback.feedback, name='feedback'),
    path('feedback/approved', feedback.approved_feedback, name='feedback-approved'),
    path('feedback/<int:pk>', feedback.feedback_detail, name='feedback-detail'),

    path('api/dashboard/stats', dashboard.dashboard_stats, name='dashboard-stats'),
    path('contact', contact.contact, name='contact'),
]
