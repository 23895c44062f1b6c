"""
Integration tests for the clinic content API: appointments, doctors,
services, reports, the dashboard, contact form and health check.
"""
import os
import subprocess
import sys
from pathlib import Path

import pytest
from django.conf import settings
from django.core import mail
from django.core.files.uploadedfile import SimpleUploadedFile
from django.db import DatabaseError
from django.urls import reverse

from portal.models import Appointment, Doctor, Report

pytestmark = pytest.mark.django_db

PNG = b'\x89PNG\r\n\x1a\n' + b'\x00' * 32
PDF = b'%PDF-1.4\n%%EOF\n'


def png(name='photo.png'):
    return SimpleUploadedFile(name, PNG, content_type='image/png')


def pdf(name='report.pdf'):
    return SimpleUploadedFile(name, PDF, content_type='application/pdf')


def stored(folder, name):
    return Path(settings.MEDIA_ROOT) / folder / name


# ---------------------------------------------------------------------
# Appointments
# ---------------------------------------------------------------------
def test_public_booking_starts_pending(api_client):
    r = api_client.post(reverse('appointments'), {
        'name': 'Jane Roe', 'email': 'jane@x.com', 'phone': '555', 'age': 30,
        'service': 'Check-up', 'status': 'Confirmed',
    }, format='json')
    assert r.status_code == 201
    assert r.data['status'] == 'Pending'
    assert r.data['doctor'] == ''
    assert r.data['appointmentDate'] == ''
    assert r.data['_id'] == r.data['id']


def test_listing_appointments_needs_admin(api_client):
    assert api_client.get(reverse('appointments')).status_code == 401


def test_appointment_search_and_order(admin_client):
    Appointment.objects.create(name='Alice Smith')
    Appointment.objects.create(name='Bob Jones')
    Appointment.objects.create(name='alice cooper')

    r = admin_client.get(reverse('appointments'))
    assert [a['name'] for a in r.data] == ['alice cooper', 'Bob Jones', 'Alice Smith']

    r = admin_client.get(reverse('appointments'), {'search': 'ALICE'})
    assert [a['name'] for a in r.data] == ['alice cooper', 'Alice Smith']


def test_appointment_update_and_delete(admin_client):
    a = Appointment.objects.create(name='Jane', service='X-ray')
    url = reverse('appointment-detail', args=[a.id])

    r = admin_client.put(url, {'status': 'Confirmed', 'doctor': 'Dr. Who', 'appointmentTime': '10:00'}, format='json')
    assert r.status_code == 200
    assert r.data['status'] == 'Confirmed'
    assert r.data['service'] == 'X-ray'
    assert r.data['appointmentTime'] == '10:00'

    r = admin_client.delete(url)
    assert r.status_code == 200
    assert not Appointment.objects.filter(pk=a.id).exists()


def test_missing_appointment_is_404(admin_client):
    r = admin_client.get(reverse('appointment-detail', args=[999]))
    assert r.status_code == 404
    assert r.data['message'] == 'Appointment not found'
    assert admin_client.put(reverse('appointment-detail', args=[999]), {}, format='json').status_code == 404
    assert admin_client.delete(reverse('appointment-detail', args=[999])).status_code == 404


def test_booking_keeps_plain_text_as_typed(api_client):
    r = api_client.post(reverse('appointments'), {'name': 'Tom & Jerry', 'message': 'a < b'}, format='json')
    assert r.status_code == 201
    assert r.data['name'] == 'Tom & Jerry'
    assert r.data['message'] == 'a < b'
    stored_row = Appointment.objects.get(pk=r.data['id'])
    assert stored_row.name == 'Tom & Jerry'


def test_booking_with_blank_age(api_client):
    r = api_client.post(reverse('appointments'), {'name': 'Jane', 'age': ''}, format='json')
    assert r.status_code == 201
    assert r.data['age'] is None


def test_booking_strips_markup(api_client):
    r = api_client.post(reverse('appointments'), {'name': '<b>Jane</b><script>x</script>'}, format='json')
    assert r.status_code == 201
    assert '<' not in r.data['name']


# ---------------------------------------------------------------------
# Doctors and services
# ---------------------------------------------------------------------
def test_doctor_crud_with_photo(admin_client, api_client):
    r = admin_client.post(reverse('doctors'), {
        'name': 'Dr. House', 'email': 'house@clinic.test', 'specialization': 'Diagnostics', 'photo': png(),
    }, format='multipart')
    assert r.status_code == 201
    assert r.data['status'] == 'Available'
    first = r.data['photo']
    assert first.endswith('-photo.png')
    assert stored('doctors', first).exists()

    doctor_id = r.data['id']
    r = api_client.get(reverse('doctor-detail', args=[doctor_id]))
    assert r.status_code == 200
    assert r.data['name'] == 'Dr. House'

    r = admin_client.put(reverse('doctor-detail', args=[doctor_id]),
                         {'status': 'On Leave', 'photo': png('new.png')}, format='multipart')
    assert r.status_code == 200
    assert r.data['status'] == 'On Leave'
    assert r.data['photo'].endswith('-new.png')
    assert not stored('doctors', first).exists()
    assert stored('doctors', r.data['photo']).exists()

    second = r.data['photo']
    r = admin_client.delete(reverse('doctor-detail', args=[doctor_id]))
    assert r.status_code == 200
    assert not stored('doctors', second).exists()
    assert not Doctor.objects.exists()


def test_failed_doctor_update_keeps_old_photo(admin_client, monkeypatch):
    r = admin_client.post(reverse('doctors'), {'name': 'Dr. X', 'email': 'x@clinic.test', 'photo': png()},
                          format='multipart')
    doctor_id, old = r.data['id'], r.data['photo']

    def broken_save(self, *args, **kwargs):
        raise DatabaseError('database is locked')

    monkeypatch.setattr(Doctor, 'save', broken_save)
    r = admin_client.put(reverse('doctor-detail', args=[doctor_id]), {'photo': png('new.png')},
                         format='multipart')
    assert r.status_code == 500
    monkeypatch.undo()

    assert stored('doctors', old).exists()
    assert [p.name for p in stored('doctors', '').iterdir()] == [old]
    assert Doctor.objects.get(pk=doctor_id).photo.name == f'doctors/{old}'


def test_doctor_rejects_non_image(admin_client):
    bad = SimpleUploadedFile('notes.txt', b'hello', content_type='text/plain')
    r = admin_client.post(reverse('doctors'), {'name': 'Dr. X', 'email': 'x@clinic.test', 'photo': bad},
                          format='multipart')
    assert r.status_code == 400
    assert r.data['message'] == 'Only image files allowed'
    assert not Doctor.objects.exists()


def test_doctor_upload_size_limit(settings, admin_client):
    settings.UPLOAD_MAX_MB = 0
    r = admin_client.post(reverse('doctors'), {'name': 'Dr. X', 'email': 'x@clinic.test', 'photo': png()},
                          format='multipart')
    assert r.status_code == 400


def test_doctor_email_is_unique(admin_client):
    Doctor.objects.create(name='A', email='a@clinic.test')
    r = admin_client.post(reverse('doctors'), {'name': 'B', 'email': 'a@clinic.test'}, format='json')
    assert r.status_code == 400


def test_doctor_list_is_public_and_oldest_first(api_client):
    Doctor.objects.create(name='First', email='1@clinic.test')
    Doctor.objects.create(name='Second', email='2@clinic.test')
    r = api_client.get(reverse('doctors'))
    assert r.status_code == 200
    assert [d['name'] for d in r.data] == ['First', 'Second']


def test_doctor_writes_need_admin(api_client):
    r = api_client.post(reverse('doctors'), {'name': 'X', 'email': 'x@clinic.test'}, format='json')
    assert r.status_code == 401
    assert api_client.get(reverse('doctor-detail', args=[1])).status_code == 404


def test_service_crud(admin_client, api_client):
    r = admin_client.post(reverse('services'), {'name': 'Dental', 'price': '50', 'photo': png('tooth.png')},
                          format='multipart')
    assert r.status_code == 201
    service_id = r.data['id']
    assert stored('services', r.data['photo']).exists()

    r = api_client.get(reverse('services'))
    assert [s['name'] for s in r.data] == ['Dental']

    r = admin_client.put(reverse('service-detail', args=[service_id]), {'price': '60'}, format='json')
    assert r.data['price'] == '60'
    assert r.data['photo'].endswith('-tooth.png')

    assert admin_client.delete(reverse('service-detail', args=[service_id])).status_code == 200
    r = api_client.get(reverse('service-detail', args=[service_id]))
    assert r.status_code == 404
    assert r.data['message'] == 'Service not found'


# ---------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------
def test_report_upload_list_delete(admin_client):
    r = admin_client.post(reverse('reports'), {'title': 'Blood test', 'patientName': 'Jane', 'pdf': pdf()},
                          format='multipart')
    assert r.status_code == 201
    assert r.data['status'] == 'Completed'
    assert r.data['reportDate']
    name = r.data['pdfFile']
    assert stored('reports', name).exists()

    r = admin_client.get(reverse('reports'))
    assert [x['title'] for x in r.data] == ['Blood test']

    report_id = r.data[0]['id']
    assert admin_client.delete(reverse('report-detail', args=[report_id])).status_code == 200
    assert not stored('reports', name).exists()
    assert not Report.objects.exists()


def test_report_requires_pdf(admin_client):
    r = admin_client.post(reverse('reports'), {'title': 'Nothing'}, format='multipart')
    assert r.status_code == 400
    r = admin_client.post(reverse('reports'), {'title': 'Image', 'pdf': png()}, format='multipart')
    assert r.status_code == 400
    assert r.data['message'] == 'Only PDF files allowed'


def test_deleting_unknown_report_succeeds(admin_client):
    r = admin_client.delete(reverse('report-detail', args=[12345]))
    assert r.status_code == 200


def test_reports_are_private(api_client):
    assert api_client.get(reverse('reports')).status_code == 401


# ---------------------------------------------------------------------
# Dashboard, contact, health
# ---------------------------------------------------------------------
def test_dashboard_counts(admin_client):
    Appointment.objects.create(name='A', email='a@x.com')
    Appointment.objects.create(name='A again', email='a@x.com')
    Appointment.objects.create(name='B', email='b@x.com')
    Appointment.objects.create(name='Walk-in')
    Doctor.objects.create(name='D1', email='d1@clinic.test')
    Doctor.objects.create(name='D2', email='d2@clinic.test', status='On Leave')

    r = admin_client.get(reverse('dashboard-stats'))
    assert r.status_code == 200
    assert r.data == {'appointments': 4, 'patients': 2, 'doctors': 1, 'doctorsOnLeave': 1}


def test_dashboard_needs_admin(api_client):
    assert api_client.get(reverse('dashboard-stats')).status_code == 401


def test_contact_sends_mail(api_client):
    r = api_client.post(reverse('contact'), {
        'name': 'Jane', 'email': 'jane@x.com', 'subject': 'Hours', 'message': 'Open on Sunday?',
    }, format='json')
    assert r.status_code == 200
    assert r.data['message'] == 'Message sent successfully!'
    assert len(mail.outbox) == 1
    sent = mail.outbox[0]
    assert sent.to == ['frontdesk@clinic.test']
    assert sent.reply_to == ['jane@x.com']
    assert 'Open on Sunday?' in sent.body


def test_contact_without_recipient_fails(settings, api_client):
    settings.CONTACT_RECIPIENT = ''
    r = api_client.post(reverse('contact'), {
        'name': 'Jane', 'email': 'jane@x.com', 'subject': 'Hi', 'message': 'Hello',
    }, format='json')
    assert r.status_code == 500
    assert r.data['message'] == 'Error sending message'
    assert mail.outbox == []


def test_contact_validates_input(api_client):
    r = api_client.post(reverse('contact'), {'name': 'Jane', 'email': 'nope'}, format='json')
    assert r.status_code == 400
    assert r.data['ok'] is False


def test_healthz(client):
    r = client.get(reverse('healthz'))
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True}


def test_api_modules_import_in_a_fresh_process():
    # rest_framework.views resolves the authentication classes while it loads
    code = (
        'import django; django.setup(); '
        'import rest_framework.views; '
        'from rest_framework.settings import api_settings; '
        'api_settings.DEFAULT_AUTHENTICATION_CLASSES; api_settings.EXCEPTION_HANDLER; '
        'import portal.routers'
    )
    env = {**os.environ, 'DJANGO_SETTINGS_MODULE': 'clinic.settings'}
    result = subprocess.run([sys.executable, '-c', code], cwd=settings.BASE_DIR, env=env,
                            capture_output=True, text=True, timeout=60)
    assert result.returncode == 0, result.stderr
