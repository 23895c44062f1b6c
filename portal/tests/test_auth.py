"""
Session-bound token authentication.

Covers the login flow, the single live session per administrator, token
verification failures and signing key rotation.
"""
import base64
import json
from datetime import timedelta

import jwt
import pytest
from django.core.management import call_command
from django.urls import reverse

from portal.models import Administrator, AuditEvent
from portal.tokens import SessionAccessToken

pytestmark = pytest.mark.django_db


def bearer(client, token):
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    return client


def me(client):
    return client.get(reverse('me'))


def test_register_login_relogin_flow(admin_client, api_client, login):
    r = admin_client.post(reverse('register'), {'name': 'A', 'email': 'a@x.com', 'password': 'pw1'}, format='json')
    assert r.status_code == 201
    assert r.data['message'] == 'User registered successfully'

    r = login(api_client, 'a@x.com', 'pw1')
    assert r.status_code == 200
    t1 = r.data['token']
    assert r.data['user']['email'] == 'a@x.com'
    assert me(bearer(api_client, t1)).status_code == 200

    r = login(api_client, 'a@x.com', 'pw1')
    assert r.status_code == 200
    t2 = r.data['token']
    assert t2 != t1

    r = me(bearer(api_client, t1))
    assert r.status_code == 401
    assert r.data['message'] == 'Session expired'
    assert me(bearer(api_client, t2)).status_code == 200


def test_login_rotates_session_marker(admin_user, api_client, login):
    seen = set()
    for _ in range(3):
        assert login(api_client).status_code == 200
        admin_user.refresh_from_db()
        assert len(admin_user.session_token) == 32
        seen.add(admin_user.session_token)
    assert len(seen) == 3


def test_login_accepts_identity_credential_aliases(admin_user, api_client):
    r = api_client.post(reverse('login-alias'),
                        {'identity': admin_user.email, 'credential': 'P@ssw0rd1'}, format='json')
    assert r.status_code == 200
    assert r.data['user'] == {'id': admin_user.id, 'name': 'Admin', 'email': admin_user.email}


def test_login_unknown_email(admin_user, api_client, login):
    r = login(api_client, 'nobody@x.com', 'whatever')
    assert r.status_code == 400
    assert r.data['message'] == 'User not found'
    assert AuditEvent.objects.filter(action='login', detail__result='fail').exists()


def test_login_wrong_password(admin_user, api_client, login):
    r = login(api_client, password='wrong')
    assert r.status_code == 400
    assert r.data['message'] == 'Invalid credentials'
    admin_user.refresh_from_db()
    assert admin_user.session_token == ''


def test_login_disabled_account(admin_user, api_client, login):
    admin_user.is_active = False
    admin_user.save()
    assert login(api_client).status_code == 400


def test_login_requires_fields(api_client):
    r = api_client.post(reverse('login'), {'password': 'x'}, format='json')
    assert r.status_code == 400


def test_login_ignores_stale_authorization_header(admin_user, api_client, login):
    bearer(api_client, 'not-a-token')
    assert login(api_client).status_code == 200


def test_missing_header_is_401_without_queries(api_client, django_assert_num_queries):
    with django_assert_num_queries(0):
        r = me(api_client)
    assert r.status_code == 401
    assert r.data['message'] == 'No token provided'
    assert r['WWW-Authenticate'].startswith('Bearer')


def test_other_scheme_is_treated_as_missing(api_client):
    api_client.credentials(HTTP_AUTHORIZATION='Token abcdef')
    r = me(api_client)
    assert r.status_code == 401
    assert r.data['message'] == 'No token provided'


@pytest.mark.parametrize('raw', ['garbage', 'a.b.c', ''])
def test_malformed_token_is_403(api_client, raw):
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {raw}')
    r = me(api_client)
    assert r.status_code == 403
    assert r.data['message'] == 'Invalid token'


def test_tampered_signature_is_403(admin_user, api_client, login):
    token = login(api_client).data['token']
    head, payload, sig = token.split('.')
    sig = ('A' if sig[0] != 'A' else 'B') + sig[1:]
    r = me(bearer(api_client, f'{head}.{payload}.{sig}'))
    assert r.status_code == 403


def test_tampered_payload_is_403(admin_user, api_client, login):
    token = login(api_client).data['token']
    head, payload, sig = token.split('.')
    claims = json.loads(base64.urlsafe_b64decode(payload + '=' * (-len(payload) % 4)))
    sid = claims['sid']
    claims['sid'] = ('0' if sid[0] != '0' else '1') + sid[1:]
    forged = base64.urlsafe_b64encode(json.dumps(claims, separators=(',', ':')).encode()).rstrip(b'=').decode()
    r = me(bearer(api_client, f'{head}.{forged}.{sig}'))
    assert r.status_code == 403
    assert r.data['message'] == 'Invalid token'


def test_unknown_key_id_is_403(admin_user, api_client, login):
    token = login(api_client).data['token']
    claims = jwt.decode(token, options={'verify_signature': False})
    forged = jwt.encode(claims, 'some-other-secret', algorithm='HS256', headers={'kid': 'nope'})
    r = me(bearer(api_client, forged))
    assert r.status_code == 403
    assert r.data['message'] == 'Invalid token'


def test_wrong_secret_for_known_kid_is_403(settings, admin_user, api_client, login):
    token = login(api_client).data['token']
    claims = jwt.decode(token, options={'verify_signature': False})
    forged = jwt.encode(claims, 'guessed', algorithm='HS256', headers={'kid': settings.JWT_ACTIVE_KID})
    assert me(bearer(api_client, forged)).status_code == 403


def test_expired_token_is_403(admin_user, api_client, login):
    assert login(api_client).status_code == 200
    admin_user.refresh_from_db()
    token = SessionAccessToken.for_session(admin_user)
    token.set_exp(lifetime=-timedelta(seconds=5))
    r = me(bearer(api_client, str(token)))
    assert r.status_code == 403
    assert r.data['message'] == 'Invalid token'


def test_token_without_marker_is_401(admin_user, api_client, login):
    assert login(api_client).status_code == 200
    token = SessionAccessToken.for_user(admin_user)
    r = me(bearer(api_client, str(token)))
    assert r.status_code == 401
    assert r.data['message'] == 'Session expired'


def test_deleted_administrator_is_401(admin_user, api_client, login):
    token = login(api_client).data['token']
    admin_user.delete()
    r = me(bearer(api_client, token))
    assert r.status_code == 401
    assert r.data['message'] == 'Session expired'


def test_verification_does_not_touch_the_marker(admin_user, api_client, login):
    token = login(api_client).data['token']
    admin_user.refresh_from_db()
    marker = admin_user.session_token
    bearer(api_client, token)
    assert me(api_client).status_code == 200
    assert me(api_client).status_code == 200
    admin_user.refresh_from_db()
    assert admin_user.session_token == marker


def test_logout_retires_the_session(admin_user, api_client, login):
    token = login(api_client).data['token']
    bearer(api_client, token)
    r = api_client.post(reverse('logout'))
    assert r.status_code == 200
    admin_user.refresh_from_db()
    assert admin_user.session_token == ''
    r = me(api_client)
    assert r.status_code == 401
    assert r.data['message'] == 'Session expired'


def test_stale_token_does_not_block_public_reads(admin_user, api_client, login):
    stale = login(api_client).data['token']
    assert login(api_client).status_code == 200
    bearer(api_client, stale)
    assert api_client.get(reverse('doctors')).status_code == 200
    assert api_client.get(reverse('blogs')).status_code == 200
    assert api_client.get(reverse('feedback-approved')).status_code == 200
    # admin-only routes still report the superseded session
    r = api_client.get(reverse('appointments'))
    assert r.status_code == 401
    assert r.data['message'] == 'Session expired'


def test_stale_token_does_not_block_public_forms(admin_user, api_client, login):
    stale = login(api_client).data['token']
    assert login(api_client).status_code == 200
    bearer(api_client, stale)
    r = api_client.post(reverse('appointments'), {'name': 'Jane'}, format='json')
    assert r.status_code == 201
    r = api_client.post(reverse('feedback'), {'name': 'Jane'}, format='json')
    assert r.status_code == 201


def test_invalid_token_still_blocks_admin_writes_on_public_routes(api_client):
    api_client.credentials(HTTP_AUTHORIZATION='Bearer garbage')
    assert api_client.get(reverse('doctors')).status_code == 200
    r = api_client.post(reverse('doctors'), {'name': 'X', 'email': 'x@clinic.test'}, format='json')
    assert r.status_code == 403
    assert r.data['message'] == 'Invalid token'


def test_signing_key_rotation(settings, admin_user, api_client, login):
    settings.JWT_SIGNING_KEYS = {'k1': 'first-secret', 'k2': 'second-secret'}
    settings.JWT_ACTIVE_KID = 'k1'
    token = login(api_client).data['token']
    assert jwt.get_unverified_header(token)['kid'] == 'k1'

    # new tokens are signed with k2, old ones keep verifying with k1
    settings.JWT_ACTIVE_KID = 'k2'
    assert me(bearer(api_client, token)).status_code == 200

    # once k1 is withdrawn its tokens are rejected
    settings.JWT_SIGNING_KEYS = {'k2': 'second-secret'}
    assert me(bearer(api_client, token)).status_code == 403


def test_register_requires_administrator(api_client):
    r = api_client.post(reverse('register'), {'email': 'b@x.com', 'password': 'pw'}, format='json')
    assert r.status_code == 401


def test_register_duplicate_email(admin_client, admin_user):
    r = admin_client.post(reverse('register'), {'email': admin_user.email, 'password': 'pw'}, format='json')
    assert r.status_code == 400
    assert r.data['message'] == 'User already exists'


def test_login_is_throttled(admin_user, api_client, login):
    codes = [login(api_client, password='wrong').status_code for _ in range(11)]
    assert codes[:10] == [400] * 10
    assert codes[10] == 429


def test_ensure_admin_is_idempotent():
    call_command('ensure_admin', email='Boss@Clinic.test', password='one')
    call_command('ensure_admin', email='Boss@Clinic.test', password='two')
    users = Administrator.objects.filter(email__iexact='boss@clinic.test')
    assert users.count() == 1
    assert users[0].is_superuser
    assert users[0].check_password('two')
