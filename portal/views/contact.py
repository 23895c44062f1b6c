"""
Contact form of the public website, relayed to the clinic by e-mail.
"""
from __future__ import annotations

import logging
import smtplib

from django.conf import settings
from django.core.mail import EmailMessage
from rest_framework.decorators import api_view, authentication_classes, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from ..exceptions import MailDeliveryFailed
from ..serializers.contact import ContactSerializer
from ..throttling import PublicWriteThrottle

logger = logging.getLogger(__name__)


@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
@throttle_classes([PublicWriteThrottle])
def contact(request):
    s = ContactSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    data = s.validated_data

    recipient = settings.CONTACT_RECIPIENT
    if not recipient:
        logger.error('contact message dropped: CONTACT_RECIPIENT is not configured')
        raise MailDeliveryFailed()

    message = EmailMessage(
        subject=data['subject'],
        body=f"Name: {data['name']}\nEmail: {data['email']}\n\n{data['message']}",
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=[recipient],
        reply_to=[data['email']],
    )
    try:
        message.send()
    except (smtplib.SMTPException, OSError) as e:
        logger.exception('could not send contact message from %s', data['email'])
        raise MailDeliveryFailed() from e
    return Response({'message': 'Message sent successfully!'})
