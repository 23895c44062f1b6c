"""
Checks and housekeeping for uploaded photos and PDF reports.

Files are stored through the model ``FileField``s (see the ``upload_to``
helpers in :mod:`portal.models`); this module validates incoming uploads
and removes files that a record no longer references.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterable, Optional

from django.conf import settings
from django.core.files.uploadedfile import UploadedFile
from django.db.models.fields.files import FieldFile
from rest_framework.exceptions import ValidationError

logger = logging.getLogger(__name__)


def validate_upload(upload: Optional[UploadedFile], allowed_types: Iterable[str], *,
                    message: str) -> Optional[UploadedFile]:
    """Return ``upload`` unchanged if it is acceptable, ``None`` if absent.

    ``allowed_types`` holds content type prefixes such as ``image/``.
    """
    if upload is None:
        return None
    max_bytes = settings.UPLOAD_MAX_MB * 1024 * 1024
    if upload.size > max_bytes:
        raise ValidationError(f'File too large (max {settings.UPLOAD_MAX_MB} MB)')
    content_type = (getattr(upload, 'content_type', '') or '').lower()
    if not any(content_type.startswith(t) for t in allowed_types):
        raise ValidationError(message)
    return upload


def image_upload(request, field: str) -> Optional[UploadedFile]:
    return validate_upload(request.FILES.get(field), settings.IMAGE_UPLOAD_TYPES,
                           message='Only image files allowed')


def pdf_upload(request, field: str) -> Optional[UploadedFile]:
    return validate_upload(request.FILES.get(field), settings.REPORT_UPLOAD_TYPES,
                           message='Only PDF files allowed')


def discard(field_file: FieldFile) -> None:
    """Delete the stored file behind ``field_file`` without saving the model."""
    if not field_file:
        return
    name = field_file.name
    field_file.delete(save=False)
    logger.info('removed upload %s', name)


@contextmanager
def replacing(field_file: FieldFile, upload: Optional[UploadedFile]):
    """Store ``upload`` in ``field_file`` for the duration of a model save.

    The displaced file is deleted only once the block completes; if the
    block raises, the new file is removed and the old name restored, so
    the row never points at a missing file.  Without ``upload`` this is
    a no-op.
    """
    if upload is None:
        yield
        return
    storage, previous = field_file.storage, field_file.name
    field_file.save(upload.name, upload, save=False)
    try:
        yield
    except Exception:
        field_file.delete(save=False)
        setattr(field_file.instance, field_file.field.attname, previous)
        raise
    if previous:
        storage.delete(previous)
        logger.info('removed upload %s', previous)
