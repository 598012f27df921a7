import logging
import mimetypes
import os

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.files.base import ContentFile
from django.db import transaction
from django.template.defaultfilters import filesizeformat

from attachments.models import DOCUMENT_TYPES, Attachment
from common.enums import AttachmentType

logger = logging.getLogger(__name__)

DOCUMENT_EXTENSIONS = ('.pdf', '.doc', '.docx', '.jpg', '.jpeg', '.png', '.gif')
IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.gif', '.webp')


def guess_mime_type(uploaded_file):
    content_type = getattr(uploaded_file, 'content_type', None)
    if content_type:
        return content_type
    return mimetypes.guess_type(uploaded_file.name)[0] or 'application/octet-stream'


class AttachmentService:
    @staticmethod
    def validate_upload(uploaded_file, allowed_extensions, field='file'):
        extension = os.path.splitext(uploaded_file.name)[1].lower()
        if extension not in allowed_extensions:
            raise ValidationError({field: f'Unsupported file type "{extension or uploaded_file.name}"'})
        max_size = settings.ATTACHMENT_MAX_UPLOAD_SIZE
        if uploaded_file.size > max_size:
            raise ValidationError({field: f'File exceeds the maximum size of {filesizeformat(max_size)}'})

    @staticmethod
    def ensure_document_capacity(owner):
        limit = settings.CLIENT_DOCUMENT_LIMIT
        if owner.attachments.filter(type__in=DOCUMENT_TYPES).count() >= limit:
            raise ValidationError({'document': f'A client can have at most {limit} documents'})

    @staticmethod
    @transaction.atomic
    def add_document(owner, uploaded_file, *, name=None, kind=AttachmentType.DOCUMENT, uploaded_by=None) -> Attachment:
        if kind not in DOCUMENT_TYPES:
            raise ValidationError({'type': f'"{kind}" is not a document type'})
        AttachmentService.validate_upload(uploaded_file, DOCUMENT_EXTENSIONS, field='document')
        # Serialize uploads per owner for the limit check.
        owner.__class__.objects.select_for_update().get(pk=owner.pk)
        AttachmentService.ensure_document_capacity(owner)
        attachment = Attachment.objects.create(
            content_object=owner,
            name=name or uploaded_file.name,
            file=uploaded_file,
            mime_type=guess_mime_type(uploaded_file),
            size=uploaded_file.size,
            type=kind,
            uploaded_by=uploaded_by,
        )
        logger.info("Document uploaded", extra={'attachment_id': attachment.id, 'owner_id': owner.pk})
        return attachment

    @staticmethod
    def store_generated(owner, content: bytes, filename, *, name, mime_type='application/pdf',
                        uploaded_by=None) -> Attachment:
        attachment = Attachment(
            content_object=owner,
            name=name,
            mime_type=mime_type,
            size=len(content),
            type=AttachmentType.GENERATED_DOCUMENT,
            uploaded_by=uploaded_by,
        )
        attachment.file.save(filename, ContentFile(content), save=False)
        attachment.save()
        return attachment

    @staticmethod
    @transaction.atomic
    def replace_profile_photo(owner, uploaded_file, uploaded_by=None) -> Attachment:
        AttachmentService.validate_upload(uploaded_file, IMAGE_EXTENSIONS, field='photo')
        AttachmentService.remove_profile_photo(owner)
        return Attachment.objects.create(
            content_object=owner,
            name=uploaded_file.name,
            file=uploaded_file,
            mime_type=guess_mime_type(uploaded_file),
            size=uploaded_file.size,
            type=AttachmentType.PROFILE_PHOTO,
            uploaded_by=uploaded_by,
        )

    @staticmethod
    def remove_profile_photo(owner) -> int:
        removed = 0
        # Delete one by one so post_delete removes each stored file.
        for photo in owner.attachments.filter(type=AttachmentType.PROFILE_PHOTO):
            photo.delete()
            removed += 1
        return removed

    @staticmethod
    def add_payment_evidence(payment, uploaded_file, uploaded_by=None) -> Attachment:
        AttachmentService.validate_upload(uploaded_file, DOCUMENT_EXTENSIONS, field='evidence')
        return Attachment.objects.create(
            content_object=payment,
            name=uploaded_file.name,
            file=uploaded_file,
            mime_type=guess_mime_type(uploaded_file),
            size=uploaded_file.size,
            type=AttachmentType.PAYMENT_EVIDENCE,
            uploaded_by=uploaded_by,
        )
