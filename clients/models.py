from datetime import timedelta

from django.conf import settings
from django.contrib.contenttypes.fields import GenericRelation
from django.db import models
from django.db.models import Q
from django.utils import timezone

from common.enums import ActiveStatus, AttachmentType, ClientMembershipState, Gender, MembershipStatus
from common.timezone_utils import age_on
from core.models import BaseModel


class ClientQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status=ActiveStatus.ACTIVE)

    def search(self, term):
        term = (term or '').strip()
        if not term:
            return self
        return self.filter(
            Q(name__icontains=term)
            | Q(email__icontains=term)
            | Q(phone__icontains=term)
            | Q(identification_number__icontains=term)
        )


class Pathology(BaseModel):
    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(blank=True)

    class Meta:
        ordering = ['name']
        verbose_name_plural = 'pathologies'

    def __str__(self):
        return self.name


class Client(BaseModel):
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True, null=True, blank=True)
    phone = models.CharField(max_length=30, blank=True)
    address = models.TextField(blank=True)
    identification_number = models.CharField(max_length=50, blank=True, db_index=True)
    birth_date = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=10, choices=Gender.choices, blank=True)
    status = models.CharField(max_length=20, choices=ActiveStatus.choices, default=ActiveStatus.ACTIVE)
    notes = models.TextField(blank=True)
    pathologies = models.ManyToManyField(
        Pathology, through='ClientPathology', related_name='clients', blank=True,
    )
    attachments = GenericRelation('attachments.Attachment', related_query_name='client')

    objects = ClientQuerySet.as_manager()

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name

    def age(self, as_of=None):
        return age_on(self.birth_date, as_of)

    def active_membership(self):
        return (
            self.memberships.filter(status=MembershipStatus.ACTIVE)
            .select_related('plan')
            .order_by('-start_date', '-id')
            .first()
        )

    def has_active_membership(self, as_of=None):
        membership = self.active_membership()
        return membership is not None and not membership.is_expired(as_of=as_of)

    def membership_status(self, as_of=None):
        as_of = as_of or timezone.localdate()
        membership = self.active_membership()
        if membership is None:
            return ClientMembershipState.NO_MEMBERSHIP
        effective = membership.effective_end_date
        if effective < as_of:
            return ClientMembershipState.EXPIRED
        if effective <= as_of + timedelta(days=settings.MEMBERSHIP_EXPIRING_SOON_DAYS):
            return ClientMembershipState.EXPIRING_SOON
        return ClientMembershipState.ACTIVE

    def documents(self):
        from attachments.models import DOCUMENT_TYPES

        return self.attachments.filter(type__in=DOCUMENT_TYPES)

    def profile_photo(self):
        return self.attachments.filter(type=AttachmentType.PROFILE_PHOTO).first()


class ClientPathology(BaseModel):
    client = models.ForeignKey(Client, on_delete=models.CASCADE, related_name='client_pathologies')
    pathology = models.ForeignKey(Pathology, on_delete=models.CASCADE, related_name='client_pathologies')
    notes = models.TextField(blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['client', 'pathology'], name='unique_client_pathology'),
        ]

    def __str__(self):
        return f"{self.client} - {self.pathology}"
