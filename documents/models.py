from django.conf import settings
from django.db import models

from common.enums import ActiveStatus
from core.models import BaseModel

KEY_DESCRIPTIONS = {
    'name': 'Client full name',
    'email': 'Client email',
    'phone': 'Client phone',
    'address': 'Client address',
    'birth_date': 'Client birth date',
    'gender': 'Client gender',
    'age': 'Client age',
    'notes': 'Client notes',
    'client_identification': 'Client identification number',
    'membership_status': 'Membership status',
    'active_membership_end_date': 'Active membership expiration date',
    'active_membership_plan_name': 'Active membership plan',
    'active_membership_plan_price': 'Active membership plan price',
    'active_membership_start_date': 'Active membership start date',
    'pathologies_list': 'Client pathologies',
    'pathologies_count': 'Number of client pathologies',
    'gym_name': 'Gym name',
    'gym_address': 'Gym address',
    'gym_phone': 'Gym phone',
    'gym_email': 'Gym email',
    'current_date': 'Current date',
    'current_time': 'Current time',
    'current_datetime': 'Current date and time',
}


class DocumentTemplateQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status=ActiveStatus.ACTIVE)


class DocumentTemplate(BaseModel):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    content = models.TextField(help_text="Text or HTML with [[KEY]] placeholders")
    variables = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=20, choices=ActiveStatus.choices, default=ActiveStatus.ACTIVE)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, null=True, blank=True, on_delete=models.SET_NULL,
        related_name='document_templates',
    )

    objects = DocumentTemplateQuerySet.as_manager()

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class TemplateKey(models.Model):
    name = models.CharField(max_length=100, unique=True)
    query_method = models.CharField(max_length=100)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.placeholder

    @property
    def placeholder(self):
        return f"[[{self.name}]]"

    @property
    def description(self):
        return KEY_DESCRIPTIONS.get(self.query_method, 'Custom variable')
