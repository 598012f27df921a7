import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

CURRENCY_CHOICES = [('local', 'Local'), ('usd', 'USD')]
METHOD_CHOICES = [
    ('cash_usd', 'Cash (USD)'),
    ('cash_local', 'Cash (Local)'),
    ('card_usd', 'Card (USD)'),
    ('card_local', 'Card (Local)'),
    ('transfer_usd', 'Transfer (USD)'),
    ('transfer_local', 'Transfer (Local)'),
    ('crypto', 'Crypto'),
    ('other', 'Other'),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('contenttypes', '0002_remove_content_type_name'),
        ('memberships', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('uuid', models.UUIDField(default=uuid.uuid4, editable=False, unique=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('is_deleted', models.BooleanField(default=False)),
                ('object_id', models.PositiveBigIntegerField()),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))])),
                ('currency', models.CharField(choices=CURRENCY_CHOICES, default='local', max_length=10)),
                ('exchange_rate', models.DecimalField(decimal_places=6, default=Decimal('1'), help_text='Local currency units per 1 USD', max_digits=18)),
                ('selected_price', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('selected_currency', models.CharField(blank=True, choices=CURRENCY_CHOICES, max_length=10)),
                ('payment_date', models.DateField(default=django.utils.timezone.localdate)),
                ('payment_method', models.CharField(blank=True, max_length=20)),
                ('reference', models.CharField(blank=True, max_length=255)),
                ('notes', models.TextField(blank=True)),
                ('content_type', models.ForeignKey(limit_choices_to=models.Q(('app_label', 'memberships'), ('model__in', ['membership', 'membershiprenewal'])), on_delete=django.db.models.deletion.PROTECT, to='contenttypes.contenttype')),
                ('registered_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='registered_payments', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-payment_date', '-id'],
                'indexes': [
                    models.Index(fields=['content_type', 'object_id'], name='payments_pa_content_7f1c2e_idx'),
                    models.Index(fields=['payment_date'], name='payments_pa_payment_3b9d41_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PaymentMethod',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('method', models.CharField(choices=METHOD_CHOICES, max_length=20)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('currency', models.CharField(choices=CURRENCY_CHOICES, max_length=10)),
                ('exchange_rate', models.DecimalField(blank=True, decimal_places=6, help_text='Local currency units per 1 USD, set when the method currency differs from the payment', max_digits=18, null=True)),
                ('reference', models.CharField(blank=True, max_length=255)),
                ('notes', models.TextField(blank=True)),
                ('position', models.PositiveSmallIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('payment', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='methods', to='payments.payment')),
            ],
            options={
                'ordering': ['position', 'id'],
            },
        ),
    ]
