from django.db import migrations

DEFAULT_KEYS = [
    ('CLIENT_NAME', 'name'),
    ('CLIENT_EMAIL', 'email'),
    ('CLIENT_PHONE', 'phone'),
    ('CLIENT_ADDRESS', 'address'),
    ('CLIENT_BIRTH_DATE', 'birth_date'),
    ('CLIENT_GENDER', 'gender'),
    ('CLIENT_AGE', 'age'),
    ('CLIENT_NOTES', 'notes'),
    ('CLIENT_ID_NUMBER', 'client_identification'),
    ('MEMBERSHIP_STATUS', 'membership_status'),
    ('MEMBERSHIP_END_DATE', 'active_membership_end_date'),
    ('MEMBERSHIP_PLAN', 'active_membership_plan_name'),
    ('MEMBERSHIP_PLAN_PRICE', 'active_membership_plan_price'),
    ('MEMBERSHIP_START_DATE', 'active_membership_start_date'),
    ('PATHOLOGIES', 'pathologies_list'),
    ('PATHOLOGIES_COUNT', 'pathologies_count'),
    ('GYM_NAME', 'gym_name'),
    ('GYM_ADDRESS', 'gym_address'),
    ('GYM_PHONE', 'gym_phone'),
    ('GYM_EMAIL', 'gym_email'),
    ('CURRENT_DATE', 'current_date'),
    ('CURRENT_TIME', 'current_time'),
    ('CURRENT_DATETIME', 'current_datetime'),
]


def seed_keys(apps, schema_editor):
    TemplateKey = apps.get_model('documents', 'TemplateKey')
    for name, query_method in DEFAULT_KEYS:
        TemplateKey.objects.get_or_create(name=name, defaults={'query_method': query_method})


def remove_keys(apps, schema_editor):
    TemplateKey = apps.get_model('documents', 'TemplateKey')
    TemplateKey.objects.filter(name__in=[name for name, _ in DEFAULT_KEYS]).delete()


class Migration(migrations.Migration):

    dependencies = [
        ('documents', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_keys, remove_keys),
    ]
