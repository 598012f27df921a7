import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('memberships', '0001_initial'),
        ('plans', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='membershiprenewal',
            name='plan',
            field=models.ForeignKey(
                blank=True,
                help_text='Plan the renewal was sold under; the membership keeps its original plan',
                null=True,
                on_delete=django.db.models.deletion.PROTECT,
                related_name='renewals',
                to='plans.plan',
            ),
        ),
    ]
