import uuid

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ProfileFieldDefinition',
            fields=[
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('shortname', models.SlugField(max_length=100, unique=True)),
                ('name', models.CharField(max_length=255)),
                ('datatype', models.CharField(default='autocomplete', max_length=64)),
                ('description', models.TextField(blank=True)),
                ('required', models.BooleanField(default=False)),
                ('locked', models.BooleanField(default=False)),
                ('visible', models.BooleanField(default=True)),
                ('sortorder', models.PositiveIntegerField(default=0)),
                ('defaultdata', models.TextField(blank=True, default='')),
                ('param1', models.TextField(blank=True, null=True)),
                ('param2', models.CharField(blank=True, max_length=255, null=True)),
            ],
            options={
                'db_table': 'platform_profile_field_definitions',
                'ordering': ['sortorder', 'shortname'],
            },
        ),
        migrations.CreateModel(
            name='ProfileFieldData',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('data', models.TextField()),
                ('field', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='user_data', to='profilefields.profilefielddefinition')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='profile_field_data', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'platform_profile_field_data',
                'unique_together': {('user', 'field')},
            },
        ),
    ]
