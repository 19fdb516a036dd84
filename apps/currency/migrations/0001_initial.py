# Generated manually for currency app

import uuid
from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='CurrencyRate',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('currency', models.CharField(max_length=3, unique=True)),
                ('units_per_base', models.DecimalField(decimal_places=6, max_digits=14, validators=[MinValueValidator(Decimal('0.000001'))])),
                ('source', models.CharField(blank=True, max_length=50)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'db_table': 'currency_rates',
                'ordering': ['currency'],
            },
        ),
    ]
