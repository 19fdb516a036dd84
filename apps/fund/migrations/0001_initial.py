# Generated manually for fund app

import uuid
from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('apartments', '0001_initial'),
        ('bookings', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='FundTransaction',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('transaction_type', models.CharField(choices=[('deposit', 'Deposit'), ('withdrawal', 'Withdrawal')], max_length=10)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[MinValueValidator(Decimal('0.01'))])),
                ('currency', models.CharField(max_length=3)),
                ('amount_base', models.DecimalField(decimal_places=2, max_digits=12)),
                ('amount_secondary', models.DecimalField(decimal_places=2, max_digits=14)),
                ('exchange_rate', models.DecimalField(decimal_places=6, max_digits=14)),
                ('transaction_date', models.DateField(default=django.utils.timezone.localdate)),
                ('source', models.CharField(blank=True, max_length=100)),
                ('description', models.TextField(blank=True)),
                ('is_system_generated', models.BooleanField(default=False)),
                ('resulted_in_debt', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('apartment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='fund_transactions', to='apartments.apartment')),
                ('booking', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='fund_transactions', to='bookings.booking')),
            ],
            options={
                'db_table': 'fund_transactions',
                'ordering': ['-transaction_date', '-created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='fundtransaction',
            index=models.Index(fields=['transaction_type', 'transaction_date'], name='fund_tx_type_date_idx'),
        ),
        migrations.AddIndex(
            model_name='fundtransaction',
            index=models.Index(fields=['apartment', 'transaction_date'], name='fund_tx_apt_date_idx'),
        ),
    ]
