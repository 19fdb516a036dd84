# Generated manually for bookings app

import uuid
from decimal import Decimal
from django.core.validators import MinValueValidator
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('apartments', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Booking',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('reference', models.CharField(editable=False, max_length=32, unique=True)),
                ('guest_name', models.CharField(max_length=200)),
                ('guest_phone', models.CharField(blank=True, max_length=50)),
                ('guest_email', models.EmailField(blank=True, max_length=254)),
                ('guest_nationality', models.CharField(blank=True, max_length=100)),
                ('check_in', models.DateField()),
                ('check_out', models.DateField()),
                ('number_of_nights', models.PositiveIntegerField(default=1)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('confirmed', 'Confirmed'), ('cancelled', 'Cancelled'), ('ended-early', 'Ended early')], default='confirmed', max_length=20)),
                ('total_booking_price', models.DecimalField(decimal_places=2, max_digits=12, validators=[MinValueValidator(Decimal('0.00'))])),
                ('currency', models.CharField(default='USD', max_length=3)),
                ('exchange_rate', models.DecimalField(decimal_places=6, help_text='Secondary-currency units per base unit, locked at booking time', max_digits=14, validators=[MinValueValidator(Decimal('0.000001'))])),
                ('locked_rates', models.JSONField(blank=True, default=dict)),
                ('source', models.CharField(default='External', max_length=50)),
                ('platform_commission', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[MinValueValidator(Decimal('0.00'))])),
                ('dev_deduction_type', models.CharField(choices=[('none', 'None'), ('fixed', 'Fixed amount'), ('percent', 'Percent of total')], default='none', max_length=10)),
                ('dev_deduction_value', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[MinValueValidator(Decimal('0.00'))])),
                ('development_deduction', models.DecimalField(decimal_places=2, default=Decimal('0.00'), help_text='Amount currently posted to the development fund (base currency)', max_digits=12)),
                ('transfer_commission_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12)),
                ('actual_check_out', models.DateField(blank=True, null=True)),
                ('refund_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('ended_at', models.DateTimeField(blank=True, null=True)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('apartment', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bookings', to='apartments.apartment')),
                ('room', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='bookings', to='apartments.room')),
                ('origin_apartment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='apartments.apartment')),
                ('origin_room', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='apartments.room')),
                ('transfer_from_booking', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='transfers', to='bookings.booking')),
            ],
            options={
                'db_table': 'bookings',
                'ordering': ['-check_in', '-created_at'],
            },
        ),
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[MinValueValidator(Decimal('0.00'))])),
                ('currency', models.CharField(default='USD', max_length=3)),
                ('method', models.CharField(choices=[('cash', 'Cash'), ('bank_transfer', 'Bank transfer'), ('card', 'Card'), ('platform', 'Paid via platform'), ('other', 'Other')], default='cash', max_length=20)),
                ('position', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('booking', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='payments', to='bookings.booking')),
            ],
            options={
                'db_table': 'booking_payments',
                'ordering': ['position', 'created_at'],
            },
        ),
        migrations.CreateModel(
            name='BookingExtension',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('extra_days', models.PositiveIntegerField()),
                ('extra_amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('previous_check_out', models.DateField()),
                ('new_check_out', models.DateField()),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('booking', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='extensions', to='bookings.booking')),
            ],
            options={
                'db_table': 'booking_extensions',
                'ordering': ['created_at'],
            },
        ),
        migrations.AddIndex(
            model_name='booking',
            index=models.Index(fields=['room', 'check_in', 'check_out'], name='bookings_room_range_idx'),
        ),
        migrations.AddIndex(
            model_name='booking',
            index=models.Index(fields=['apartment', 'check_in'], name='bookings_apt_checkin_idx'),
        ),
        migrations.AddIndex(
            model_name='booking',
            index=models.Index(fields=['check_in'], name='bookings_checkin_idx'),
        ),
        migrations.AddIndex(
            model_name='booking',
            index=models.Index(fields=['status'], name='bookings_status_idx'),
        ),
    ]
