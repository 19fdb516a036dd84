from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('apartments', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='partneragreement',
            name='partner_type',
            field=models.CharField(
                choices=[('investor', 'Investor'), ('company_owner', 'Company owner')],
                default='investor',
                max_length=20,
            ),
        ),
    ]
