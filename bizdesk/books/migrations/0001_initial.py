# Generated manually
import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


TYPE_CHOICES = [('income', 'Income'), ('expense', 'Expense')]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('parties', '0001_initial'),
        ('inventory', '0001_initial'),
        ('purchasing', '0001_initial'),
        ('sales', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Category',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('icon', models.CharField(blank=True, max_length=20)),
                ('type', models.CharField(choices=TYPE_CHOICES, default='income', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='categories', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'categories',
                'ordering': ['name'],
                'verbose_name_plural': 'categories',
                'constraints': [models.UniqueConstraint(fields=('owner', 'name', 'type'), name='unique_category_per_owner_type')],
            },
        ),
        migrations.CreateModel(
            name='Transaction',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('description', models.CharField(blank=True, max_length=255)),
                ('date', models.DateField()),
                ('type', models.CharField(choices=TYPE_CHOICES, default='income', max_length=10)),
                ('category', models.CharField(max_length=100)),
                ('category_icon', models.CharField(blank=True, max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='transactions', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'transactions',
                'ordering': ['-date', '-created_at'],
                'indexes': [
                    models.Index(fields=['owner', 'date'], name='txn_owner_date_idx'),
                    models.Index(fields=['owner', 'type', 'category'], name='txn_owner_type_cat_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='MonthHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('day', models.PositiveSmallIntegerField()),
                ('month', models.PositiveSmallIntegerField()),
                ('year', models.PositiveSmallIntegerField()),
                ('income', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('expense', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='month_history', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'month_history',
                'ordering': ['year', 'month', 'day'],
                'verbose_name_plural': 'month history',
                'constraints': [models.UniqueConstraint(fields=('owner', 'day', 'month', 'year'), name='unique_month_history_day')],
            },
        ),
        migrations.CreateModel(
            name='YearHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('month', models.PositiveSmallIntegerField()),
                ('year', models.PositiveSmallIntegerField()),
                ('income', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('expense', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=14)),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='year_history', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'year_history',
                'ordering': ['year', 'month'],
                'verbose_name_plural': 'year history',
                'constraints': [models.UniqueConstraint(fields=('owner', 'month', 'year'), name='unique_year_history_month')],
            },
        ),
        migrations.CreateModel(
            name='DaybookEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('date', models.DateField()),
                ('entry_type', models.CharField(choices=TYPE_CHOICES, max_length=10)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('description', models.CharField(max_length=255)),
                ('reference', models.CharField(blank=True, max_length=100)),
                ('category', models.CharField(blank=True, max_length=100)),
                ('payment_method', models.CharField(choices=[('cash', 'Cash'), ('bank', 'Bank'), ('mobile', 'Mobile')], default='cash', max_length=10)),
                ('status', models.CharField(choices=[('completed', 'Completed'), ('pending', 'Pending'), ('cancelled', 'Cancelled')], default='completed', max_length=10)),
                ('attachments', models.JSONField(blank=True, default=list)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='daybook_entries', to='parties.customer')),
                ('installment', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='daybook_entries', to='sales.installment')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='daybook_entries', to=settings.AUTH_USER_MODEL)),
                ('purchase', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='daybook_entry', to='purchasing.purchase')),
                ('sale', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='daybook_entries', to='sales.sale')),
                ('stock_entry', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='daybook_entry', to='inventory.stockentry')),
            ],
            options={
                'db_table': 'daybook_entries',
                'ordering': ['-date', '-created_at'],
                'verbose_name_plural': 'daybook entries',
                'indexes': [
                    models.Index(fields=['owner', 'date'], name='daybook_owner_date_idx'),
                    models.Index(fields=['owner', 'entry_type', 'status'], name='daybook_owner_type_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LedgerEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('ledger_type', models.CharField(choices=[('BANK', 'Bank'), ('EXPENSE', 'Expense'), ('SALARY', 'Salary'), ('PURCHASE', 'Purchase'), ('SALE', 'Sale'), ('CUSTOMER', 'Customer'), ('CUSTOM', 'Custom')], max_length=20)),
                ('custom_type', models.CharField(blank=True, max_length=100)),
                ('title', models.CharField(max_length=200)),
                ('description', models.TextField(blank=True)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12)),
                ('transaction_type', models.CharField(choices=[('DEBIT', 'Debit'), ('CREDIT', 'Credit')], max_length=10)),
                ('date', models.DateField()),
                ('reference', models.CharField(blank=True, max_length=100)),
                ('category', models.CharField(blank=True, max_length=100)),
                ('payment_method', models.CharField(blank=True, choices=[('CASH', 'Cash'), ('BANK', 'Bank'), ('MOBILE', 'Mobile')], max_length=10, null=True)),
                ('tags', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('customer', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='ledger_entries', to='parties.customer')),
                ('owner', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ledger_entries', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'ledger_entries',
                'ordering': ['-date', '-created_at'],
                'verbose_name_plural': 'ledger entries',
                'indexes': [
                    models.Index(fields=['owner', 'ledger_type'], name='ledger_owner_type_idx'),
                    models.Index(fields=['owner', 'date'], name='ledger_owner_date_idx'),
                ],
            },
        ),
    ]
