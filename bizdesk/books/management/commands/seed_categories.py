"""
Management command to add the default income and expense categories for a user
"""
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from bizdesk.books.models import Category, ICON_BY_TYPE

DEFAULT_CATEGORIES = {
    'income': [
        'Salary',
        'Business Income',
        'Investment',
        'Rental Income',
        'Other Income',
    ],
    'expense': [
        'Food & Dining',
        'Transportation',
        'Housing',
        'Utilities',
        'Entertainment',
        'Healthcare',
        'Shopping',
        'Education',
        'Travel',
        'Other Expense',
    ],
}


class Command(BaseCommand):
    help = "Adds the default income/expense categories for a user"

    def add_arguments(self, parser):
        parser.add_argument('username', help='User to seed categories for')
        parser.add_argument(
            '--clear',
            action='store_true',
            help="Delete the user's existing categories before adding the defaults",
        )

    def handle(self, *args, **options):
        User = get_user_model()
        try:
            user = User.objects.get(username=options['username'])
        except User.DoesNotExist:
            raise CommandError(f"User '{options['username']}' does not exist")

        if options['clear']:
            self.stdout.write(self.style.WARNING(f"Clearing categories of {user.username}..."))
            Category.objects.filter(owner=user).delete()

        created_count = 0
        skipped_count = 0
        for category_type, names in DEFAULT_CATEGORIES.items():
            for name in names:
                category, created = Category.objects.get_or_create(
                    owner=user,
                    name=name,
                    type=category_type,
                    defaults={'icon': ICON_BY_TYPE[category_type]},
                )
                if created:
                    created_count += 1
                    self.stdout.write(self.style.SUCCESS(f"  ✓ Created: {name} ({category_type})"))
                else:
                    skipped_count += 1
                    self.stdout.write(self.style.WARNING(f"  ⊘ Skipped (already exists): {name} ({category_type})"))

        self.stdout.write(f"Categories Created: {created_count}")
        self.stdout.write(f"Categories Skipped (already exist): {skipped_count}")
