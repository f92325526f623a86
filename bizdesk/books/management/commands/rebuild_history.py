"""
Management command to recompute MonthHistory/YearHistory from Transactions
"""
from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from bizdesk.books.services import rebuild_history


class Command(BaseCommand):
    help = "Recomputes the daily and monthly income/expense aggregates from recorded transactions"

    def add_arguments(self, parser):
        parser.add_argument(
            '--username',
            help='Only rebuild this user (default: every user)',
        )

    def handle(self, *args, **options):
        User = get_user_model()
        users = User.objects.all()
        if options['username']:
            users = users.filter(username=options['username'])
            if not users.exists():
                raise CommandError(f"User '{options['username']}' does not exist")

        for user in users.order_by('pk'):
            days, months = rebuild_history(user)
            self.stdout.write(f"  {user.username}: {days} day rows, {months} month rows")

        self.stdout.write(self.style.SUCCESS("History rebuilt."))
