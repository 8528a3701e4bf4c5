from django.core.management.base import BaseCommand
from django.contrib.auth import get_user_model

from apps.operations.models import SHEDS, FarmConfig, FeedType, ShedBirdCount
from apps.operations.services import save_birds_per_shed

User = get_user_model()

FEED_TYPES = ['Layers Mash', 'Growers Mash', 'Chick Mash', 'Layers Pellets']


class Command(BaseCommand):
    help = 'Seed the farm configuration, shed bird counts, feed types and a manager account'

    def add_arguments(self, parser):
        parser.add_argument('--farm-name', default='My Poultry Farm')
        parser.add_argument('--birds-per-shed', type=int, default=1000)
        parser.add_argument('--manager-email', default='manager@farm.local')
        parser.add_argument('--manager-password', default='manager123')

    def handle(self, *args, **options):
        self.stdout.write('Seeding initial data...')

        config = FarmConfig.load()
        config.farm_name = options['farm_name']
        config.shed_count = len(SHEDS)
        config.save()

        # Existing counts are left alone so a re-run does not reset the flock
        if not ShedBirdCount.objects.exists():
            save_birds_per_shed([
                {'shed': shed, 'count': options['birds_per_shed']} for shed in SHEDS
            ])
            self.stdout.write(f"Set {options['birds_per_shed']} birds in each of {len(SHEDS)} sheds")

        for name in FEED_TYPES:
            FeedType.objects.get_or_create(name=name)

        email = options['manager_email']
        if User.objects.filter(email=email).exists():
            self.stdout.write(f"Manager {email} already exists")
        else:
            User.objects.create_user(
                email=email,
                password=options['manager_password'],
                full_name='Farm Manager',
                role=User.ROLE_MANAGER,
                is_staff=True,
            )
            self.stdout.write(f"Created manager: {email}")

        self.stdout.write(self.style.SUCCESS('Successfully seeded initial data!'))
