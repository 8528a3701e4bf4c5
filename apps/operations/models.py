import uuid
from decimal import Decimal

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

EGGS_PER_CRATE = 30
SHEDS = ['Shed A', 'Shed B', 'Shed C', 'Shed D', 'Shed E']

UNIT_CHOICES = [
    ('bags', 'Bags'),
    ('kg', 'Kg'),
]


class UserManager(BaseUserManager):
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('The Email field must be set')
        email = self.normalize_email(email)
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', User.ROLE_MANAGER)
        extra_fields.setdefault('status', User.STATUS_ACTIVE)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password, **extra_fields)


class User(AbstractUser):
    ROLE_MANAGER = 'MANAGER'
    ROLE_WORKER = 'WORKER'
    ROLE_SALES_REP = 'SALES_REP'
    ROLE_CHOICES = [
        (ROLE_MANAGER, 'Manager'),
        (ROLE_WORKER, 'Worker'),
        (ROLE_SALES_REP, 'Sales Rep'),
    ]

    STATUS_ACTIVE = 'ACTIVE'
    STATUS_INACTIVE = 'INACTIVE'
    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_INACTIVE, 'Inactive'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True)
    full_name = models.CharField(max_length=255, blank=True)
    role = models.CharField(max_length=10, choices=ROLE_CHOICES, default=ROLE_WORKER)
    assigned_shed = models.CharField(max_length=50, blank=True, null=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ACTIVE)

    # Notification preferences
    enable_low_stock_alerts = models.BooleanField(default=False)
    enable_high_mortality_alerts = models.BooleanField(default=False)
    enable_daily_summary = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Remove username field and use email as the unique identifier
    username = None

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        ordering = ['full_name', 'email']

    def __str__(self):
        return self.email

    def save(self, *args, **kwargs):
        # Inactive profiles cannot sign in
        self.is_active = self.status == self.STATUS_ACTIVE
        super().save(*args, **kwargs)

    @property
    def display_name(self):
        return self.full_name or self.email or 'System'

    @property
    def is_manager(self):
        return self.role == self.ROLE_MANAGER


class FarmConfig(models.Model):
    """
    Farm-wide configuration. There is exactly one row (pk=1); use FarmConfig.load().
    """
    farm_name = models.CharField(max_length=255, default='My Poultry Farm')
    shed_count = models.PositiveIntegerField(default=0)
    default_currency = models.CharField(max_length=3, default='USD')
    timezone = models.CharField(max_length=64, default='UTC')
    initial_bird_count = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = 'Farm configuration'

    def __str__(self):
        return self.farm_name

    def save(self, *args, **kwargs):
        self.pk = 1
        super().save(*args, **kwargs)

    @classmethod
    def load(cls):
        config, _ = cls.objects.get_or_create(pk=1)
        return config


class ShedBirdCount(models.Model):
    shed = models.CharField(max_length=50, unique=True)
    count = models.PositiveIntegerField(default=0)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['shed']

    def __str__(self):
        return f"{self.shed}: {self.count} birds"


class EggCollection(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('operations.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='egg_collections')
    date = models.DateField()
    shed = models.CharField(max_length=50)
    collection_time = models.TimeField(null=True, blank=True)
    total_eggs = models.PositiveIntegerField()
    broken_eggs = models.PositiveIntegerField(default=0)
    crates = models.PositiveIntegerField(default=0, editable=False)
    pieces = models.PositiveIntegerField(default=0, editable=False)
    collected_by = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['date', 'shed'], name='eggcoll_date_shed_idx'),
        ]

    def __str__(self):
        return f"{self.shed} - {self.date}: {self.total_eggs} eggs"

    def save(self, *args, **kwargs):
        # Packaging units are always derived from the raw count
        self.crates, self.pieces = divmod(self.total_eggs, EGGS_PER_CRATE)
        super().save(*args, **kwargs)


class MortalityRecord(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('operations.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='mortality_records')
    date = models.DateField(default=timezone.localdate)
    shed = models.CharField(max_length=50)
    count = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    cause = models.CharField(max_length=255, blank=True)
    recorded_by = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['date', 'shed'], name='mortality_date_shed_idx'),
        ]

    def __str__(self):
        return f"{self.shed} - {self.date}: {self.count} dead"


class FeedType(models.Model):
    name = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class FeedStock(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('operations.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='feed_stock_entries')
    date = models.DateField()
    feed_type = models.CharField(max_length=100)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit = models.CharField(max_length=10, choices=UNIT_CHOICES, default='bags')
    supplier = models.CharField(max_length=255, blank=True)
    cost = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(Decimal('0'))])
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', '-created_at']
        verbose_name_plural = 'Feed stock'

    def __str__(self):
        return f"{self.feed_type} - {self.quantity} {self.unit}"


class FeedAllocation(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('operations.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='feed_allocations')
    date = models.DateField()
    shed = models.CharField(max_length=50)
    feed_type = models.CharField(max_length=100)
    quantity_allocated = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit = models.CharField(max_length=10, choices=UNIT_CHOICES, default='bags')
    allocated_by = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['date', 'shed'], name='feedalloc_date_shed_idx'),
        ]

    def __str__(self):
        return f"{self.shed} - {self.feed_type}: {self.quantity_allocated} {self.unit}"


class Sale(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('operations.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='sales')
    date = models.DateField()
    item_sold = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit = models.CharField(max_length=50)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0'))])
    total_price = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'), editable=False)
    customer_name = models.CharField(max_length=255, blank=True)
    recorded_by = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date', '-created_at']

    def __str__(self):
        return f"{self.item_sold} x{self.quantity} on {self.date}"

    def save(self, *args, **kwargs):
        self.total_price = Decimal(self.quantity) * Decimal(self.unit_price)
        super().save(*args, **kwargs)


class Task(models.Model):
    STATUS_PENDING = 'PENDING'
    STATUS_IN_PROGRESS = 'IN_PROGRESS'
    STATUS_COMPLETED = 'COMPLETED'
    STATUS_BLOCKED = 'BLOCKED'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_IN_PROGRESS, 'In Progress'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_BLOCKED, 'Blocked'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    description = models.TextField()
    assigned_to = models.ForeignKey('operations.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='assigned_tasks')
    created_by = models.ForeignKey('operations.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='created_tasks')
    due_date = models.DateField(null=True, blank=True)
    status = models.CharField(max_length=15, choices=STATUS_CHOICES, default=STATUS_PENDING)
    notes = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return self.description[:50]


class IssueReport(models.Model):
    CATEGORY_CHOICES = [
        ('EQUIPMENT', 'Equipment'),
        ('FEED_QUALITY', 'Feed Quality'),
        ('WATER', 'Water'),
        ('HEALTH', 'Health'),
        ('OTHER', 'Other'),
    ]

    STATUS_OPEN = 'OPEN'
    STATUS_RESOLVED = 'RESOLVED'
    STATUS_CHOICES = [
        (STATUS_OPEN, 'Open'),
        (STATUS_RESOLVED, 'Resolved'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('operations.User', on_delete=models.SET_NULL, null=True, blank=True, related_name='issue_reports')
    category = models.CharField(max_length=20, choices=CATEGORY_CHOICES)
    description = models.TextField()
    shed = models.CharField(max_length=50, blank=True)
    reported_by = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_OPEN)
    resolved_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.get_category_display()}: {self.description[:40]}"
