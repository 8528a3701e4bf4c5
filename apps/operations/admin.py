from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import (
    EggCollection,
    FarmConfig,
    FeedAllocation,
    FeedStock,
    FeedType,
    IssueReport,
    MortalityRecord,
    Sale,
    ShedBirdCount,
    Task,
    User,
)

admin.site.register(FeedType)
admin.site.register(ShedBirdCount)
admin.site.register(FarmConfig)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    ordering = ('email',)
    list_display = ('email', 'full_name', 'role', 'assigned_shed', 'status', 'is_staff')
    list_filter = ('role', 'status', 'is_staff')
    search_fields = ('email', 'full_name')
    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Profile', {'fields': ('full_name', 'role', 'assigned_shed', 'status')}),
        ('Notifications', {'fields': ('enable_low_stock_alerts', 'enable_high_mortality_alerts', 'enable_daily_summary')}),
        ('Permissions', {'fields': ('is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Important dates', {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'full_name', 'role', 'password1', 'password2'),
        }),
    )


@admin.register(EggCollection)
class EggCollectionAdmin(admin.ModelAdmin):
    list_display = ('date', 'shed', 'total_eggs', 'broken_eggs', 'crates', 'pieces', 'collected_by')
    list_filter = ('date', 'shed')
    search_fields = ('shed', 'collected_by')
    readonly_fields = ('crates', 'pieces')


@admin.register(MortalityRecord)
class MortalityRecordAdmin(admin.ModelAdmin):
    list_display = ('date', 'shed', 'count', 'cause', 'recorded_by')
    list_filter = ('date', 'shed')
    search_fields = ('shed', 'cause', 'recorded_by')


@admin.register(FeedStock)
class FeedStockAdmin(admin.ModelAdmin):
    list_display = ('date', 'feed_type', 'quantity', 'unit', 'supplier', 'cost')
    list_filter = ('unit', 'feed_type')
    search_fields = ('feed_type', 'supplier')


@admin.register(FeedAllocation)
class FeedAllocationAdmin(admin.ModelAdmin):
    list_display = ('date', 'shed', 'feed_type', 'quantity_allocated', 'unit', 'allocated_by')
    list_filter = ('unit', 'shed')
    search_fields = ('shed', 'feed_type', 'allocated_by')


@admin.register(Sale)
class SaleAdmin(admin.ModelAdmin):
    list_display = ('date', 'item_sold', 'quantity', 'unit', 'unit_price', 'total_price', 'customer_name')
    list_filter = ('date',)
    search_fields = ('item_sold', 'customer_name')
    readonly_fields = ('total_price',)


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    list_display = ('description', 'assigned_to', 'due_date', 'status')
    list_filter = ('status',)
    search_fields = ('description', 'notes', 'assigned_to__email')


@admin.register(IssueReport)
class IssueReportAdmin(admin.ModelAdmin):
    list_display = ('category', 'shed', 'reported_by', 'status', 'created_at')
    list_filter = ('category', 'status')
    search_fields = ('description', 'reported_by')
