from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from . import cache as page_cache
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

# Pages whose rendered data each model feeds
AFFECTED_PAGES = {
    EggCollection: (page_cache.PAGE_EGG_COLLECTION, page_cache.PAGE_DASHBOARD, page_cache.PAGE_REPORTS),
    MortalityRecord: (page_cache.PAGE_MORTALITY, page_cache.PAGE_DASHBOARD, page_cache.PAGE_REPORTS),
    FeedAllocation: (page_cache.PAGE_INVENTORY, page_cache.PAGE_DASHBOARD, page_cache.PAGE_REPORTS),
    FeedStock: (page_cache.PAGE_INVENTORY, page_cache.PAGE_DASHBOARD),
    FeedType: (page_cache.PAGE_INVENTORY,),
    IssueReport: (page_cache.PAGE_INVENTORY,),
    Sale: (page_cache.PAGE_SALES, page_cache.PAGE_DASHBOARD),
    Task: (page_cache.PAGE_TASKS,),
    FarmConfig: (page_cache.PAGE_SETTINGS, page_cache.PAGE_DASHBOARD),
    ShedBirdCount: (page_cache.PAGE_SETTINGS, page_cache.PAGE_DASHBOARD),
    User: (page_cache.PAGE_USERS,),
}


@receiver(post_save)
@receiver(post_delete)
def invalidate_affected_pages(sender, **kwargs):
    pages = AFFECTED_PAGES.get(sender)
    if pages and not kwargs.get('raw', False):
        page_cache.invalidate(*pages)
