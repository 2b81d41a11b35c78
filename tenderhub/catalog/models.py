from django.db import models


class Category(models.Model):
    """Categories shared by inventory items and tender items"""
    CAT_TYPE_CHOICES = [
        ('EQUIPMENT', 'Equipment'),
        ('MATERIALS', 'Materials'),
        ('SERVICES', 'Services'),
    ]

    name = models.CharField(max_length=200, db_index=True)
    description = models.TextField(blank=True, default='')
    code = models.CharField(max_length=50, unique=True, blank=True, null=True)
    cat_type = models.CharField(max_length=20, choices=CAT_TYPE_CHOICES)
    parent = models.ForeignKey('self', on_delete=models.SET_NULL, null=True, blank=True, related_name='children')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.code})" if self.code else self.name

    def has_dependents(self):
        """True when subcategories, inventory items, tenders or tender items point here"""
        return (
            self.children.exists()
            or self.inventory_items.exists()
            or self.tenders.exists()
            or self.tender_items.exists()
        )

    class Meta:
        db_table = 'categories'
        verbose_name_plural = 'categories'
        ordering = ['name']


class InventoryCategory(models.Model):
    """Stand-alone inventory classification codes"""
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True, default='')
    code = models.CharField(max_length=50)

    def __str__(self):
        return f"{self.code} - {self.name}"

    class Meta:
        db_table = 'inventory_categories'
        verbose_name_plural = 'inventory categories'
        ordering = ['code']
