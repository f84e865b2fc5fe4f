# company/models.py

from django.core.exceptions import ValidationError
from django.db import models


class CompanyProfile(models.Model):
    """
    Singleton company profile. Use CompanyProfile.load() to get the instance.

    stock_order_method is the same-date tie-break used by the stock ledger:
    - FIFO: purchase receipts before sales on the same date
    - LIFO: sales before purchase receipts on the same date
    - blank: no policy, same-date movements keep encounter order
    """

    class StockOrderMethod(models.TextChoices):
        FIFO = "FIFO", "First In, First Out"
        LIFO = "LIFO", "Last In, First Out"

    company_name = models.CharField(max_length=200, blank=True, default="")
    address = models.TextField(blank=True, default="")
    phone = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")

    currency_code = models.CharField(max_length=3, default="USD")

    stock_order_method = models.CharField(
        max_length=4,
        choices=StockOrderMethod.choices,
        blank=True,
        default=StockOrderMethod.FIFO,
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "company profile"

    def clean(self):
        code = (self.currency_code or "").strip()
        if len(code) != 3 or not code.isalpha():
            raise ValidationError({"currency_code": "currency_code must be a 3-letter ISO code"})

    def save(self, *args, **kwargs):
        # Enforce singleton: always use pk=1
        self.pk = 1
        # An unsaved instance replaces the existing row instead of failing the unique check.
        self._state.adding = not type(self).objects.filter(pk=1).exists()
        self.currency_code = (self.currency_code or "").strip().upper()
        self.full_clean()
        super().save(*args, **kwargs)

    @classmethod
    def load(cls):
        obj, _ = cls.objects.get_or_create(pk=1)
        return obj

    def __str__(self):
        return self.company_name or "Company Profile"


class StaffMember(models.Model):
    """
    Employee record. Name and position are stored in sentence case.
    """

    name = models.CharField(max_length=200)
    position = models.CharField(max_length=100)
    contact_number = models.CharField(max_length=50)
    whatsapp_number = models.CharField(max_length=50, blank=True, default="")
    email = models.EmailField(blank=True, default="")
    nic = models.CharField(max_length=20, blank=True, default="")
    date_of_birth = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def clean(self):
        if not (self.name or "").strip():
            raise ValidationError({"name": "Staff name is required"})
        if not (self.contact_number or "").strip():
            raise ValidationError({"contact_number": "Contact number is required"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.name} ({self.position})"
