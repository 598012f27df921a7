# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    email = models.EmailField(unique=True, null=True, blank=True)
    phone = models.CharField(max_length=20, blank=True)

    class Role(models.TextChoices):
        ADMIN = 'Admin'
        STAFF = 'Staff'

    role = models.CharField(max_length=30, choices=Role.choices, default=Role.STAFF)

    REQUIRED_FIELDS = []
    USERNAME_FIELD = 'username'

    @property
    def display_name(self):
        return self.get_full_name() or self.username

    @property
    def is_admin(self):
        return self.role == self.Role.ADMIN or self.is_superuser
