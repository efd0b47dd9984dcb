from django.contrib.auth.models import (
    AbstractBaseUser,
    BaseUserManager,
    PermissionsMixin,
)
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    use_in_migrations = True

    def create_user(self, username, password=None, **extra_fields):
        if not username:
            raise ValueError("The username must be set")
        username = self.model.normalize_username(username)
        user = self.model(username=username, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, username, password=None, **extra_fields):
        extra_fields.setdefault("role", User.Role.ADMIN)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("permissions", list(User.Permission.values))

        if extra_fields.get("role") != User.Role.ADMIN:
            raise ValueError("Superuser must have role=admin.")

        return self.create_user(username, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    A restaurant staff account.

    Role gates the API; the permission list is carried for the staff UI and
    granted in full to the bootstrap admin.
    """

    class Role(models.TextChoices):
        ADMIN = "admin", _("Admin")
        MANAGER = "manager", _("Manager")
        STAFF = "staff", _("Staff")

    class Permission(models.TextChoices):
        MANAGE_MENU = "manage-menu", _("Manage menu")
        MANAGE_ORDERS = "manage-orders", _("Manage orders")
        MANAGE_TABLES = "manage-tables", _("Manage tables")
        VIEW_ANALYTICS = "view-analytics", _("View analytics")
        MANAGE_STAFF = "manage-staff", _("Manage staff")

    username = models.CharField(
        _("username"),
        max_length=150,
        unique=True,
        error_messages={"unique": _("A staff member with that username already exists.")},
    )
    role = models.CharField(
        _("role"), max_length=20, choices=Role.choices, default=Role.STAFF
    )
    permissions = models.JSONField(_("permissions"), default=list, blank=True)
    is_active = models.BooleanField(
        _("active"),
        default=True,
        help_text=_("Deactivated accounts are rejected even with a valid token."),
    )
    date_joined = models.DateTimeField(_("date joined"), default=timezone.now)
    updated_at = models.DateTimeField(_("updated at"), auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "username"
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ["username"]
        indexes = [
            models.Index(fields=["role", "is_active"], name="users_role_active_idx"),
        ]

    def __str__(self):
        return self.username

    @property
    def is_staff(self):
        # Django admin site access
        return self.role == self.Role.ADMIN

    @property
    def is_admin(self):
        return self.role == self.Role.ADMIN

    @property
    def is_manager_or_higher(self):
        return self.role in (self.Role.ADMIN, self.Role.MANAGER)


class SetupLock(models.Model):
    """
    Single row that first-run setup locks before checking for staff.

    Locking the (empty) user table locks nothing, so concurrent setup calls
    queue on this row instead.
    """

    SINGLETON_ID = 1

    id = models.PositiveSmallIntegerField(primary_key=True, default=SINGLETON_ID, editable=False)

    class Meta:
        verbose_name = _("setup lock")

    def __str__(self):
        return "Setup lock"

    @classmethod
    def acquire(cls):
        """Lock the row for the rest of the current transaction."""
        cls.objects.get_or_create(pk=cls.SINGLETON_ID)
        return cls.objects.select_for_update().get(pk=cls.SINGLETON_ID)
