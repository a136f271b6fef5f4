from django.conf import settings
from django.db import models


class UserRole(models.Model):
    """
    Role assignment for a user account
    """

    ROLE_CHOICES = (
        ("admin", "Admin"),
        ("user", "User"),
    )

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="roles")
    role = models.CharField(max_length=10, choices=ROLE_CHOICES)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.user.username} - {self.role}"

    class Meta:
        db_table = "user_roles"
        unique_together = ("user", "role")
