"""Data migration to create the role groups."""

from django.db import migrations

ROLE_GROUPS = {
    "Bloggers": ("blog", "blogpost", "manage_posts", "Can write and publish blog posts"),
    "Site Admins": None,
}


def seed_role_groups(apps, schema_editor):
    """Create role groups; Bloggers carries the blog management permission."""
    Group = apps.get_model("auth", "Group")
    Permission = apps.get_model("auth", "Permission")
    ContentType = apps.get_model("contenttypes", "ContentType")

    for group_name, perm_spec in ROLE_GROUPS.items():
        group, _ = Group.objects.get_or_create(name=group_name)
        if perm_spec is None:
            continue
        app_label, model, codename, name = perm_spec
        ct, _ = ContentType.objects.get_or_create(app_label=app_label, model=model)
        perm, _ = Permission.objects.get_or_create(
            codename=codename, content_type=ct, defaults={"name": name}
        )
        group.permissions.add(perm)


def reverse_seed(apps, schema_editor):
    """Remove the role groups (users lose their roles)."""
    Group = apps.get_model("auth", "Group")
    Group.objects.filter(name__in=list(ROLE_GROUPS)).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("blog", "0001_initial"),
        ("auth", "0012_alter_user_first_name_max_length"),
        ("contenttypes", "0002_remove_content_type_name"),
    ]

    operations = [
        migrations.RunPython(seed_role_groups, reverse_seed),
    ]
