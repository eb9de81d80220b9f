from django.db import migrations

DEFAULT_CATEGORIES = [
    ('Plumber', 'Water supply, drainage, and pipe fitting services'),
    ('Electrician', 'Electrical installation, repair, and maintenance'),
    ('Carpenter', 'Woodwork, furniture making, and repair services'),
    ('Painter', 'Interior and exterior painting services'),
    ('Mason', 'Construction and bricklaying services'),
    ('House Cleaning', 'Residential cleaning services'),
    ('Gardener', 'Garden maintenance and landscaping'),
    ('AC Technician', 'AC installation, repair, and servicing'),
    ('Mechanic', 'Vehicle repair and maintenance'),
    ('Welder', 'Metal welding and fabrication services'),
]


def seed_categories(apps, schema_editor):
    Category = apps.get_model('jobs', 'Category')
    for name, description in DEFAULT_CATEGORIES:
        Category.objects.using(schema_editor.connection.alias).get_or_create(
            name=name, defaults={'description': description}
        )


class Migration(migrations.Migration):

    dependencies = [
        ('jobs', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(seed_categories, migrations.RunPython.noop),
    ]
