# Generated manually to restrict PurchaseOrder.type to purchase/return

from django.db import migrations, models


def fill_blank_types(apps, schema_editor):
    PurchaseOrder = apps.get_model('purchasing', 'PurchaseOrder')
    PurchaseOrder.objects.filter(type='').update(type='purchase')


class Migration(migrations.Migration):

    dependencies = [
        ('purchasing', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(fill_blank_types, migrations.RunPython.noop),
        migrations.AlterField(
            model_name='purchaseorder',
            name='type',
            field=models.CharField(choices=[('purchase', 'Purchase'), ('return', 'Return')], default='purchase', max_length=20),
        ),
    ]
