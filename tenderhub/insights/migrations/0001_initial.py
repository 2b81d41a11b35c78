import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('bidding', '0001_initial'),
        ('tenders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='AiInsight',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('type', models.CharField(choices=[('price_trend', 'Price Trend'), ('recommendation', 'Recommendation'), ('warning', 'Warning')], max_length=30)),
                ('title', models.CharField(max_length=255)),
                ('description', models.TextField()),
                ('severity', models.CharField(choices=[('info', 'Info'), ('success', 'Success'), ('warning', 'Warning'), ('alert', 'Alert')], default='info', max_length=20)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('generated', models.BooleanField(default=False, help_text='Created by the insight generator rather than by hand')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('bidder', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='ai_insights', to='bidding.bidder')),
                ('tender', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='ai_insights', to='tenders.tender')),
            ],
            options={
                'db_table': 'ai_insights',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['tender'], name='idx_insight_tender'),
                    models.Index(fields=['bidder'], name='idx_insight_bidder'),
                ],
            },
        ),
    ]
