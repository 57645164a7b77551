from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Tournament",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date_created", models.DateTimeField(auto_now_add=True)),
                ("date_modified", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("format", models.CharField(choices=[("single_elimination", "Single elimination"), ("round_robin", "Round robin")], default="single_elimination", max_length=32)),
                ("status", models.CharField(choices=[("draft", "Draft"), ("registration_open", "Registration open"), ("in_progress", "In progress"), ("completed", "Completed"), ("cancelled", "Cancelled")], default="draft", max_length=32)),
                ("min_teams", models.PositiveIntegerField(default=2)),
                ("max_teams", models.PositiveIntegerField(default=16)),
                ("current_round", models.PositiveIntegerField(default=0)),
                ("total_rounds", models.PositiveIntegerField(default=0)),
                ("tiebreaker_rules", models.JSONField(blank=True, default=list)),
                ("points_per_win", models.IntegerField(default=3)),
                ("points_per_draw", models.IntegerField(default=1)),
                ("points_per_loss", models.IntegerField(default=0)),
                ("auto_complete", models.BooleanField(default=False, help_text="Complete an elimination tournament as soon as its final is decided.")),
                ("settings", models.JSONField(blank=True, default=dict)),
                ("start_date", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "ordering": ("-date_created",),
            },
        ),
        migrations.CreateModel(
            name="Participant",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date_created", models.DateTimeField(auto_now_add=True)),
                ("date_modified", models.DateTimeField(auto_now=True)),
                ("team_ref", models.CharField(max_length=255)),
                ("name", models.CharField(blank=True, max_length=255)),
                ("seed", models.PositiveIntegerField(blank=True, null=True)),
                ("status", models.CharField(choices=[("active", "Active"), ("eliminated", "Eliminated"), ("bye", "Bye")], default="active", max_length=32)),
                ("tournament", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="tournament.tournament")),
            ],
            options={
                "ordering": ("tournament", "id"),
                "unique_together": {("tournament", "team_ref")},
            },
        ),
        migrations.CreateModel(
            name="Match",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("date_created", models.DateTimeField(auto_now_add=True)),
                ("date_modified", models.DateTimeField(auto_now=True)),
                ("round", models.PositiveIntegerField()),
                ("match_number", models.PositiveIntegerField()),
                ("bracket_position", models.CharField(blank=True, max_length=16)),
                ("slot1_kind", models.CharField(choices=[("unassigned", "TBD"), ("bye", "Bye"), ("assigned", "Assigned")], default="unassigned", max_length=16)),
                ("slot2_kind", models.CharField(choices=[("unassigned", "TBD"), ("bye", "Bye"), ("assigned", "Assigned")], default="unassigned", max_length=16)),
                ("team1_score", models.PositiveIntegerField(blank=True, null=True)),
                ("team2_score", models.PositiveIntegerField(blank=True, null=True)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("in_progress", "In progress"), ("completed", "Completed"), ("bye", "Bye")], default="pending", max_length=32)),
                ("completed_at", models.DateTimeField(blank=True, null=True)),
                ("loser", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.RESTRICT, related_name="+", to="tournament.participant")),
                ("slot1", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.RESTRICT, related_name="+", to="tournament.participant")),
                ("slot2", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.RESTRICT, related_name="+", to="tournament.participant")),
                ("tournament", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, to="tournament.tournament")),
                ("winner", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.RESTRICT, related_name="+", to="tournament.participant")),
            ],
            options={
                "verbose_name_plural": "matches",
                "ordering": ("tournament", "round", "match_number"),
                "unique_together": {("tournament", "round", "match_number")},
            },
        ),
    ]
