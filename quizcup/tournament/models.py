import reversion
from django.db import models

from quizcup.tournament_core.scoring import ScoringSystem

FORMAT_OPTIONS = (
    ("single_elimination", "Single elimination"),
    ("round_robin", "Round robin"),
)

TOURNAMENT_STATUS_OPTIONS = (
    ("draft", "Draft"),
    ("registration_open", "Registration open"),
    ("in_progress", "In progress"),
    ("completed", "Completed"),
    ("cancelled", "Cancelled"),
)

PARTICIPANT_STATUS_OPTIONS = (
    ("active", "Active"),
    ("eliminated", "Eliminated"),
    ("bye", "Bye"),
)

MATCH_STATUS_OPTIONS = (
    ("pending", "Pending"),
    ("in_progress", "In progress"),
    ("completed", "Completed"),
    ("bye", "Bye"),
)

SLOT_KIND_OPTIONS = (
    ("unassigned", "TBD"),
    ("bye", "Bye"),
    ("assigned", "Assigned"),
)


# -------------------------------------------------------------------------------
class _BaseModel(models.Model):
    date_created = models.DateTimeField(auto_now_add=True)
    date_modified = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


# -------------------------------------------------------------------------------
@reversion.register()
class Tournament(_BaseModel):
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    format = models.CharField(
        max_length=32, choices=FORMAT_OPTIONS, default="single_elimination"
    )
    status = models.CharField(
        max_length=32, choices=TOURNAMENT_STATUS_OPTIONS, default="draft"
    )
    min_teams = models.PositiveIntegerField(default=2)
    max_teams = models.PositiveIntegerField(default=16)
    current_round = models.PositiveIntegerField(default=0)
    total_rounds = models.PositiveIntegerField(default=0)

    # Ordered subset of points, head_to_head, points_difference, points_scored
    tiebreaker_rules = models.JSONField(default=list, blank=True)
    points_per_win = models.IntegerField(default=3)
    points_per_draw = models.IntegerField(default=1)
    points_per_loss = models.IntegerField(default=0)
    auto_complete = models.BooleanField(
        default=False,
        help_text="Complete an elimination tournament as soon as its final is decided.",
    )

    # Quiz settings: rounds per match, time per round, question categories
    settings = models.JSONField(default=dict, blank=True)
    start_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ("-date_created",)

    def __str__(self):
        return self.name

    @property
    def scoring(self):
        return ScoringSystem(
            points_per_win=self.points_per_win,
            points_per_draw=self.points_per_draw,
            points_per_loss=self.points_per_loss,
        )

    @property
    def is_elimination(self):
        return self.format == "single_elimination"

    def match_settings(self):
        return {
            "rounds_per_match": self.settings.get("rounds_per_match", 3),
            "time_per_round": self.settings.get("time_per_round", 60),
            "categories": self.settings.get("categories", []),
        }


# -------------------------------------------------------------------------------
@reversion.register()
class Participant(_BaseModel):
    tournament = models.ForeignKey(Tournament, on_delete=models.CASCADE)
    team_ref = models.CharField(max_length=255)
    name = models.CharField(max_length=255, blank=True)
    seed = models.PositiveIntegerField(null=True, blank=True)
    status = models.CharField(
        max_length=32, choices=PARTICIPANT_STATUS_OPTIONS, default="active"
    )

    class Meta:
        unique_together = ("tournament", "team_ref")
        ordering = ("tournament", "id")

    def __str__(self):
        return self.name or self.team_ref


# -------------------------------------------------------------------------------
@reversion.register()
class Match(_BaseModel):
    tournament = models.ForeignKey(Tournament, on_delete=models.CASCADE)
    round = models.PositiveIntegerField()
    match_number = models.PositiveIntegerField()
    bracket_position = models.CharField(max_length=16, blank=True)

    slot1_kind = models.CharField(
        max_length=16, choices=SLOT_KIND_OPTIONS, default="unassigned"
    )
    slot1 = models.ForeignKey(
        Participant,
        null=True,
        blank=True,
        on_delete=models.RESTRICT,
        related_name="+",
    )
    slot2_kind = models.CharField(
        max_length=16, choices=SLOT_KIND_OPTIONS, default="unassigned"
    )
    slot2 = models.ForeignKey(
        Participant,
        null=True,
        blank=True,
        on_delete=models.RESTRICT,
        related_name="+",
    )

    team1_score = models.PositiveIntegerField(null=True, blank=True)
    team2_score = models.PositiveIntegerField(null=True, blank=True)
    winner = models.ForeignKey(
        Participant,
        null=True,
        blank=True,
        on_delete=models.RESTRICT,
        related_name="+",
    )
    loser = models.ForeignKey(
        Participant,
        null=True,
        blank=True,
        on_delete=models.RESTRICT,
        related_name="+",
    )
    status = models.CharField(
        max_length=32, choices=MATCH_STATUS_OPTIONS, default="pending"
    )
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = ("tournament", "round", "match_number")
        ordering = ("tournament", "round", "match_number")
        verbose_name_plural = "matches"

    def __str__(self):
        return "%s - Round %d Match %d" % (self.tournament, self.round, self.match_number)

    def _slot_label(self, kind, participant):
        if kind == "bye":
            return "Bye"
        if kind == "assigned" and participant is not None:
            return str(participant)
        return "TBD"

    def slot1_label(self):
        return self._slot_label(self.slot1_kind, self.slot1)

    def slot2_label(self):
        return self._slot_label(self.slot2_kind, self.slot2)
