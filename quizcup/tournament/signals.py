from django.dispatch import Signal

# Sent after a tournament mutation commits. Receivers get tournament_id and
# change (the service operation name) and should recompute their views.
tournament_changed = Signal()
